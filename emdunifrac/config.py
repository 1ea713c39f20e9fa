"""Run-wide configuration for UniFrac distance matrix computation."""

import os
from dataclasses import dataclass
from typing import Optional

VALID_METRICS = ("weighted", "unweighted")


def validate_metric(metric: str) -> str:
    """Validate a UniFrac metric name.

    Args:
        metric: Metric name ("weighted" or "unweighted")

    Returns:
        The metric name, unchanged

    Raises:
        ValueError: If metric is not a supported UniFrac variant
    """
    if metric not in VALID_METRICS:
        raise ValueError(f"Invalid metric: {metric}. Must be 'weighted' or 'unweighted'")
    return metric


def default_num_threads() -> int:
    """Return the number of worker threads matching available hardware parallelism."""
    return max(1, os.cpu_count() or 1)


@dataclass
class UniFracConfig:
    """Configuration shared by every pairwise task of one run.

    Args:
        metric: "weighted" or "unweighted" (default: "unweighted").
        num_threads: Worker pool size. If None, uses all available CPU cores.
        chunk_size: Number of sample pairs per worker task. If None, pairs are
                    split into roughly four chunks per worker.
        precision: Decimal places used when writing the distance matrix.
        show_progress: Display a progress bar while pair chunks complete.
    """

    metric: str = "unweighted"
    num_threads: Optional[int] = None
    chunk_size: Optional[int] = None
    precision: int = 6
    show_progress: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        validate_metric(self.metric)

        if self.num_threads is None:
            self.num_threads = default_num_threads()
        elif self.num_threads <= 0:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")

        if self.chunk_size is not None and self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")

    @property
    def weighted(self) -> bool:
        """Whether the run computes weighted UniFrac."""
        return self.metric == "weighted"

    def resolve_chunk_size(self, n_pairs: int) -> int:
        """Number of pairs each worker task should process.

        Args:
            n_pairs: Total number of sample pairs in the batch

        Returns:
            Positive chunk size
        """
        if self.chunk_size is not None:
            return self.chunk_size
        n_chunks = 4 * self.num_threads
        return max(1, -(-n_pairs // n_chunks))
