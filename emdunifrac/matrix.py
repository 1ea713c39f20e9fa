"""Parallel computation of the full pairwise UniFrac distance matrix.

Every unordered sample pair is an independent task. Pairs are split into
fixed chunks and handed to a thread pool; each chunk writes its results into
the disjoint cells (i, j) and (j, i) of a shared matrix. The diagonal is
left at zero without computation.

The per-pair loop is pure Python and holds the GIL, so extra threads share
the tree and vectors without copying but give little wall-clock speedup.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from itertools import combinations, islice
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from skbio import DistanceMatrix
from tqdm import tqdm

from emdunifrac.config import UniFracConfig, validate_metric
from emdunifrac.emd import emd_unifrac
from emdunifrac.exceptions import DimensionMismatchError
from emdunifrac.projection import SampleCounts, project_table
from emdunifrac.tree import TreeStructure

logger = logging.getLogger(__name__)


def iter_pair_chunks(n_samples: int, chunk_size: int) -> Iterator[List[Tuple[int, int]]]:
    """Yield all pairs (i, j) with i < j in chunks of at most chunk_size."""
    pairs = combinations(range(n_samples), 2)
    while True:
        chunk = list(islice(pairs, chunk_size))
        if not chunk:
            return
        yield chunk


def _compute_chunk(
    tree: TreeStructure,
    vectors: np.ndarray,
    pairs: List[Tuple[int, int]],
    metric: str,
    out: np.ndarray,
) -> int:
    """Compute distances for a chunk of pairs and store them symmetrically."""
    for i, j in pairs:
        distance = emd_unifrac(tree, vectors[i], vectors[j], metric)
        out[i, j] = distance
        out[j, i] = distance
    return len(pairs)


def compute_distance_matrix(
    tree: TreeStructure,
    vectors: np.ndarray,
    sample_ids: Sequence[str],
    metric: str = "unweighted",
    num_threads: Optional[int] = None,
    chunk_size: Optional[int] = None,
    show_progress: bool = False,
) -> DistanceMatrix:
    """Compute the symmetric S x S UniFrac distance matrix.

    The call returns only once every pair has been computed. The first
    failing chunk aborts the batch: pending chunks are cancelled and its
    error is raised, so no partial matrix is ever returned.

    Args:
        tree: Shared tree structure
        vectors: Projected abundance vectors, shape [N_samples, N_nodes]
        sample_ids: Sample IDs matching the rows of ``vectors``
        metric: "weighted" or "unweighted", applied to every pair
        num_threads: Worker pool size. If None, uses all available CPU cores.
        chunk_size: Pairs per worker task. If None, derived from num_threads.
        show_progress: Display a tqdm progress bar over chunks

    Returns:
        skbio.DistanceMatrix with zero diagonal, ordered like ``sample_ids``

    Raises:
        ValueError: If metric is invalid or there are no samples
        DimensionMismatchError: If vectors do not match the tree or sample IDs
    """
    validate_metric(metric)
    config = UniFracConfig(
        metric=metric,
        num_threads=num_threads,
        chunk_size=chunk_size,
        show_progress=show_progress,
    )

    vectors = np.asarray(vectors, dtype=np.float64)
    sample_ids = list(sample_ids)
    n_samples = len(sample_ids)
    if n_samples == 0:
        raise ValueError("At least one sample is required to build a distance matrix")
    if vectors.ndim != 2 or vectors.shape != (n_samples, tree.n_nodes):
        raise DimensionMismatchError(
            "Abundance vectors do not match the tree and sample IDs",
            context={
                "vectors_shape": vectors.shape,
                "n_samples": n_samples,
                "n_nodes": tree.n_nodes,
            },
        )

    n_pairs = n_samples * (n_samples - 1) // 2
    chunk = config.resolve_chunk_size(n_pairs)
    n_chunks = -(-n_pairs // chunk)
    logger.info(
        f"Computing {metric} UniFrac for {n_samples:,} samples "
        f"({n_pairs:,} pairs in {n_chunks:,} chunks, {config.num_threads} threads)"
    )

    distances = np.zeros((n_samples, n_samples), dtype=np.float64)
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=config.num_threads) as executor:
        futures = [
            executor.submit(_compute_chunk, tree, vectors, pairs, metric, distances)
            for pairs in iter_pair_chunks(n_samples, chunk)
        ]
        try:
            for future in tqdm(
                as_completed(futures),
                total=len(futures),
                desc=f"{metric} UniFrac",
                unit="chunk",
                disable=not config.show_progress,
            ):
                future.result()
        except BaseException:
            for future in futures:
                future.cancel()
            logger.error("Distance matrix computation aborted; discarding partial results")
            raise

    elapsed = time.time() - start_time
    logger.info(f"Computation complete in {elapsed:.1f} seconds")

    return DistanceMatrix(distances, ids=sample_ids)


def unifrac_matrix(
    tree: TreeStructure,
    samples: Union[Mapping[str, SampleCounts], pd.DataFrame],
    config: Optional[UniFracConfig] = None,
    sample_ids: Optional[Sequence[str]] = None,
) -> DistanceMatrix:
    """Project every sample and compute the full distance matrix.

    Args:
        tree: Shared tree structure
        samples: Mapping from sample ID to {taxon: count}, or a taxa-by-samples DataFrame
        config: Run configuration (default: unweighted, all CPU cores)
        sample_ids: Optional sample order

    Returns:
        skbio.DistanceMatrix of pairwise UniFrac distances
    """
    if config is None:
        config = UniFracConfig()
    sample_ids, vectors = project_table(samples, tree, metric=config.metric, sample_ids=sample_ids)
    return compute_distance_matrix(
        tree,
        vectors,
        sample_ids,
        metric=config.metric,
        num_threads=config.num_threads,
        chunk_size=config.chunk_size,
        show_progress=config.show_progress,
    )
