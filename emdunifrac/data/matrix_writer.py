"""Writing UniFrac distance matrices to disk."""

import logging
from pathlib import Path

import pandas as pd
from skbio import DistanceMatrix

logger = logging.getLogger(__name__)


def write_distance_matrix(distances: DistanceMatrix, output_path: str, precision: int = 6) -> None:
    """Write a distance matrix as a square tab-delimited file.

    The header row is ``Sample`` followed by the sample IDs; every other row
    is a sample ID followed by its distances.

    Args:
        distances: Distance matrix to write
        output_path: Destination file path (parent directories are created)
        precision: Number of decimal places per value
    """
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")

    ids = list(distances.ids)
    frame = pd.DataFrame(distances.data, index=ids, columns=ids)

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output_path_obj, sep="\t", float_format=f"%.{precision}f", index_label="Sample")
    logger.info(f"Distance matrix ({len(ids)} x {len(ids)}) saved to {output_path}")
