"""Sample-by-taxon count table loading for EMDUniFrac.

Tab-delimited tables have taxa as rows and samples as columns: the first
row is ``<label>\\t<sample_1>\\t<sample_2>...`` and every other row is
``<taxon>\\t<count_1>\\t<count_2>...``. Files ending in ``.biom`` are read
with the biom-format library instead.
"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple

import biom
import numpy as np
import pandas as pd

from emdunifrac.exceptions import DataLoadError

logger = logging.getLogger(__name__)

SampleTable = Dict[str, Dict[str, float]]


def _read_biom(path: str) -> pd.DataFrame:
    """Read a BIOM table as a dense taxa-by-samples DataFrame."""
    try:
        table = biom.load_table(path)
    except Exception as e:
        raise DataLoadError(
            f"Error loading BIOM table from {path}: {e}",
            context={"file_path": path},
        ) from e
    return table.to_dataframe(dense=True)


def _read_tsv(path: str) -> pd.DataFrame:
    """Read a tab-delimited taxa-by-samples table."""
    try:
        frame = pd.read_csv(path, sep="\t", index_col=0, dtype=str, keep_default_na=False)
    except Exception as e:
        raise DataLoadError(
            f"Error reading feature table from {path}: {e}",
            context={"file_path": path},
        ) from e

    frame.index = frame.index.astype(str)
    frame = frame.replace("", "0")
    try:
        return frame.apply(pd.to_numeric)
    except (TypeError, ValueError) as e:
        raise DataLoadError(
            f"Feature table contains non-numeric counts: {e}",
            context={"file_path": path},
        ) from e


def table_to_samples(frame: pd.DataFrame) -> Tuple[List[str], SampleTable]:
    """Convert a taxa-by-samples DataFrame into per-sample count mappings.

    Only non-zero counts are kept, since taxa missing from a sample are
    treated as count 0 downstream.

    Args:
        frame: DataFrame with taxa as index and samples as columns

    Returns:
        Tuple of (sample_ids, {sample_id: {taxon: count}})

    Raises:
        DataLoadError: If taxa or sample IDs are duplicated
    """
    if not frame.index.is_unique:
        duplicated = sorted(set(frame.index[frame.index.duplicated()]))
        raise DataLoadError("Duplicate taxa in feature table", context={"taxa": duplicated[:5]})
    if not frame.columns.is_unique:
        duplicated = sorted(set(frame.columns[frame.columns.duplicated()]))
        raise DataLoadError("Duplicate sample IDs in feature table", context={"samples": duplicated[:5]})

    sample_ids = [str(column) for column in frame.columns]
    values = frame.to_numpy(dtype=np.float64)
    taxa = [str(taxon) for taxon in frame.index]

    samples: SampleTable = {}
    for col, sample_id in enumerate(sample_ids):
        column = values[:, col]
        nonzero = np.flatnonzero(column != 0)
        samples[sample_id] = {taxa[row]: float(column[row]) for row in nonzero}
    return sample_ids, samples


def load_table(path: str) -> Tuple[List[str], SampleTable]:
    """Load a feature table from file.

    Args:
        path: Path to a tab-delimited table or a .biom file

    Returns:
        Tuple of (sample_ids, {sample_id: {taxon: count}})

    Raises:
        FileNotFoundError: If the file doesn't exist
        DataLoadError: If the file cannot be read as a count table
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Feature table not found: {path}")

    if path_obj.suffix.lower() == ".biom":
        frame = _read_biom(str(path))
    else:
        frame = _read_tsv(str(path))

    sample_ids, samples = table_to_samples(frame)
    logger.info(f"Loaded table from {path}: {len(sample_ids)} samples, {len(frame.index)} taxa")
    return sample_ids, samples
