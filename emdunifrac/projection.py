"""Projection of per-sample taxon counts onto the tree's node indexing.

An abundance vector has one entry per tree node. Leaf entries hold the
sample's normalized abundance (weighted) or presence indicator (unweighted);
internal entries are zero and only get filled inside the pairwise engine.
"""

import logging
import math
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from emdunifrac.config import validate_metric
from emdunifrac.exceptions import (
    EMDUniFracError,
    EmptySampleError,
    InvalidAbundanceError,
    UnknownTaxonError,
)
from emdunifrac.tree import TreeStructure

logger = logging.getLogger(__name__)

SampleCounts = Mapping[str, float]


def project_sample(
    counts: SampleCounts,
    tree: TreeStructure,
    metric: str = "weighted",
    sample_id: Optional[str] = None,
) -> np.ndarray:
    """Project one sample's raw counts onto the tree.

    Taxa present in the tree but absent from ``counts`` are treated as count 0.

    Args:
        counts: Mapping from taxon label to non-negative raw count
        tree: Tree the vector is aligned to
        metric: "weighted" (relative abundances) or "unweighted" (presence/absence)
        sample_id: Sample identifier, used only in error context

    Returns:
        Read-only float64 array of length ``tree.n_nodes`` with zeros at
        internal nodes

    Raises:
        UnknownTaxonError: If a taxon is not a tip of the tree
        InvalidAbundanceError: If a count is negative, NaN or infinite
        EmptySampleError: If the sample total is zero in weighted mode
    """
    validate_metric(metric)
    vector = np.zeros(tree.n_nodes, dtype=np.float64)

    for taxon, count in counts.items():
        if not tree.has_taxon(taxon):
            raise UnknownTaxonError(
                f"Sample references a taxon not present in the tree: {taxon}",
                context={"sample_id": sample_id, "taxon": taxon},
            )
        try:
            value = float(count)
        except (TypeError, ValueError):
            raise InvalidAbundanceError(
                f"Count is not numeric: {count!r}",
                context={"sample_id": sample_id, "taxon": taxon},
            ) from None
        if not math.isfinite(value) or value < 0:
            raise InvalidAbundanceError(
                f"Counts must be non-negative and finite, got {value}",
                context={"sample_id": sample_id, "taxon": taxon},
            )
        vector[tree.leaf_index(taxon)] = value

    if metric == "weighted":
        total = vector.sum()
        if total <= 0:
            raise EmptySampleError(
                "Sample has a total count of zero and cannot be normalized",
                context={"sample_id": sample_id},
            )
        vector /= total
    else:
        vector = (vector > 0).astype(np.float64)

    vector.setflags(write=False)
    return vector


def _as_sample_mapping(
    samples: Union[Mapping[str, SampleCounts], pd.DataFrame],
) -> Mapping[str, SampleCounts]:
    """Normalize a taxa-by-samples DataFrame into per-sample count mappings."""
    if isinstance(samples, pd.DataFrame):
        if not samples.columns.is_unique:
            raise ValueError("Sample IDs (DataFrame columns) must be unique")
        if not samples.index.is_unique:
            raise ValueError("Taxa (DataFrame index) must be unique")
        return {
            str(column): {str(taxon): count for taxon, count in samples[column].items() if count != 0}
            for column in samples.columns
        }
    return samples


def project_table(
    samples: Union[Mapping[str, SampleCounts], pd.DataFrame],
    tree: TreeStructure,
    metric: str = "weighted",
    sample_ids: Optional[Sequence[str]] = None,
) -> Tuple[List[str], np.ndarray]:
    """Project every sample of a table onto the tree.

    All samples are validated before any pairwise work starts, so a single
    invalid sample aborts the whole run.

    Args:
        samples: Mapping from sample ID to {taxon: count}, or a DataFrame with
                 taxa as rows and samples as columns
        tree: Tree the vectors are aligned to
        metric: "weighted" or "unweighted"
        sample_ids: Optional sample order (default: mapping/column order)

    Returns:
        Tuple of (sample_ids, vectors) where vectors is a read-only array of
        shape [N_samples, N_nodes]

    Raises:
        ValueError: If sample_ids contains duplicates or unknown samples
        EMDUniFracError: If any sample fails projection
    """
    validate_metric(metric)
    samples = _as_sample_mapping(samples)

    if sample_ids is None:
        sample_ids = list(samples.keys())
    else:
        sample_ids = list(sample_ids)
        missing = [sid for sid in sample_ids if sid not in samples]
        if missing:
            raise ValueError(f"Sample IDs not found in table: {sorted(missing)}")

    if len(set(sample_ids)) != len(sample_ids):
        raise ValueError("Sample IDs must be unique")

    vectors = np.zeros((len(sample_ids), tree.n_nodes), dtype=np.float64)
    for row, sample_id in enumerate(sample_ids):
        try:
            vectors[row] = project_sample(samples[sample_id], tree, metric=metric, sample_id=sample_id)
        except EMDUniFracError as e:
            logger.error(f"Projection failed for sample {sample_id}: {e}")
            raise

    if len(sample_ids) > 0:
        unobserved = int((vectors[:, tree.leaf_indices] == 0).all(axis=0).sum())
        if unobserved:
            logger.warning(
                f"{unobserved} of {tree.n_tips} tree taxa are absent from every sample "
                "and contribute no mass"
            )

    logger.info(f"Projected {len(sample_ids)} samples onto {tree.n_nodes} tree nodes ({metric})")
    vectors.setflags(write=False)
    return sample_ids, vectors
