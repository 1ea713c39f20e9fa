"""Pairwise UniFrac distance via the Earth Mover's Distance on a tree.

On a tree metric the optimal transport cost between two leaf distributions
reduces to summing, over every edge, the edge length times the absolute
mass imbalance of the subtree below it. One forward pass over the post-order
node indices pushes each node's mass to its parent and accumulates that sum,
so no transport plan is ever solved explicitly.

Every call works on its own scratch accumulators; the input vectors and the
tree are only read.
"""

from typing import Tuple

import numpy as np

from emdunifrac.config import validate_metric
from emdunifrac.exceptions import DegenerateTreeError, DimensionMismatchError
from emdunifrac.tree import TreeStructure


def _check_dimensions(tree: TreeStructure, a: np.ndarray, b: np.ndarray) -> None:
    """Ensure both vectors were projected onto ``tree``."""
    if np.ndim(a) != 1 or np.ndim(b) != 1:
        raise DimensionMismatchError(
            "Abundance vectors must be one-dimensional",
            context={"a_ndim": np.ndim(a), "b_ndim": np.ndim(b)},
        )
    if len(a) != tree.n_nodes or len(b) != tree.n_nodes:
        raise DimensionMismatchError(
            "Abundance vectors were not projected onto this tree",
            context={"n_nodes": tree.n_nodes, "a_len": len(a), "b_len": len(b)},
        )


def emd_unifrac_weighted(tree: TreeStructure, a: np.ndarray, b: np.ndarray) -> float:
    """Weighted UniFrac distance between two relative-abundance vectors.

    Args:
        tree: Shared tree structure
        a: Abundance vector of the first sample (length N)
        b: Abundance vector of the second sample (length N)

    Returns:
        Non-negative distance; exactly 0.0 when ``a`` equals ``b``

    Raises:
        DimensionMismatchError: If either vector does not have N entries
    """
    _check_dimensions(tree, a, b)
    accum_a = np.asarray(a, dtype=np.float64).tolist()
    accum_b = np.asarray(b, dtype=np.float64).tolist()

    total = 0.0
    for k, parent, length in tree.edges:
        mass_a = accum_a[k]
        mass_b = accum_b[k]
        total += abs(mass_a - mass_b) * length
        accum_a[parent] += mass_a
        accum_b[parent] += mass_b
    return total


def emd_unifrac_unweighted(tree: TreeStructure, a: np.ndarray, b: np.ndarray) -> float:
    """Unweighted UniFrac distance between two presence/absence vectors.

    Presence indicators are pushed up the tree exactly like weighted mass,
    so each accumulator holds the number of present leaves below a node.
    The running total of ``|accum_a - accum_b| * length`` is divided by the
    branch length spanned by the union of both samples' lineages (edges
    where ``accum_a + accum_b > 0``). Clades holding several present leaves
    weigh in proportionally, so the result is not bounded by 1.

    Raises:
        DimensionMismatchError: If either vector does not have N entries
        DegenerateTreeError: If the union branch length is zero
    """
    _check_dimensions(tree, a, b)
    accum_a = np.asarray(a, dtype=np.float64).tolist()
    accum_b = np.asarray(b, dtype=np.float64).tolist()

    total = 0.0
    union = 0.0
    for k, parent, length in tree.edges:
        mass_a = accum_a[k]
        mass_b = accum_b[k]
        total += abs(mass_a - mass_b) * length
        if mass_a + mass_b > 0:
            union += length
        accum_a[parent] += mass_a
        accum_b[parent] += mass_b

    if union == 0:
        raise DegenerateTreeError(
            "Union branch length is zero; both samples are empty or span only zero-length branches",
            context={"n_nodes": tree.n_nodes},
        )
    return total / union


def emd_unifrac_diffab(
    tree: TreeStructure, a: np.ndarray, b: np.ndarray
) -> Tuple[float, np.ndarray]:
    """Weighted UniFrac distance together with the differential abundance vector.

    ``diffab[k]`` is the signed mass imbalance of the subtree below node k,
    scaled by the length of the edge above k (0 at the root). Positive
    values mean the first sample carries more mass below that edge. The
    distance equals ``np.abs(diffab).sum()``.

    Returns:
        Tuple of (distance, diffab) with diffab of length N
    """
    _check_dimensions(tree, a, b)
    accum_a = np.asarray(a, dtype=np.float64).tolist()
    accum_b = np.asarray(b, dtype=np.float64).tolist()
    diffab = np.zeros(tree.n_nodes, dtype=np.float64)

    total = 0.0
    for k, parent, length in tree.edges:
        mass_a = accum_a[k]
        mass_b = accum_b[k]
        signed = (mass_a - mass_b) * length
        diffab[k] = signed
        total += abs(signed)
        accum_a[parent] += mass_a
        accum_b[parent] += mass_b
    return total, diffab


def emd_unifrac(
    tree: TreeStructure, a: np.ndarray, b: np.ndarray, metric: str = "weighted"
) -> float:
    """UniFrac distance between two projected samples.

    Args:
        tree: Shared tree structure
        a: Abundance vector of the first sample
        b: Abundance vector of the second sample
        metric: "weighted" or "unweighted"

    Returns:
        Distance between the two samples

    Raises:
        ValueError: If metric is invalid
    """
    if validate_metric(metric) == "weighted":
        return emd_unifrac_weighted(tree, a, b)
    return emd_unifrac_unweighted(tree, a, b)
