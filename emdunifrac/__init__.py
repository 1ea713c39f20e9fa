from __future__ import annotations

from .config import UniFracConfig
from .emd import (
    emd_unifrac,
    emd_unifrac_diffab,
    emd_unifrac_unweighted,
    emd_unifrac_weighted,
)
from .exceptions import (
    DataLoadError,
    DegenerateTreeError,
    DimensionMismatchError,
    EMDUniFracError,
    EmptySampleError,
    InvalidAbundanceError,
    MalformedTreeError,
    UnknownTaxonError,
)
from .matrix import compute_distance_matrix, unifrac_matrix
from .projection import project_sample, project_table
from .tree import TreeStructure

__all__ = [
    "DataLoadError",
    "DegenerateTreeError",
    "DimensionMismatchError",
    "EMDUniFracError",
    "EmptySampleError",
    "InvalidAbundanceError",
    "MalformedTreeError",
    "TreeStructure",
    "UniFracConfig",
    "UnknownTaxonError",
    "compute_distance_matrix",
    "emd_unifrac",
    "emd_unifrac_diffab",
    "emd_unifrac_unweighted",
    "emd_unifrac_weighted",
    "project_sample",
    "project_table",
    "unifrac_matrix",
]
