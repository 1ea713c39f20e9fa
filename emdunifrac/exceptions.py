"""Custom exception classes for EMDUniFrac.

This module provides exception classes raised while building the tree
structure, projecting sample abundances and computing pairwise distances,
so callers can tell user data errors apart from programming errors.
"""


class EMDUniFracError(Exception):
    """Base exception class for all EMDUniFrac errors.

    All custom exceptions in this module inherit from this class, allowing
    callers to catch every EMDUniFrac error with a single exception type.

    Attributes:
        message: The error message describing what went wrong.
        context: Optional dictionary containing additional context about the error,
                 such as the sample ID or taxon that caused the error.
    """

    def __init__(self, message: str, context: dict | None = None):
        """Initialize the exception.

        Args:
            message: A descriptive error message.
            context: Optional dictionary with additional context (e.g.,
                    sample IDs, taxon labels, node indices).
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class MalformedTreeError(EMDUniFracError):
    """Raised when the phylogenetic tree has a structural defect.

    Negative or non-finite branch lengths, duplicate or missing tip labels,
    and traversal orders that do not visit children before their parents
    all raise this error.

    Example:
        raise MalformedTreeError(
            "Negative branch length",
            context={"node": 4, "length": -0.1}
        )
    """
    pass


class UnknownTaxonError(EMDUniFracError):
    """Raised when a sample references a taxon that is not a tip of the tree.

    Example:
        raise UnknownTaxonError(
            "Taxon not found in tree",
            context={"sample_id": "S1", "taxon": "ASV42"}
        )
    """
    pass


class EmptySampleError(EMDUniFracError):
    """Raised when a sample has a total count of zero in weighted mode."""
    pass


class InvalidAbundanceError(EMDUniFracError):
    """Raised when a raw count is negative, NaN or infinite."""
    pass


class DegenerateTreeError(EMDUniFracError):
    """Raised when the unweighted normalizing branch length is zero.

    This happens when both samples are empty, or when every branch spanned
    by their lineages has zero length.
    """
    pass


class DimensionMismatchError(EMDUniFracError):
    """Raised when two abundance vectors were not projected onto the same tree.

    This indicates a programming error rather than a data error.
    """
    pass


class DataLoadError(EMDUniFracError):
    """Raised when loading a tree or feature table fails.

    Example:
        raise DataLoadError(
            "Failed to parse Newick tree",
            context={"file_path": tree_path, "error": str(e)}
        )
    """
    pass
