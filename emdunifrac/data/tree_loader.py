"""Newick tree loading for EMDUniFrac."""

import logging
from pathlib import Path

import skbio
from skbio import TreeNode

from emdunifrac.exceptions import DataLoadError
from emdunifrac.tree import TreeStructure

logger = logging.getLogger(__name__)


def load_tree(tree_path: str) -> TreeStructure:
    """Load a Newick tree file into a TreeStructure.

    Args:
        tree_path: Path to phylogenetic tree file (.nwk Newick format)

    Returns:
        TreeStructure indexed in post-order

    Raises:
        FileNotFoundError: If tree file doesn't exist
        DataLoadError: If the file cannot be parsed as Newick
        MalformedTreeError: If the tree has negative branch lengths or
            duplicate/missing tip labels
    """
    tree_path_obj = Path(tree_path)
    if not tree_path_obj.exists():
        raise FileNotFoundError(f"Tree file not found: {tree_path}")

    try:
        tree = skbio.read(str(tree_path), format="newick", into=TreeNode)
    except Exception as e:
        raise DataLoadError(
            f"Error loading phylogenetic tree from {tree_path}: {e}",
            context={"file_path": str(tree_path)},
        ) from e

    structure = TreeStructure.from_treenode(tree)
    logger.info(
        f"Loaded tree from {tree_path}: {structure.n_nodes} nodes, {structure.n_tips} tips, "
        f"total branch length {structure.total_length:.6g}"
    )
    return structure
