"""Array-backed phylogenetic tree used by the EMDUniFrac engine.

Nodes are numbered by a fixed post-order traversal (0..N-1, root last), so a
single forward pass over the indices visits every child before its parent.
Parent indices and branch lengths live in read-only numpy arrays that many
pairwise computations can share without locking.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
from skbio import TreeNode

from emdunifrac.exceptions import MalformedTreeError, UnknownTaxonError

logger = logging.getLogger(__name__)

ROOT_PARENT = -1


class TreeStructure:
    """Immutable, rooted, edge-weighted tree over taxa.

    The structure exposes:
    - total node count N
    - parent index and incident edge length for every node index
    - the node index of every leaf taxon
    - a traversal order in which children precede parents (0..N-1)

    Build it with ``from_arrays``, ``from_treenode`` or ``from_newick``; any
    parser that can produce post-order parent/length/taxon arrays can feed it.
    """

    def __init__(
        self,
        parents: Sequence[int],
        lengths: Sequence[float],
        taxa: Sequence[Optional[str]],
    ):
        """Initialize and validate the tree from post-order arrays.

        Args:
            parents: Parent index of each node; ROOT_PARENT (-1) for the root
            lengths: Length of the edge above each node (ignored for the root)
            taxa: Taxon label of each node; only leaf labels are kept

        Raises:
            MalformedTreeError: If the arrays do not describe a valid
                post-ordered tree with unique leaf taxa and non-negative lengths
        """
        parents_arr = np.array(parents, dtype=np.int64)
        lengths_arr = np.array(lengths, dtype=np.float64)
        taxa = list(taxa)
        n_nodes = len(parents_arr)

        if n_nodes == 0:
            raise MalformedTreeError("Tree has no nodes")
        if parents_arr.ndim != 1 or lengths_arr.ndim != 1:
            raise MalformedTreeError("Parent and length arrays must be one-dimensional")
        if len(lengths_arr) != n_nodes or len(taxa) != n_nodes:
            raise MalformedTreeError(
                "Parent, length and taxon arrays must have the same size",
                context={"parents": n_nodes, "lengths": len(lengths_arr), "taxa": len(taxa)},
            )

        roots = np.flatnonzero(parents_arr == ROOT_PARENT)
        if len(roots) != 1:
            raise MalformedTreeError(
                f"Tree must have exactly one root, found {len(roots)}",
                context={"roots": roots.tolist()},
            )
        if roots[0] != n_nodes - 1:
            raise MalformedTreeError(
                "Root must be the last node in post-order",
                context={"root": int(roots[0]), "n_nodes": n_nodes},
            )

        # Children must be indexed before their parents.
        non_root = np.arange(n_nodes - 1)
        bad_order = non_root[(parents_arr[:-1] <= non_root) | (parents_arr[:-1] >= n_nodes)]
        if len(bad_order) > 0:
            k = int(bad_order[0])
            raise MalformedTreeError(
                "Node parent does not follow the node in post-order",
                context={"node": k, "parent": int(parents_arr[k])},
            )

        lengths_arr[n_nodes - 1] = 0.0
        invalid_lengths = np.flatnonzero(~np.isfinite(lengths_arr) | (lengths_arr < 0))
        if len(invalid_lengths) > 0:
            k = int(invalid_lengths[0])
            raise MalformedTreeError(
                "Branch lengths must be non-negative and finite",
                context={"node": k, "length": float(lengths_arr[k]), "taxon": taxa[k]},
            )

        is_leaf = np.ones(n_nodes, dtype=bool)
        is_leaf[parents_arr[:-1]] = False

        leaf_index: Dict[str, int] = {}
        leaf_taxa = []
        for k in np.flatnonzero(is_leaf):
            k = int(k)
            taxon = taxa[k]
            if taxon is None or taxon == "":
                raise MalformedTreeError("Tip has no taxon label", context={"node": k})
            if taxon in leaf_index:
                raise MalformedTreeError(
                    f"Duplicate tip label: {taxon}",
                    context={"taxon": taxon, "nodes": (leaf_index[taxon], k)},
                )
            leaf_index[taxon] = k
            leaf_taxa.append(taxon)

        parents_arr.setflags(write=False)
        lengths_arr.setflags(write=False)
        is_leaf.setflags(write=False)

        self._parents = parents_arr
        self._lengths = lengths_arr
        self._is_leaf = is_leaf
        self._leaf_index = leaf_index
        self._taxa = tuple(leaf_taxa)
        self._leaf_indices = np.fromiter(leaf_index.values(), dtype=np.int64, count=len(leaf_index))
        self._leaf_indices.setflags(write=False)
        self._edges = tuple(
            zip(range(n_nodes - 1), parents_arr[:-1].tolist(), lengths_arr[:-1].tolist())
        )

    @classmethod
    def from_arrays(
        cls,
        parents: Sequence[int],
        lengths: Sequence[float],
        taxa: Sequence[Optional[str]],
    ) -> "TreeStructure":
        """Build a tree from post-order parent, length and taxon arrays."""
        return cls(parents, lengths, taxa)

    @classmethod
    def from_treenode(cls, tree: TreeNode) -> "TreeStructure":
        """Build a tree from a scikit-bio TreeNode.

        The given node is treated as the root even if it has a parent. Missing
        branch lengths are read as 0.0.

        Args:
            tree: Root of a scikit-bio tree

        Returns:
            TreeStructure indexed by the post-order traversal of ``tree``

        Raises:
            MalformedTreeError: If the tree has negative lengths or
                duplicate/missing tip labels
        """
        nodes = list(tree.postorder(include_self=True))
        position = {id(node): i for i, node in enumerate(nodes)}

        parents = []
        lengths = []
        taxa = []
        for node in nodes:
            if node is tree:
                parents.append(ROOT_PARENT)
                lengths.append(0.0)
            else:
                parents.append(position[id(node.parent)])
                lengths.append(0.0 if node.length is None else float(node.length))
            taxa.append(node.name if node.is_tip() else None)

        structure = cls(parents, lengths, taxa)
        logger.debug(
            f"Indexed tree with {structure.n_nodes} nodes and {structure.n_tips} tips"
        )
        return structure

    @classmethod
    def from_newick(cls, newick: str) -> "TreeStructure":
        """Build a tree from a Newick string such as ``"((a:1,b:1):1,c:2);"``."""
        return cls.from_treenode(TreeNode.read([newick], format="newick"))

    @property
    def n_nodes(self) -> int:
        """Total number of nodes N."""
        return len(self._parents)

    def __len__(self) -> int:
        return self.n_nodes

    @property
    def n_tips(self) -> int:
        """Number of leaves."""
        return len(self._taxa)

    @property
    def root(self) -> int:
        """Index of the root (always the last node)."""
        return self.n_nodes - 1

    @property
    def parents(self) -> np.ndarray:
        """Read-only parent index array, ROOT_PARENT at the root."""
        return self._parents

    @property
    def lengths(self) -> np.ndarray:
        """Read-only edge length array, 0.0 at the root."""
        return self._lengths

    @property
    def taxa(self) -> Tuple[str, ...]:
        """Leaf taxa in post-order."""
        return self._taxa

    @property
    def leaf_indices(self) -> np.ndarray:
        """Node indices of the leaves, aligned with ``taxa``."""
        return self._leaf_indices

    @property
    def edges(self) -> Tuple[Tuple[int, int, float], ...]:
        """(node, parent, length) for every non-root node, in post-order."""
        return self._edges

    @property
    def total_length(self) -> float:
        """Sum of all branch lengths."""
        return float(self._lengths.sum())

    def parent(self, k: int) -> Optional[int]:
        """Parent index of node k, or None for the root."""
        p = int(self._parents[k])
        return None if p == ROOT_PARENT else p

    def edge_length(self, k: int) -> float:
        """Length of the edge connecting node k to its parent."""
        return float(self._lengths[k])

    def is_leaf(self, k: int) -> bool:
        return bool(self._is_leaf[k])

    def has_taxon(self, taxon: str) -> bool:
        return taxon in self._leaf_index

    def leaf_index(self, taxon: str) -> int:
        """Node index of a leaf taxon.

        Raises:
            UnknownTaxonError: If taxon is not a tip of the tree
        """
        try:
            return self._leaf_index[taxon]
        except KeyError:
            raise UnknownTaxonError(
                f"Taxon not found in tree: {taxon}", context={"taxon": taxon}
            ) from None

    def postorder(self) -> Iterable[int]:
        """Node indices with every child before its parent."""
        return range(self.n_nodes)

    def __repr__(self) -> str:
        return (
            f"TreeStructure(n_nodes={self.n_nodes}, n_tips={self.n_tips}, "
            f"total_length={self.total_length:.6g})"
        )
