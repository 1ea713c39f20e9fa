"""Shared pytest fixtures for EMDUniFrac tests."""

import tempfile
from pathlib import Path

import pytest

from emdunifrac.tree import TreeStructure

# Four leaves, every edge of length 1. Post-order: a, b, (a,b), c, d, (c,d), root.
GOLDEN_NEWICK = "((a:1,b:1):1,(c:1,d:1):1);"

# Uneven branch lengths and an unbalanced topology for cross-checks.
UNEVEN_NEWICK = "(((t1:0.5,t2:0.25):0.75,t3:1.5):0.4,((t4:0.1,t5:0.9):0.3,(t6:2.0,(t7:0.6,t8:0.2):0.05):1.1):0.2);"


def create_golden_tree() -> TreeStructure:
    """Create the 4-leaf golden tree."""
    return TreeStructure.from_newick(GOLDEN_NEWICK)


@pytest.fixture
def golden_tree():
    """Create the 4-leaf golden tree ((a,b),(c,d)) with unit edges."""
    return create_golden_tree()


@pytest.fixture
def uneven_tree():
    """Create an 8-leaf tree with uneven branch lengths."""
    return TreeStructure.from_newick(UNEVEN_NEWICK)


@pytest.fixture
def golden_samples():
    """Create samples on the golden tree."""
    return {
        "sample1": {"a": 1, "b": 1},
        "sample2": {"c": 1, "d": 1},
        "sample3": {"a": 1, "c": 1},
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def golden_tree_file(temp_dir):
    """Write the golden tree to a Newick file."""
    tree_file = temp_dir / "tree.nwk"
    tree_file.write_text(GOLDEN_NEWICK + "\n")
    return str(tree_file)


@pytest.fixture
def golden_table_file(temp_dir):
    """Write a taxa-by-samples table for the golden tree."""
    table_file = temp_dir / "table.tsv"
    table_file.write_text(
        "#OTU ID\tsample1\tsample2\tsample3\n"
        "a\t1\t0\t1\n"
        "b\t1\t0\t0\n"
        "c\t0\t1\t1\n"
        "d\t0\t1\t0\n"
    )
    return str(table_file)
