from emdunifrac.data.tree_loader import load_tree
from emdunifrac.data.table_loader import load_table, table_to_samples
from emdunifrac.data.matrix_writer import write_distance_matrix

__all__ = [
    "load_table",
    "load_tree",
    "table_to_samples",
    "write_distance_matrix",
]
