"""Compute command for the EMDUniFrac CLI."""

import logging
from typing import Optional

import click

from emdunifrac.cli.utils import setup_logging, validate_arguments, validate_file_path
from emdunifrac.config import UniFracConfig
from emdunifrac.data import load_table, load_tree, write_distance_matrix
from emdunifrac.exceptions import EMDUniFracError
from emdunifrac.logging_config import sanitize_path
from emdunifrac.matrix import unifrac_matrix


@click.command()
@click.option("-t", "--tree", required=True, type=click.Path(), help="Input Newick tree file")
@click.option(
    "-i",
    "--input",
    "table",
    required=True,
    type=click.Path(),
    help="Input tab-delimited taxa-by-samples table (or .biom file)",
)
@click.option("-o", "--output", required=True, type=click.Path(), help="Output file for distance matrix")
@click.option("--weighted", is_flag=True, help="Compute weighted UniFrac (default: unweighted)")
@click.option("--threads", default=None, type=int, help="Number of worker threads (default: CPU count)")
@click.option("--chunk-size", default=None, type=int, help="Sample pairs per worker task")
@click.option("--precision", default=6, type=int, help="Decimal places in the output matrix")
@click.option("--progress", is_flag=True, help="Show a progress bar")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option("--log-file", default=None, type=click.Path(), help="Optional log file")
def compute(
    tree: str,
    table: str,
    output: str,
    weighted: bool,
    threads: Optional[int],
    chunk_size: Optional[int],
    precision: int,
    progress: bool,
    log_level: str,
    log_file: Optional[str],
):
    """Compute the pairwise UniFrac distance matrix of all samples."""
    setup_logging(log_level, log_file)
    logger = logging.getLogger(__name__)

    try:
        validate_file_path(tree, "Tree file")
        validate_file_path(table, "Feature table")
        validate_arguments(threads=threads, chunk_size=chunk_size, precision=precision)

        config = UniFracConfig(
            metric="weighted" if weighted else "unweighted",
            num_threads=threads,
            chunk_size=chunk_size,
            precision=precision,
            show_progress=progress,
        )
        logger.info(f"Starting {config.metric} UniFrac computation")
        logger.info(f"Tree: {sanitize_path(tree)}")
        logger.info(f"Table: {sanitize_path(table)}")

        tree_obj = load_tree(tree)
        sample_ids, samples = load_table(table)
        distances = unifrac_matrix(tree_obj, samples, config=config, sample_ids=sample_ids)

        write_distance_matrix(distances, output, precision=config.precision)
        logger.info(f"UniFrac computation completed. Matrix saved to {sanitize_path(output)}")

    except (EMDUniFracError, FileNotFoundError, ValueError) as e:
        logger.error(f"UniFrac computation failed: {e}")
        raise click.ClickException(str(e))
