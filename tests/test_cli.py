"""Unit tests for CLI interface."""

import logging

import pytest
from click.testing import CliRunner

from emdunifrac.cli import cli, setup_logging, validate_arguments, validate_file_path


@pytest.fixture
def runner():
    """Create a click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers and level set on the package logger by setup_logging."""
    logger = logging.getLogger("emdunifrac")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(level)


def read_matrix(path):
    """Read an output matrix as {(row, col): value}."""
    lines = path.read_text().splitlines()
    header = lines[0].split("\t")[1:]
    values = {}
    for line in lines[1:]:
        fields = line.split("\t")
        for col, value in zip(header, fields[1:]):
            values[(fields[0], col)] = value
    return header, values


class TestComputeCommand:
    """Tests for the compute command."""

    def test_unweighted_default(self, runner, golden_tree_file, golden_table_file, temp_dir):
        """Test that the default run is unweighted."""
        output = temp_dir / "unweighted.tsv"
        result = runner.invoke(
            cli, ["compute", "-t", golden_tree_file, "-i", golden_table_file, "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        header, values = read_matrix(output)
        assert header == ["sample1", "sample2", "sample3"]
        assert values[("sample1", "sample2")] == "1.333333"
        assert values[("sample1", "sample3")] == "0.800000"
        assert values[("sample2", "sample2")] == "0.000000"

    def test_weighted_flag(self, runner, golden_tree_file, golden_table_file, temp_dir):
        """Test --weighted with custom precision and threads."""
        output = temp_dir / "weighted.tsv"
        result = runner.invoke(
            cli,
            [
                "compute",
                "--tree", golden_tree_file,
                "--input", golden_table_file,
                "--output", str(output),
                "--weighted",
                "--threads", "2",
                "--chunk-size", "1",
                "--precision", "2",
            ],
        )
        assert result.exit_code == 0, result.output
        _, values = read_matrix(output)
        assert values[("sample1", "sample2")] == "4.00"
        assert values[("sample3", "sample1")] == "2.00"
        assert values[("sample1", "sample1")] == "0.00"

    def test_unknown_taxon_fails_without_output(self, runner, golden_tree_file, temp_dir):
        """Test that an invalid sample exits non-zero and writes nothing."""
        table_file = temp_dir / "bad.tsv"
        table_file.write_text("taxon\ts1\ts2\na\t1\t0\nzzz\t0\t3\n")
        output = temp_dir / "out.tsv"
        result = runner.invoke(
            cli, ["compute", "-t", golden_tree_file, "-i", str(table_file), "-o", str(output)]
        )
        assert result.exit_code != 0
        assert "zzz" in result.output
        assert not output.exists()

    def test_empty_weighted_sample_fails(self, runner, golden_tree_file, temp_dir):
        """Test that an all-zero sample fails in weighted mode."""
        table_file = temp_dir / "empty.tsv"
        table_file.write_text("taxon\ts1\ts2\na\t1\t0\nb\t2\t0\n")
        output = temp_dir / "out.tsv"
        result = runner.invoke(
            cli,
            ["compute", "-t", golden_tree_file, "-i", str(table_file), "-o", str(output), "--weighted"],
        )
        assert result.exit_code != 0
        assert "s2" in result.output
        assert not output.exists()

    def test_missing_tree(self, runner, golden_table_file, temp_dir):
        """Test that a missing tree file is reported."""
        result = runner.invoke(
            cli,
            ["compute", "-t", str(temp_dir / "nope.nwk"), "-i", golden_table_file, "-o", str(temp_dir / "o.tsv")],
        )
        assert result.exit_code != 0
        assert "Tree file not found" in result.output

    def test_invalid_threads(self, runner, golden_tree_file, golden_table_file, temp_dir):
        """Test that a non-positive thread count is rejected."""
        result = runner.invoke(
            cli,
            [
                "compute", "-t", golden_tree_file, "-i", golden_table_file,
                "-o", str(temp_dir / "o.tsv"), "--threads", "0",
            ],
        )
        assert result.exit_code != 0
        assert "threads must be positive" in result.output

    def test_log_file(self, runner, golden_tree_file, golden_table_file, temp_dir):
        """Test that --log-file records the run."""
        log_file = temp_dir / "logs" / "run.log"
        result = runner.invoke(
            cli,
            [
                "compute", "-t", golden_tree_file, "-i", golden_table_file,
                "-o", str(temp_dir / "o.tsv"), "--log-file", str(log_file),
            ],
        )
        assert result.exit_code == 0, result.output
        for handler in logging.getLogger("emdunifrac").handlers:
            handler.flush()
        assert "UniFrac computation completed" in log_file.read_text()


class TestUtils:
    """Tests for CLI helper functions."""

    def test_setup_logging_creates_log_file(self, temp_dir):
        """Test that logging creates the log file."""
        log_file = temp_dir / "logs" / "emdunifrac.log"
        setup_logging("DEBUG", str(log_file))
        assert log_file.exists()

    def test_setup_logging_routes_package_records(self, temp_dir):
        """Test that records from package modules reach the configured file."""
        log_file = temp_dir / "run.log"
        logger = setup_logging("WARNING", str(log_file))
        assert logger.name == "emdunifrac"
        assert logger.level == logging.WARNING
        logging.getLogger("emdunifrac.matrix").warning("pool started")
        logging.getLogger("emdunifrac.matrix").info("not recorded")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text()
        assert "emdunifrac.matrix - WARNING - pool started" in text
        assert "not recorded" not in text

    def test_validate_file_path(self, golden_tree_file, temp_dir):
        """Test file existence validation."""
        validate_file_path(golden_tree_file)
        with pytest.raises(FileNotFoundError) as exc_info:
            validate_file_path(str(temp_dir / "missing.nwk"), "Tree file")
        assert "Tree file" in str(exc_info.value)

    def test_validate_arguments(self):
        """Test argument validation."""
        validate_arguments(threads=4, chunk_size=10, precision=0)
        with pytest.raises(ValueError):
            validate_arguments(threads=0)
        with pytest.raises(ValueError):
            validate_arguments(chunk_size=0)
        with pytest.raises(ValueError):
            validate_arguments(precision=-2)
