# tests/conftest.py
import pytest
import tempfile
import os

from trade_import.utils.decimal_context import apply_decimal_context


@pytest.fixture(scope="session", autouse=True)
def set_decimal_precision_session_wide():
    """Set global decimal precision and rounding for all tests in the session, as main does."""
    apply_decimal_context()


@pytest.fixture
def temp_data_dir():
    """
    Creates a temporary directory for test input/output files.
    Yields the path to this directory.
    Cleans up the directory after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def write_data_file(temp_data_dir):
    """Returns a helper that writes `content` to `filename` inside temp_data_dir and returns the path."""
    def _write(filename: str, content: str, encoding: str = "utf-8") -> str:
        path = os.path.join(temp_data_dir, filename)
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
        return path
    return _write
