"""Pytest configuration and shared image fixtures.

Slow tests (worst-case searches over large images) are skipped unless
--slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest

from graymap import PixelBuffer


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests (exhaustive searches over large images)",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def make_image():
    """Factory building a PixelBuffer from a list of rows (top row first)."""
    def _make(rows, maxval=255):
        return PixelBuffer.from_array(np.array(rows, dtype=np.int64), maxval)
    return _make


@pytest.fixture
def gradient():
    """7x5 image whose level at (x, y) is 10*y + x."""
    ys, xs = np.mgrid[0:5, 0:7]
    return PixelBuffer.from_array(10 * ys + xs, maxval=100)


@pytest.fixture
def noisy():
    """Random 12x9 image with maxval 200, fixed seed."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 201, size=(9, 12)), maxval=200)


@pytest.fixture
def pgm_file(tmp_path):
    """Write raw bytes to a .pgm file and return its path."""
    def _write(data: bytes, name: str = "image.pgm"):
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write
