import numpy as np
import pytest

from DetectorImageTool import write_int_block


@pytest.fixture
def constant_grid():
    """20 x 60 grid of a constant reading above the background level."""
    return np.full((20, 60), 3000, dtype=np.int32)


@pytest.fixture
def random_grid():
    rng = np.random.default_rng(1234)
    return rng.integers(2500, 6000, size=(25, 70), dtype=np.int32)


@pytest.fixture
def block_file(tmp_path, constant_grid):
    path = tmp_path / "block.int"
    write_int_block(str(path), constant_grid)
    return path
