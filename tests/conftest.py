import numpy as np
import pytest

from bead_map.palette_data import default_palette


@pytest.fixture
def palette():
    return default_palette()


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)
