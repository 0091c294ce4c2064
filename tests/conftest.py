import numpy as np
import pytest
from PIL import Image

from equi2cube.transforms import EquirectImage


def source_color(col, row):
    """Distinct RGB color of pixel (col, row) in the 4x2 test panorama"""
    return np.array([10 + 40 * col, 20 + 100 * row, 7 * (col + 4 * row)], dtype=np.uint8)


@pytest.fixture
def tiny_panorama():
    """4x2 panorama where every pixel has its own color"""
    pixels = np.zeros((2, 4, 3), dtype=np.uint8)
    for row in range(2):
        for col in range(4):
            pixels[row, col] = source_color(col, row)
    return EquirectImage(pixels)


@pytest.fixture
def random_panorama():
    rng = np.random.default_rng(1234)
    return EquirectImage(rng.integers(0, 256, size=(16, 32, 3), dtype=np.uint8))


@pytest.fixture
def panorama_file(tmp_path):
    """64x32 RGB gradient panorama saved as PNG"""
    ys, xs = np.mgrid[0:32, 0:64]
    pixels = np.stack([xs * 4, ys * 8, (xs + ys) % 256], axis=-1).astype(np.uint8)
    path = tmp_path / 'pano.png'
    Image.fromarray(pixels).save(path)
    return path
