import numpy as np
import pytest

from equi2cube.errors import ConfigurationError
from equi2cube.transforms import CubeFace, CubemapLayout, assemble_layout
from equi2cube.transforms.cube_faces import FACE_ORDER

S = 3


@pytest.fixture
def faces():
    """Each face filled with its index + 1 in render order"""
    return {
        face: np.full((S, S, 3), index + 1, dtype=np.uint8)
        for index, face in enumerate(FACE_ORDER)
    }


def cell(image, row, col):
    return image[row * S:(row + 1) * S, col * S:(col + 1) * S]


def fill_of(face):
    return FACE_ORDER.index(face) + 1


def test_cross_horizontal(faces):
    image = assemble_layout(faces, 'cross_horizontal')
    assert image.shape == (3 * S, 4 * S, 3)
    assert np.all(cell(image, 0, 1) == fill_of(CubeFace.POS_Y))
    assert [cell(image, 1, c)[0, 0, 0] for c in range(4)] == [
        fill_of(CubeFace.NEG_X), fill_of(CubeFace.POS_Z), fill_of(CubeFace.POS_X), fill_of(CubeFace.NEG_Z)
    ]
    assert np.all(cell(image, 2, 1) == fill_of(CubeFace.NEG_Y))
    assert np.all(cell(image, 0, 0) == 0)
    assert np.all(cell(image, 2, 3) == 0)


def test_cross_vertical_flips_back_face(faces):
    back = np.arange(S * S * 3, dtype=np.uint8).reshape(S, S, 3)
    faces[CubeFace.NEG_Z] = back
    image = assemble_layout(faces, CubemapLayout.CROSS_VERTICAL)
    assert image.shape == (4 * S, 3 * S, 3)
    np.testing.assert_array_equal(cell(image, 3, 1), back[::-1, ::-1])
    assert np.all(cell(image, 1, 1) == fill_of(CubeFace.POS_Z))
    assert np.all(cell(image, 3, 0) == 0)


def test_strip_follows_render_order(faces):
    image = assemble_layout(faces, 'strip_horizontal')
    assert image.shape == (S, 6 * S, 3)
    assert [cell(image, 0, c)[0, 0, 0] for c in range(6)] == [1, 2, 3, 4, 5, 6]


def test_preserves_dtype_and_channels():
    faces = {face: np.full((2, 2, 4), 0.5, dtype=np.float32) for face in FACE_ORDER}
    image = assemble_layout(faces, 'strip_horizontal')
    assert image.dtype == np.float32
    assert image.shape == (2, 12, 4)


def test_separate_layout_has_no_combined_image(faces):
    with pytest.raises(ConfigurationError):
        assemble_layout(faces, 'separate')


def test_missing_face_rejected(faces):
    del faces[CubeFace.NEG_Y]
    with pytest.raises(ConfigurationError, match='bottom'):
        assemble_layout(faces, 'cross_horizontal')


def test_mismatched_face_shapes_rejected(faces):
    faces[CubeFace.POS_X] = np.zeros((S + 1, S + 1, 3), dtype=np.uint8)
    with pytest.raises(ConfigurationError):
        assemble_layout(faces, 'strip_horizontal')


def test_unknown_layout_rejected(faces):
    with pytest.raises(ConfigurationError):
        assemble_layout(faces, 'diamond')
