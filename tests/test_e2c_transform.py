import logging

import numpy as np
import pytest

from equi2cube.errors import (
    ConfigurationError, InternalComputationError, InvalidInputError, RenderCancelled
)
from equi2cube.transforms import (
    CubeFace, E2CTransform, EquirectImage, FaceBuffer, Interpolation, render
)
from equi2cube.transforms.cube_faces import FACE_ORDER

from .conftest import source_color


def grid(*rows):
    return np.array([[source_color(c, r) for c, r in row] for row in rows])


# Expected 2x2 faces for the 4x2 panorama, as (column, row) of the source pixel
CANONICAL_FACES = {
    CubeFace.POS_X: grid([(3, 0), (2, 0)], [(3, 1), (2, 1)]),
    CubeFace.NEG_X: grid([(1, 0), (0, 0)], [(1, 1), (0, 1)]),
    CubeFace.POS_Y: grid([(1, 0), (2, 0)], [(0, 0), (3, 0)]),
    CubeFace.NEG_Y: grid([(0, 1), (3, 1)], [(1, 1), (2, 1)]),
    CubeFace.POS_Z: grid([(0, 0), (3, 0)], [(0, 1), (3, 1)]),
    CubeFace.NEG_Z: grid([(2, 0), (1, 0)], [(2, 1), (1, 1)]),
}


def test_canonical_four_by_two_scenario(tiny_panorama):
    buffers = E2CTransform().render(tiny_panorama, 2, 'nearest', rotate=False)
    assert list(buffers) == list(FACE_ORDER)
    for face, expected in CANONICAL_FACES.items():
        np.testing.assert_array_equal(buffers[face].pixels, expected, err_msg=face.label)


@pytest.mark.parametrize('size', [1, 3, 16])
@pytest.mark.parametrize('mode', ['nearest', 'linear'])
def test_every_pixel_written_exactly_once(random_panorama, size, mode):
    buffers = E2CTransform().render(random_panorama, size, mode)
    assert len(buffers) == 6
    for buffer in buffers.values():
        assert buffer.is_complete
        assert buffer.written_count == size * size
        assert buffer.pixels.shape == (size, size, 3)
        assert buffer.pixels.dtype == np.uint8


def test_render_is_deterministic(random_panorama):
    first = render(random_panorama, 9, 'linear', rotate=True)
    second = render(random_panorama, 9, 'linear', rotate=True)
    for face in FACE_ORDER:
        assert first[face].tobytes() == second[face].tobytes()


def test_serial_parallel_and_chunked_renders_match(random_panorama):
    serial = E2CTransform(max_workers=1).render(random_panorama, 12, 'linear')
    parallel = E2CTransform(max_workers=6).render(random_panorama, 12, 'linear')
    chunked = E2CTransform(max_workers=3, chunk_pixels=30).render(random_panorama, 12, 'linear')
    for face in FACE_ORDER:
        np.testing.assert_array_equal(serial[face].pixels, parallel[face].pixels)
        np.testing.assert_array_equal(serial[face].pixels, chunked[face].pixels)


def test_uniform_source_gives_uniform_faces():
    source = np.full((8, 16, 4), (12, 34, 56, 255), dtype=np.uint8)
    faces = render(source, 5, 'linear')
    for pixels in faces.values():
        assert pixels.shape == (5, 5, 4)
        assert np.all(pixels == (12, 34, 56, 255))


def test_zenith_lands_on_top_face_by_default():
    # Upper half white, lower half black
    source = np.zeros((2, 8, 3), dtype=np.uint8)
    source[0] = 255
    faces = render(source, 4, 'nearest')
    assert np.all(faces[CubeFace.POS_Y] == 255)
    assert np.all(faces[CubeFace.NEG_Y] == 0)


def test_rotate_puts_zenith_on_positive_z():
    source = np.zeros((2, 8, 3), dtype=np.uint8)
    source[0] = 255
    faces = render(source, 4, 'nearest', rotate=True)
    assert np.all(faces[CubeFace.POS_Z] == 255)
    assert np.all(faces[CubeFace.NEG_Z] == 0)


def test_rotation_only_reassigns_faces(random_panorama):
    plain = render(random_panorama, 8, 'nearest')
    rotated = render(random_panorama, 8, 'nearest', rotate=True)
    # The quarter turn carries the +Z basis onto +Y and the -Y basis onto +Z
    np.testing.assert_array_equal(rotated[CubeFace.POS_Z], plain[CubeFace.POS_Y])
    np.testing.assert_array_equal(rotated[CubeFace.NEG_Y], plain[CubeFace.POS_Z])


@pytest.mark.parametrize('size', [0, -3, 2.5, True, '8'])
def test_invalid_size_rejected_before_rendering(tiny_panorama, size):
    with pytest.raises(ConfigurationError):
        E2CTransform().render(tiny_panorama, size)


def test_empty_source_rejected():
    with pytest.raises(InvalidInputError):
        render(np.zeros((0, 0, 3), dtype=np.uint8), 4)


def test_unknown_mode_rejected(tiny_panorama):
    with pytest.raises(ConfigurationError):
        render(tiny_panorama, 4, 'cubic')


def test_mode_name_matches_enum(tiny_panorama, caplog):
    with caplog.at_level(logging.DEBUG, logger='equi2cube.transforms.e2c_transform'):
        by_name = render(tiny_panorama, 2, 'NEAREST')
    assert 'mode=nearest' in caplog.text
    by_enum = render(tiny_panorama, 2, Interpolation.NEAREST)
    for face in FACE_ORDER:
        np.testing.assert_array_equal(by_name[face], by_enum[face])


def test_invalid_worker_count_rejected():
    with pytest.raises(ConfigurationError):
        E2CTransform(max_workers=0)


@pytest.mark.parametrize('workers', [1, 4])
def test_cancel_check_stops_render(tiny_panorama, workers):
    with pytest.raises(RenderCancelled):
        E2CTransform(max_workers=workers).render(tiny_panorama, 4, cancel_check=lambda: True)


def test_cancel_between_faces_in_serial_mode(tiny_panorama):
    calls = []

    def cancel_after_two():
        calls.append(1)
        return len(calls) > 2

    with pytest.raises(RenderCancelled):
        E2CTransform(max_workers=1).render(tiny_panorama, 4, cancel_check=cancel_after_two)
    assert len(calls) == 3


def test_progress_reported_per_face(tiny_panorama):
    events = []
    E2CTransform(max_workers=2).render(
        tiny_panorama, 3, progress_callback=lambda cur, total, msg: events.append((cur, total, msg))
    )
    assert [cur for cur, _, _ in events] == [1, 2, 3, 4, 5, 6]
    assert all(total == 6 for _, total, _ in events)
    assert all('face' in msg for _, _, msg in events)


def test_coordinate_maps_are_cached(tiny_panorama):
    transform = E2CTransform()
    transform.render(tiny_panorama, 4)
    assert transform.get_cache_size() == 6
    transform.render(tiny_panorama, 4, rotate=True)
    assert transform.get_cache_size() == 12
    transform.clear_cache()
    assert transform.get_cache_size() == 0


def test_face_names():
    assert E2CTransform().get_cube_face_names() == ['right', 'left', 'top', 'bottom', 'front', 'back']


class TestFaceBuffer:

    def test_set_twice_raises(self):
        buffer = FaceBuffer(CubeFace.POS_X, 2, 3)
        buffer.set(0, 1, (1, 2, 3))
        with pytest.raises(InternalComputationError):
            buffer.set(0, 1, (4, 5, 6))

    def test_overlapping_rows_raise(self):
        buffer = FaceBuffer(CubeFace.NEG_Z, 4, 1)
        buffer.write_rows(0, np.ones((2, 4, 1)))
        with pytest.raises(InternalComputationError):
            buffer.write_rows(1, np.ones((2, 4, 1)))

    def test_block_must_fit(self):
        buffer = FaceBuffer(CubeFace.NEG_Z, 4, 1)
        with pytest.raises(InternalComputationError):
            buffer.write_rows(3, np.ones((2, 4, 1)))

    def test_seal_requires_full_coverage(self):
        buffer = FaceBuffer(CubeFace.POS_Y, 2, 1)
        buffer.write_rows(0, np.ones((1, 2, 1)))
        with pytest.raises(InternalComputationError):
            buffer.seal()
        buffer.set(0, 1, 7)
        buffer.set(1, 1, 8)
        pixels = buffer.seal()
        assert pixels[:, :, 0].tolist() == [[1, 1], [7, 8]]

    def test_sealed_buffer_rejects_writes(self):
        buffer = FaceBuffer(CubeFace.POS_Y, 1, 1)
        buffer.set(0, 0, 1)
        buffer.seal()
        with pytest.raises(InternalComputationError):
            buffer.set(0, 0, 2)
