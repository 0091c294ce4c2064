"""
Cube face identifiers and the face direction mapper.

Each face has a fixed (forward, right, up) basis taken from the OpenGL
cubemap table. "up" here points towards increasing pixel rows, which is
why most faces carry a negative y in it: row 0 is the top of the image.

    Face   forward     right       up
    +X     ( 1, 0, 0)  ( 0, 0,-1)  ( 0,-1, 0)
    -X     (-1, 0, 0)  ( 0, 0, 1)  ( 0,-1, 0)
    +Y     ( 0, 1, 0)  ( 1, 0, 0)  ( 0, 0, 1)
    -Y     ( 0,-1, 0)  ( 1, 0, 0)  ( 0, 0,-1)
    +Z     ( 0, 0, 1)  ( 1, 0, 0)  ( 0,-1, 0)
    -Z     ( 0, 0,-1)  (-1, 0, 0)  ( 0,-1, 0)

A GPU samples a cubemap through the same table, so a texel written at
(face, x, y) is looked up again for exactly the direction it was rendered
from.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .vector_math import normalize


class CubeFace(Enum):
    """Cube faces; the value doubles as the output file stem"""
    POS_X = 'right'
    NEG_X = 'left'
    POS_Y = 'top'
    NEG_Y = 'bottom'
    POS_Z = 'front'
    NEG_Z = 'back'

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self):
        return self.value


_LABELS = {
    CubeFace.POS_X: '+X',
    CubeFace.NEG_X: '-X',
    CubeFace.POS_Y: '+Y',
    CubeFace.NEG_Y: '-Y',
    CubeFace.POS_Z: '+Z',
    CubeFace.NEG_Z: '-Z',
}

# Render order (OpenGL GL_TEXTURE_CUBE_MAP_* order)
FACE_ORDER = (
    CubeFace.POS_X, CubeFace.NEG_X,
    CubeFace.POS_Y, CubeFace.NEG_Y,
    CubeFace.POS_Z, CubeFace.NEG_Z,
)


class FaceBasis(NamedTuple):
    forward: np.ndarray
    right: np.ndarray
    up: np.ndarray


def _basis(forward, right, up) -> FaceBasis:
    return FaceBasis(*(np.array(vec, dtype=np.float64) for vec in (forward, right, up)))


FACE_BASES = {
    CubeFace.POS_X: _basis((1, 0, 0), (0, 0, -1), (0, -1, 0)),
    CubeFace.NEG_X: _basis((-1, 0, 0), (0, 0, 1), (0, -1, 0)),
    CubeFace.POS_Y: _basis((0, 1, 0), (1, 0, 0), (0, 0, 1)),
    CubeFace.NEG_Y: _basis((0, -1, 0), (1, 0, 0), (0, 0, -1)),
    CubeFace.POS_Z: _basis((0, 0, 1), (1, 0, 0), (0, -1, 0)),
    CubeFace.NEG_Z: _basis((0, 0, -1), (-1, 0, 0), (0, -1, 0)),
}


def pixel_to_face_coord(index, size: int):
    """Pixel index -> normalized face coordinate of its center, in (-1, 1)."""
    return 2.0 * (np.asarray(index, dtype=np.float64) + 0.5) / size - 1.0


def face_direction(face: CubeFace, x, y, size: int) -> np.ndarray:
    """
    Unit viewing direction through pixel (x, y) of a face.

    x and y may be ints or integer arrays; they broadcast against each other
    and the result gains a trailing axis of length 3.

    Args:
        face: Cube face
        x: Column index in [0, size)
        y: Row index in [0, size)
        size: Face edge length in pixels

    Returns:
        Unit direction vector(s)
    """
    basis = FACE_BASES[face]
    a = np.expand_dims(pixel_to_face_coord(x, size), -1)
    b = np.expand_dims(pixel_to_face_coord(y, size), -1)
    return normalize(basis.forward + a * basis.right + b * basis.up)


def face_directions(face: CubeFace, size: int,
                    rows: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Direction grid for a face, indexed [row, column].

    Args:
        face: Cube face
        size: Face edge length in pixels
        rows: Optional (start, stop) row range; all rows when None

    Returns:
        (stop - start, size, 3) array of unit vectors
    """
    start, stop = rows if rows is not None else (0, size)
    xs = np.arange(size)[np.newaxis, :]
    ys = np.arange(start, stop)[:, np.newaxis]
    return face_direction(face, xs, ys, size)
