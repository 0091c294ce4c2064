"""
Cubemap layouts: arrange the six faces into a single image.

Layouts:
    cross_horizontal (4:3)         cross_vertical (3:4)
            [Top]                          [Top]
    [Left] [Front] [Right] [Back]  [Left] [Front] [Right]
            [Bottom]                      [Bottom]
                                           [Back]
    strip_horizontal (6:1)
    [Right][Left][Top][Bottom][Front][Back]

The vertical cross stores Back upside down (rotated 180 degrees), which
is how that layout is conventionally folded. Unused cells are zero.
"""

from enum import Enum
from typing import Dict, Mapping, Tuple

import numpy as np

from ..errors import ConfigurationError
from .cube_faces import FACE_ORDER, CubeFace


class CubemapLayout(Enum):
    """Cubemap output layout formats"""
    SEPARATE = "separate"                  # 6 individual face images
    CROSS_HORIZONTAL = "cross_horizontal"  # 4:3 aspect (Unity/Unreal standard)
    CROSS_VERTICAL = "cross_vertical"      # 3:4 aspect
    STRIP_HORIZONTAL = "strip_horizontal"  # 6:1 aspect (compact storage)

    @classmethod
    def parse(cls, value) -> 'CubemapLayout':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ', '.join(m.value for m in cls)
            raise ConfigurationError(f"Unknown layout {value!r} (expected one of: {choices})")


# (row, column) cell of each face, in face-size units
LAYOUT_CELLS: Dict[CubemapLayout, Dict[CubeFace, Tuple[int, int]]] = {
    CubemapLayout.CROSS_HORIZONTAL: {
        CubeFace.POS_Y: (0, 1),
        CubeFace.NEG_X: (1, 0),
        CubeFace.POS_Z: (1, 1),
        CubeFace.POS_X: (1, 2),
        CubeFace.NEG_Z: (1, 3),
        CubeFace.NEG_Y: (2, 1),
    },
    CubemapLayout.CROSS_VERTICAL: {
        CubeFace.POS_Y: (0, 1),
        CubeFace.NEG_X: (1, 0),
        CubeFace.POS_Z: (1, 1),
        CubeFace.POS_X: (1, 2),
        CubeFace.NEG_Y: (2, 1),
        CubeFace.NEG_Z: (3, 1),
    },
    CubemapLayout.STRIP_HORIZONTAL: {face: (0, index) for index, face in enumerate(FACE_ORDER)},
}

LAYOUT_GRID = {
    CubemapLayout.CROSS_HORIZONTAL: (3, 4),
    CubemapLayout.CROSS_VERTICAL: (4, 3),
    CubemapLayout.STRIP_HORIZONTAL: (1, 6),
}


def assemble_layout(faces: Mapping[CubeFace, np.ndarray], layout) -> np.ndarray:
    """
    Arrange six faces into one layout image.

    Args:
        faces: CubeFace -> (S, S, C) array for all six faces
        layout: CubemapLayout (or its name) other than SEPARATE

    Returns:
        Combined cubemap image (rows*S, cols*S, C)
    """
    layout = CubemapLayout.parse(layout)
    if layout is CubemapLayout.SEPARATE:
        raise ConfigurationError("The separate layout has no combined image")

    missing = [face.value for face in FACE_ORDER if face not in faces]
    if missing:
        raise ConfigurationError(f"Missing cube faces for layout: {', '.join(missing)}")

    first = np.asarray(faces[FACE_ORDER[0]])
    face_size = first.shape[0]
    for face in FACE_ORDER:
        if np.asarray(faces[face]).shape != first.shape:
            raise ConfigurationError(f"{face} face shape {np.asarray(faces[face]).shape} != {first.shape}")

    grid_rows, grid_cols = LAYOUT_GRID[layout]
    combined = np.zeros((face_size * grid_rows, face_size * grid_cols) + first.shape[2:],
                        dtype=first.dtype)

    for face, (row, col) in LAYOUT_CELLS[layout].items():
        pixels = np.asarray(faces[face])
        if layout is CubemapLayout.CROSS_VERTICAL and face is CubeFace.NEG_Z:
            pixels = pixels[::-1, ::-1]
        combined[row * face_size:(row + 1) * face_size,
                 col * face_size:(col + 1) * face_size] = pixels

    return combined
