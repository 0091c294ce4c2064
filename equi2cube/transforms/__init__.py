"""
Transform Engines Module
Provides the equirectangular to cubemap resampling engine and its parts.
"""

from .cube_faces import FACE_BASES, FACE_ORDER, CubeFace, face_direction, face_directions
from .orientation import rotate_direction, unrotate_direction
from .equirect_projection import project
from .sampler import EquirectImage, Interpolation, sample
from .e2c_transform import E2CTransform, FaceBuffer, render
from .cubemap_layout import CubemapLayout, assemble_layout

__all__ = [
    'FACE_BASES', 'FACE_ORDER', 'CubeFace', 'face_direction', 'face_directions',
    'rotate_direction', 'unrotate_direction',
    'project',
    'EquirectImage', 'Interpolation', 'sample',
    'E2CTransform', 'FaceBuffer', 'render',
    'CubemapLayout', 'assemble_layout',
]
