"""
Orientation rotator for z-up skyboxes.

Renderers that treat +Z as vertical want the panorama's zenith on the +Z
face. Before projection every direction is turned a quarter turn about +X,
(x, y, z) -> (x, z, -y), which carries +Z onto the panorama's +Y pole.
"""

from .vector_math import rotate_quarter_turns


def rotate_direction(direction):
    """z-up cube direction -> y-up panorama direction."""
    return rotate_quarter_turns(direction, axis='x', turns=-1)


def unrotate_direction(direction):
    """Exact inverse of rotate_direction: (x, y, z) -> (x, -z, y)."""
    return rotate_quarter_turns(direction, axis='x', turns=1)
