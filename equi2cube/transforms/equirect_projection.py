"""
Direction -> equirectangular texture coordinate projection.

Convention (y-up, longitude measured from -Z towards +X):
    u = 0.5   looking along -Z (panorama center column)
    u = 0.75  looking along +X
    u = 0/1   looking along +Z (the wrap-around seam)
    v = 0     +Y pole (top row), v = 1 -Y pole (bottom row)
"""

import math

import numpy as np


def direction_to_angles(direction):
    """
    Unit direction -> (longitude, latitude) in radians.

    Longitude is in (-pi, pi], latitude in [-pi/2, pi/2]. y is clamped
    before asin so directions that overshoot the poles by rounding error
    stay finite.
    """
    d = np.asarray(direction, dtype=np.float64)
    x, y, z = d[..., 0], d[..., 1], d[..., 2]
    longitude = np.arctan2(x, -z)
    latitude = np.arcsin(np.clip(y, -1.0, 1.0))
    return longitude, latitude


def project(direction):
    """
    Project unit direction(s) onto the equirectangular image.

    Args:
        direction: Vector(s) with last axis (x, y, z)

    Returns:
        (u, v): u in [0, 1) wraps horizontally, v in [0, 1] top to bottom
    """
    longitude, latitude = direction_to_angles(direction)
    u = np.mod((longitude + math.pi) / (2.0 * math.pi), 1.0)
    v = (math.pi / 2.0 - latitude) / math.pi
    return u, v
