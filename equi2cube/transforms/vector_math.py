"""
Vector helpers for direction math.

Vectors are numpy arrays whose last axis holds (x, y, z), so the same
functions work on a single direction of shape (3,) and on a whole face
grid of shape (rows, cols, 3).
"""

import numpy as np

AXES = ('x', 'y', 'z')


def length(v):
    """Euclidean length along the last axis."""
    v = np.asarray(v, dtype=np.float64)
    return np.sqrt(np.sum(v * v, axis=-1))


def normalize(v):
    """Return v scaled to unit length along the last axis."""
    v = np.asarray(v, dtype=np.float64)
    return v / np.sqrt(np.sum(v * v, axis=-1, keepdims=True))


def rotate_quarter_turns(v, axis='x', turns=1):
    """
    Rotate by turns * 90 degrees about a coordinate axis (right-hand rule).

    Quarter turns are pure axis swaps with sign flips, so the result is
    exact: no sin/cos rounding, and turning back restores v bit for bit.

    Args:
        v: Vector(s), last axis = (x, y, z)
        axis: 'x', 'y' or 'z'
        turns: Number of quarter turns, any integer (negative = clockwise)

    Returns:
        Rotated vector(s), same shape as v
    """
    if axis not in AXES:
        raise ValueError(f"Unknown axis: {axis!r}")

    v = np.asarray(v, dtype=np.float64)
    # (i, j) span the plane of rotation; i -> j for a positive quarter turn
    k = AXES.index(axis)
    i, j = (k + 1) % 3, (k + 2) % 3

    out = v.copy()
    for _ in range(turns % 4):
        a = out[..., i].copy()
        out[..., i] = -out[..., j]
        out[..., j] = a
    return out
