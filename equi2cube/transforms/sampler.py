"""
Equirectangular source image and pixel sampling.

Columns wrap around (longitude is periodic), rows clamp (the poles are
the image edges). Both samplers accept scalar or array (u, v) and return
colors with a trailing channel axis.
"""

from enum import Enum
from typing import Callable

import numpy as np

from ..errors import ConfigurationError, InvalidInputError


class Interpolation(Enum):
    """Sampling mode, chosen once per conversion"""
    LINEAR = 'linear'
    NEAREST = 'nearest'

    @classmethod
    def parse(cls, value) -> 'Interpolation':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ', '.join(m.value for m in cls)
            raise ConfigurationError(f"Unknown interpolation {value!r} (expected one of: {choices})")


class EquirectImage:
    """
    Read-only view of a decoded equirectangular panorama.

    Wraps an (H, W, C) numpy array; an (H, W) array is treated as a single
    channel. The array is copied and locked so concurrent readers can share
    it safely.
    """

    def __init__(self, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise InvalidInputError(f"Expected an (H, W) or (H, W, C) image, got shape {pixels.shape}")

        height, width, channels = pixels.shape
        if width == 0 or height == 0 or channels == 0:
            raise InvalidInputError(f"Source image is empty ({width}x{height}x{channels})")

        self._pixels = np.array(pixels, copy=True)
        self._pixels.setflags(write=False)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def channels(self) -> int:
        return self._pixels.shape[2]

    @property
    def dtype(self):
        return self._pixels.dtype

    def get(self, x: int, y: int) -> np.ndarray:
        """Color at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self._pixels[y, x]

    def __repr__(self):
        return f"EquirectImage({self.width}x{self.height}, channels={self.channels}, dtype={self.dtype})"


def _wrap_columns(cols, width):
    return np.mod(cols, width)


def _clamp_rows(rows, height):
    return np.clip(rows, 0, height - 1)


def _to_source_dtype(values: np.ndarray, dtype) -> np.ndarray:
    """Round and clip blended values back into the source channel range."""
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return values.astype(dtype)


def sample_nearest(image: EquirectImage, u, v) -> np.ndarray:
    """Color of the source pixel containing (u, v)."""
    cols = np.floor(np.asarray(u, dtype=np.float64) * image.width).astype(np.int64)
    rows = np.floor(np.asarray(v, dtype=np.float64) * image.height).astype(np.int64)
    return image.pixels[_clamp_rows(rows, image.height), _wrap_columns(cols, image.width)]


def sample_linear(image: EquirectImage, u, v) -> np.ndarray:
    """
    Bilinear blend of the four source pixels around (u, v).

    Pixel centers sit at half-integer positions, so (u, v) is shifted by
    half a pixel before locating the neighbours. Channels are blended
    independently in the source's own encoding (no gamma handling).
    """
    px = np.asarray(u, dtype=np.float64) * image.width - 0.5
    py = np.asarray(v, dtype=np.float64) * image.height - 0.5

    x0 = np.floor(px)
    y0 = np.floor(py)
    fx = np.expand_dims(px - x0, -1)
    fy = np.expand_dims(py - y0, -1)
    x0 = x0.astype(np.int64)
    y0 = y0.astype(np.int64)

    # Wrap horizontally (longitude), clamp vertically (poles)
    c0 = _wrap_columns(x0, image.width)
    c1 = _wrap_columns(x0 + 1, image.width)
    r0 = _clamp_rows(y0, image.height)
    r1 = _clamp_rows(y0 + 1, image.height)

    src = image.pixels
    p00 = src[r0, c0].astype(np.float64)
    p10 = src[r0, c1].astype(np.float64)
    p01 = src[r1, c0].astype(np.float64)
    p11 = src[r1, c1].astype(np.float64)

    result = (p00 * (1.0 - fx) * (1.0 - fy)
              + p10 * fx * (1.0 - fy)
              + p01 * (1.0 - fx) * fy
              + p11 * fx * fy)
    return _to_source_dtype(result, image.dtype)


_SAMPLERS = {
    Interpolation.NEAREST: sample_nearest,
    Interpolation.LINEAR: sample_linear,
}


def sampler_for(mode) -> Callable:
    """Resolve the sampling function for a mode (done once per run)."""
    return _SAMPLERS[Interpolation.parse(mode)]


def sample(image: EquirectImage, u, v, mode=Interpolation.LINEAR) -> np.ndarray:
    """
    Sample the panorama at texture coordinate(s) (u, v).

    Args:
        image: Source panorama
        u: Horizontal coordinate(s), periodic with period 1
        v: Vertical coordinate(s), clamped to [0, 1]
        mode: Interpolation mode or its name

    Returns:
        Color(s) with a trailing channel axis, in the source dtype
    """
    return sampler_for(mode)(image, u, v)
