"""
Image decode/encode for the converter.

Decoding goes through OpenCV (any format it reads, 8 or 16 bit, with or
without alpha). Faces are written as PNG through Pillow, JPEG and WEBP
through OpenCV. Pixel arrays are RGB(A) everywhere outside this module;
the BGR order OpenCV uses never leaks out.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Union

import cv2
import numpy as np
from PIL import Image

from ..config.defaults import (
    JPEG_QUALITY, PNG_COMPRESSION_LEVEL, SUPPORTED_INPUT_EXTENSIONS, WEBP_QUALITY
)
from ..errors import ConfigurationError, ImageIOError
from ..transforms.sampler import EquirectImage

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class OutputFormat(Enum):
    """Face image formats; the value is the file extension"""
    JPG = 'jpg'
    PNG = 'png'
    WEBP = 'webp'

    @classmethod
    def parse(cls, value) -> 'OutputFormat':
        if isinstance(value, cls):
            return value
        name = str(value).lower().lstrip('.')
        if name == 'jpeg':
            name = 'jpg'
        try:
            return cls(name)
        except ValueError:
            choices = ', '.join(m.value for m in cls)
            raise ConfigurationError(f"Unknown output format {value!r} (expected one of: {choices})")

    @property
    def extension(self) -> str:
        return self.value


def load_equirect(path: PathLike) -> EquirectImage:
    """
    Decode an equirectangular panorama.

    Args:
        path: Image file path

    Returns:
        EquirectImage with RGB / RGBA / single-channel pixels
    """
    path = Path(path)
    if not path.is_file():
        raise ImageIOError(f"Input image not found: {path}")

    try:
        img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise ImageIOError(f"Failed to decode {path}: {e}") from e
    if img is None or img.size == 0:
        raise ImageIOError(f"Failed to decode {path}")

    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    elif img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)

    height, width = img.shape[:2]
    if width != 2 * height:
        logger.warning(f"{path.name} is {width}x{height}; equirectangular panoramas are normally 2:1")
    logger.debug(f"Loaded {path.name}: {width}x{height}, dtype={img.dtype}")

    return EquirectImage(img)


def _to_8bit(pixels: np.ndarray) -> np.ndarray:
    if pixels.dtype == np.uint8:
        return pixels
    if pixels.dtype == np.uint16:
        return np.rint(pixels / 257.0).astype(np.uint8)
    raise ImageIOError(f"Cannot encode {pixels.dtype} pixels without tone mapping")


def _to_bgr(pixels: np.ndarray, keep_alpha: bool) -> np.ndarray:
    """RGB(A) -> OpenCV channel order; single channel passes through."""
    channels = pixels.shape[2] if pixels.ndim == 3 else 1
    if channels == 1:
        return pixels.reshape(pixels.shape[:2])
    if channels == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)
    if channels == 4:
        code = cv2.COLOR_RGBA2BGRA if keep_alpha else cv2.COLOR_RGBA2BGR
        return cv2.cvtColor(pixels, code)
    raise ImageIOError(f"Cannot encode {channels}-channel pixels")


def _save_png(pixels: np.ndarray, path: Path):
    # Pillow for PNG, OpenCV if Pillow cannot take the array (e.g. 16-bit RGB)
    try:
        pil_pixels = pixels[:, :, 0] if pixels.ndim == 3 and pixels.shape[2] == 1 else pixels
        Image.fromarray(pil_pixels).save(str(path), 'PNG', compress_level=PNG_COMPRESSION_LEVEL)
        return
    except (TypeError, ValueError, KeyError) as e:
        logger.debug(f"PIL PNG save failed for {path.name}: {e}, falling back to cv2")

    if pixels.dtype not in (np.uint8, np.uint16):
        raise ImageIOError(f"Cannot encode {pixels.dtype} pixels as PNG")
    success = cv2.imwrite(str(path), _to_bgr(pixels, keep_alpha=True),
                          [cv2.IMWRITE_PNG_COMPRESSION, PNG_COMPRESSION_LEVEL])
    if not success:
        raise ImageIOError(f"Failed to save {path}")


def save_face(pixels: np.ndarray, path: PathLike, output_format=OutputFormat.PNG) -> Path:
    """
    Encode one face (or an assembled layout) to disk.

    Args:
        pixels: (H, W[, C]) RGB(A) array
        path: Destination file
        output_format: OutputFormat or its name

    Returns:
        Path written
    """
    output_format = OutputFormat.parse(output_format)
    path = Path(path)
    pixels = np.ascontiguousarray(pixels)

    try:
        if output_format is OutputFormat.PNG:
            _save_png(pixels, path)
        elif output_format is OutputFormat.JPG:
            # JPEG has no alpha channel
            bgr = _to_bgr(_to_8bit(pixels), keep_alpha=False)
            if not cv2.imwrite(str(path), bgr, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY]):
                raise ImageIOError(f"Failed to save {path}")
        else:
            bgr = _to_bgr(_to_8bit(pixels), keep_alpha=True)
            if not cv2.imwrite(str(path), bgr, [cv2.IMWRITE_WEBP_QUALITY, WEBP_QUALITY]):
                raise ImageIOError(f"Failed to save {path}")
    except (OSError, cv2.error) as e:
        raise ImageIOError(f"Failed to save {path}: {e}") from e

    logger.debug(f"Saved {path.name} ({pixels.shape[1]}x{pixels.shape[0]})")
    return path


def list_input_images(folder: PathLike) -> List[Path]:
    """Panorama files directly inside folder, sorted by name."""
    folder = Path(folder)
    return sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
