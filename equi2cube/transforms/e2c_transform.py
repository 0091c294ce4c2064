"""
Equirectangular to Cube Map (E2C) Transformation Engine
Converts a 360-degree equirectangular panorama into six square cube faces.

For every face pixel the engine builds the viewing direction from the face
basis, optionally turns it into the z-up orientation, projects it onto the
panorama and samples a color. All of it is vectorized with numpy over row
chunks of a face, so the per-pixel math never runs in Python loops.

The six faces are independent units of work and run on a thread pool;
numpy releases the GIL for the heavy array operations.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional

import numpy as np

from ..config.defaults import DEFAULT_CHUNK_PIXELS, DEFAULT_WORKER_COUNT
from ..errors import ConfigurationError, InternalComputationError, RenderCancelled
from .cube_faces import FACE_ORDER, CubeFace, face_directions
from .equirect_projection import project
from .orientation import rotate_direction
from .sampler import EquirectImage, Interpolation, sampler_for

logger = logging.getLogger(__name__)


class FaceBuffer:
    """
    Preallocated, write-once pixel grid for one cube face.

    Every cell must be written exactly once before the buffer is sealed
    and handed to the caller.
    """

    def __init__(self, face: CubeFace, size: int, channels: int, dtype=np.uint8):
        self.face = face
        self.size = size
        self._pixels = np.zeros((size, size, channels), dtype=dtype)
        self._written = np.zeros((size, size), dtype=bool)
        self._sealed = False

    @property
    def pixels(self) -> np.ndarray:
        """(size, size, channels) array indexed [row, column]"""
        return self._pixels

    @property
    def is_complete(self) -> bool:
        return bool(self._written.all())

    @property
    def written_count(self) -> int:
        return int(self._written.sum())

    def set(self, x: int, y: int, color):
        """Write one pixel."""
        self._check_open()
        if self._written[y, x]:
            raise InternalComputationError(f"{self.face} pixel ({x}, {y}) written twice")
        self._pixels[y, x] = color
        self._written[y, x] = True

    def write_rows(self, start: int, block: np.ndarray):
        """Write a block of full rows beginning at row start."""
        self._check_open()
        block = np.asarray(block)
        stop = start + block.shape[0]
        if block.shape[1:] != self._pixels.shape[1:] or start < 0 or stop > self.size:
            raise InternalComputationError(
                f"{self.face} row block {block.shape} at row {start} does not fit {self._pixels.shape}"
            )
        if self._written[start:stop].any():
            raise InternalComputationError(f"{self.face} rows {start}-{stop - 1} written twice")
        self._pixels[start:stop] = block
        self._written[start:stop] = True

    def seal(self) -> np.ndarray:
        """Close the buffer for writing; fails unless every pixel is set."""
        if not self.is_complete:
            missing = self.size * self.size - self.written_count
            raise InternalComputationError(f"{self.face} face has {missing} unset pixels")
        self._sealed = True
        return self._pixels

    def _check_open(self):
        if self._sealed:
            raise InternalComputationError(f"{self.face} face is sealed")

    def __repr__(self):
        return f"FaceBuffer({self.face.label}, {self.size}x{self.size}, complete={self.is_complete})"


class E2CTransform:
    """Equirectangular to Cube Map transformation class"""

    def __init__(self, max_workers: int = DEFAULT_WORKER_COUNT,
                 chunk_pixels: int = DEFAULT_CHUNK_PIXELS):
        """
        Args:
            max_workers: Threads rendering faces in parallel (1 = serial)
            chunk_pixels: Upper bound on pixels resampled per chunk
        """
        if max_workers < 1:
            raise ConfigurationError(f"Worker count must be >= 1, got {max_workers}")
        if chunk_pixels < 1:
            raise ConfigurationError(f"Chunk size must be >= 1 pixel, got {chunk_pixels}")
        self.max_workers = max_workers
        self.chunk_pixels = chunk_pixels
        self.cache = {}  # (face, size, rotate) -> (u, v) maps for single-chunk faces

    def render(self, source, size: int, mode=Interpolation.LINEAR, rotate: bool = False,
               progress_callback: Optional[Callable] = None,
               cancel_check: Optional[Callable] = None) -> Dict[CubeFace, FaceBuffer]:
        """
        Render all six cube faces from an equirectangular panorama.

        Args:
            source: EquirectImage or (H, W[, C]) numpy array
            size: Face edge length in pixels (> 0)
            mode: Interpolation mode or its name
            rotate: Produce a z-up skybox (zenith on the +Z face)
            progress_callback: Called with (current, total, message) per finished face
            cancel_check: Polled before each face; returning True stops the render

        Returns:
            Dictionary face -> sealed FaceBuffer, in render order
        """
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
            raise ConfigurationError(f"Face size must be a positive integer, got {size!r}")
        size = int(size)
        if not isinstance(source, EquirectImage):
            source = EquirectImage(source)

        # Dispatch once per run, not per pixel
        mode = Interpolation.parse(mode)
        sampler = sampler_for(mode)
        rotate = bool(rotate)

        buffers = {
            face: FaceBuffer(face, size, source.channels, source.dtype)
            for face in FACE_ORDER
        }
        total = len(FACE_ORDER)
        workers = min(self.max_workers, total)
        logger.debug(f"Rendering {total} faces {size}x{size} from {source} "
                     f"(mode={mode.value}, rotate={rotate}, workers={workers})")

        def render_unit(face):
            if cancel_check and cancel_check():
                raise RenderCancelled(f"Cancelled before {face} face")
            self._render_face(buffers[face], source, sampler, rotate)
            return face

        if workers == 1:
            for index, face in enumerate(FACE_ORDER, start=1):
                render_unit(face)
                self._report(progress_callback, index, total, face)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(render_unit, face) for face in FACE_ORDER]
                try:
                    for index, future in enumerate(as_completed(futures), start=1):
                        self._report(progress_callback, index, total, future.result())
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        for buffer in buffers.values():
            buffer.seal()
        return buffers

    def _render_face(self, buffer: FaceBuffer, source: EquirectImage, sampler, rotate: bool):
        size = buffer.size
        rows_per_chunk = max(1, self.chunk_pixels // size)
        for start in range(0, size, rows_per_chunk):
            stop = min(start + rows_per_chunk, size)
            u, v = self._face_uv(buffer.face, size, rotate, start, stop)
            buffer.write_rows(start, sampler(source, u, v))
        logger.debug(f"Generated {buffer.face} face ({size}x{size})")

    def _face_uv(self, face: CubeFace, size: int, rotate: bool, start: int, stop: int):
        """Texture coordinates for rows [start, stop) of a face."""
        whole_face = start == 0 and stop == size
        cache_key = (face, size, rotate)
        if whole_face and cache_key in self.cache:
            return self.cache[cache_key]

        directions = face_directions(face, size, rows=(start, stop))
        if rotate:
            directions = rotate_direction(directions)
        uv = project(directions)

        if whole_face:
            self.cache[cache_key] = uv
        return uv

    @staticmethod
    def _report(progress_callback, current, total, face):
        if progress_callback:
            progress_callback(current, total, f"Rendered {face} face ({face.label})")

    def get_cube_face_names(self) -> List[str]:
        """Face names in render order"""
        return [face.value for face in FACE_ORDER]

    def get_cache_size(self):
        """Return number of cached coordinate maps"""
        return len(self.cache)

    def clear_cache(self):
        """Clear the coordinate map cache"""
        cache_size = len(self.cache)
        self.cache.clear()
        logger.info(f"Cleared cubemap cache ({cache_size} entries)")


def render(source, size: int, mode=Interpolation.LINEAR, rotate: bool = False,
           max_workers: int = DEFAULT_WORKER_COUNT) -> Dict[CubeFace, np.ndarray]:
    """
    Convert a panorama into six face arrays keyed by CubeFace.

    Convenience wrapper around E2CTransform.render that hands back the
    sealed pixel arrays instead of the buffers.
    """
    buffers = E2CTransform(max_workers=max_workers).render(source, size, mode, rotate)
    return {face: buffer.pixels for face, buffer in buffers.items()}
