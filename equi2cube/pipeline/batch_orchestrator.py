"""
Batch Conversion Orchestrator for equi2cube
Coordinates load -> render -> save for one panorama or a folder of them.

Configuration problems raise ConfigurationError before any image is
touched. Everything after that is reported through the result dictionary,
so one unreadable panorama does not abort a whole folder.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config.config_manager import get_config_manager
from ..errors import (
    ConfigurationError, ImageIOError, InternalComputationError, InvalidInputError, RenderCancelled
)
from ..transforms import CubemapLayout, E2CTransform, Interpolation, assemble_layout
from .image_io import OutputFormat, list_input_images, load_equirect, save_face

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """
    Runs conversions described by a config dictionary.

    Config keys: input_path, output_dir, face_size, interpolation, rotate,
    output_format, layout, workers (see ConfigManager.get_default_config).
    """

    def __init__(self, config: Dict, transform: Optional[E2CTransform] = None):
        self.config_manager = get_config_manager()
        self.config = {**self.config_manager.get_default_config(), **config}
        self.transform = transform
        self.is_cancelled = False

    def validate(self) -> Dict:
        """
        Check the config and resolve it into typed settings.

        Raises:
            ConfigurationError: listing every problem found
        """
        is_valid, errors = self.config_manager.validate_config(self.config)
        if not is_valid:
            raise ConfigurationError("; ".join(errors))

        return {
            'input_path': Path(self.config['input_path']),
            'output_dir': Path(self.config['output_dir']),
            'face_size': self.config['face_size'],
            'interpolation': Interpolation.parse(self.config['interpolation']),
            'rotate': bool(self.config.get('rotate', False)),
            'output_format': OutputFormat.parse(self.config['output_format']),
            'layout': CubemapLayout.parse(self.config['layout']),
            'workers': self.config['workers'],
        }

    def run(self, progress_callback: Optional[Callable] = None,
            cancel_check: Optional[Callable] = None) -> Dict:
        """
        Execute the conversion.

        Args:
            progress_callback: Called with (current, total, message) per rendered face
            cancel_check: Returns True to stop; polled between faces

        Returns:
            Result dictionary with 'success', 'output_files', 'output_dir'
            and, on failure, 'error' and 'error_kind' ('input', 'internal'
            or 'cancelled')
        """
        settings = self.validate()
        if self.transform is None:
            self.transform = E2CTransform(max_workers=settings['workers'])

        input_path = settings['input_path']
        output_dir = settings['output_dir']
        results = {
            'success': False,
            'output_files': [],
            'output_dir': str(output_dir),
            'images': [],
            'start_time': datetime.now().isoformat()
        }

        if input_path.is_dir():
            jobs = [(image, output_dir / image.stem) for image in list_input_images(input_path)]
            if not jobs:
                logger.error(f"No panorama images found in {input_path}")
                results.update(error=f"No panorama images found in {input_path}", error_kind='input')
                return results
            logger.info(f"Found {len(jobs)} panoramas in {input_path}")
        elif input_path.is_file():
            jobs = [(input_path, output_dir)]
        else:
            logger.error(f"Input not found: {input_path}")
            results.update(error=f"Input not found: {input_path}", error_kind='input')
            return results

        def should_cancel():
            return self.is_cancelled or bool(cancel_check and cancel_check())

        failures = []
        for index, (image_path, image_output_dir) in enumerate(jobs, start=1):
            if should_cancel():
                logger.info("Conversion cancelled")
                results.update(error='Cancelled by user', error_kind='cancelled')
                return results

            logger.info(f"=== [{index}/{len(jobs)}] Converting {image_path.name} ===")
            try:
                image_result = self._convert_image(
                    image_path, image_output_dir, settings,
                    self._prefixed(progress_callback, image_path.name), should_cancel
                )
            except RenderCancelled:
                logger.info(f"Conversion cancelled during {image_path.name}")
                results.update(error='Cancelled by user', error_kind='cancelled')
                return results
            except (ImageIOError, InvalidInputError) as e:
                logger.error(f"{image_path.name}: {e}")
                failures.append({'input_file': str(image_path), 'error': str(e), 'error_kind': 'input'})
                continue
            except InternalComputationError as e:
                logger.error(f"{image_path.name}: internal error: {e}", exc_info=True)
                failures.append({'input_file': str(image_path), 'error': str(e), 'error_kind': 'internal'})
                continue

            results['images'].append(image_result)
            results['output_files'].extend(image_result['output_files'])

        results['end_time'] = datetime.now().isoformat()
        if failures:
            results['failures'] = failures
            results['error'] = failures[0]['error'] if len(failures) == 1 else \
                f"{len(failures)} of {len(jobs)} panoramas failed"
            # An internal failure outranks bad input files
            kinds = {f['error_kind'] for f in failures}
            results['error_kind'] = 'internal' if 'internal' in kinds else 'input'
            return results

        results['success'] = True
        logger.info(f"Generated images have been saved in \"{output_dir}\"")
        return results

    def _convert_image(self, image_path: Path, output_dir: Path, settings: Dict,
                       progress_callback, cancel_check) -> Dict:
        """Load, render and save one panorama."""
        timings = {}

        start = time.perf_counter()
        source = load_equirect(image_path)
        timings['load'] = time.perf_counter() - start

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ImageIOError(f"Cannot create output directory {output_dir}: {e}") from e

        start = time.perf_counter()
        buffers = self.transform.render(
            source, settings['face_size'], settings['interpolation'], settings['rotate'],
            progress_callback=progress_callback, cancel_check=cancel_check
        )
        timings['convert'] = time.perf_counter() - start
        logger.info(f"Convert: {timings['convert']:.3f}s")

        start = time.perf_counter()
        output_files = self._save_faces(buffers, output_dir, settings['output_format'], settings['layout'])
        timings['save'] = time.perf_counter() - start
        logger.info(f"Save: {timings['save']:.3f}s")

        return {
            'success': True,
            'input_file': str(image_path),
            'output_dir': str(output_dir),
            'output_files': output_files,
            'face_size': settings['face_size'],
            'timings': timings
        }

    def _save_faces(self, buffers, output_dir: Path, output_format: OutputFormat,
                    layout: CubemapLayout) -> List[str]:
        ext = output_format.extension

        if layout is not CubemapLayout.SEPARATE:
            combined = assemble_layout({face: buf.pixels for face, buf in buffers.items()}, layout)
            out_path = output_dir / f"cubemap_{layout.value}.{ext}"
            return [str(save_face(combined, out_path, output_format))]

        # Faces encode independently; write them in parallel
        with ThreadPoolExecutor(max_workers=len(buffers)) as save_executor:
            futures = [
                save_executor.submit(save_face, buf.pixels, output_dir / f"{face.value}.{ext}", output_format)
                for face, buf in buffers.items()
            ]
            return [str(future.result()) for future in futures]

    @staticmethod
    def _prefixed(progress_callback, name):
        if progress_callback is None:
            return None

        def callback(current, total, message):
            progress_callback(current, total, f"{name}: {message}")
        return callback

    def cancel(self):
        """Request cancellation; takes effect before the next face"""
        self.is_cancelled = True
        logger.info("Conversion cancellation requested")
