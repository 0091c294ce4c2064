"""
equi2cube - Command Line Entry Point
Converts an equirectangular panorama (or a folder of them) into cubemap faces.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config.config_manager import get_config_manager
from .config.defaults import (
    APP_DESCRIPTION, APP_NAME, APP_VERSION, CUBEMAP_LAYOUTS, INTERPOLATION_MODES,
    DEFAULT_LOG_LEVEL, LOG_FORMAT, SUPPORTED_OUTPUT_FORMATS
)
from .errors import ConfigurationError
from .pipeline.batch_orchestrator import BatchOrchestrator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_INPUT_ERROR = 3
EXIT_INTERNAL_ERROR = 4
EXIT_CANCELLED = 130

_EXIT_CODES = {
    'input': EXIT_INPUT_ERROR,
    'internal': EXIT_INTERNAL_ERROR,
    'cancelled': EXIT_CANCELLED,
}

# CLI flag -> config key, for flags that may override a loaded config
_OVERRIDES = {
    'size': 'face_size',
    'interpolation': 'interpolation',
    'format': 'output_format',
    'layout': 'layout',
    'workers': 'workers',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_DESCRIPTION}."
    )
    parser.add_argument("input", help="Equirectangular image, or a folder of them")
    parser.add_argument("output", help="Directory for the face images (created if missing)")
    parser.add_argument("--size", "-s", type=int, default=None,
                        help="Edge length (px) of each square face (default: 512)")
    parser.add_argument("--interpolation", "-i", choices=list(INTERPOLATION_MODES), default=None,
                        help="Sampling used on the source image (default: linear)")
    parser.add_argument("--format", "-f", choices=SUPPORTED_OUTPUT_FORMATS, default=None,
                        help="Image format of the output faces (default: png)")
    parser.add_argument("--rotate", "-r", action="store_true", default=None,
                        help="Rotate to a z-up skybox (zenith on the +Z face)")
    parser.add_argument("--layout", "-l", choices=list(CUBEMAP_LAYOUTS), default=None,
                        help="Write separate faces or one assembled image (default: separate)")
    parser.add_argument("--workers", "-w", type=int, default=None,
                        help="Faces rendered in parallel (default: up to 6)")
    parser.add_argument("--config", type=Path, default=None,
                        help="Load settings from a saved JSON config; explicit flags win")
    parser.add_argument("--save-config", type=Path, default=None,
                        help="Save the effective settings to a JSON config")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    handlers = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else DEFAULT_LOG_LEVEL,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


def build_config(args: argparse.Namespace) -> dict:
    """Merge defaults, an optional saved config, and explicit CLI flags."""
    config_manager = get_config_manager()
    config = config_manager.get_default_config()

    if args.config is not None:
        loaded = config_manager.load_config(args.config)
        if loaded is None:
            raise ConfigurationError(f"Could not load config file: {args.config}")
        config.update(loaded)

    for flag, key in _OVERRIDES.items():
        value = getattr(args, flag)
        if value is not None:
            config[key] = value
    if args.rotate:
        config['rotate'] = True

    config['input_path'] = args.input
    config['output_dir'] = args.output
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        config = build_config(args)
        orchestrator = BatchOrchestrator(config)
        orchestrator.validate()

        if args.save_config is not None:
            saved = {k: v for k, v in config.items() if k not in ('input_path', 'output_dir')}
            if not get_config_manager().save_config(saved, filepath=args.save_config):
                logger.warning(f"Could not save config to {args.save_config}")

        result = orchestrator.run(
            progress_callback=lambda current, total, message: logger.debug(
                f"Progress {current}/{total}: {message}")
        )

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_CANCELLED
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_INTERNAL_ERROR

    if result.get('success', False):
        logger.info(f"Wrote {len(result['output_files'])} files to {result['output_dir']}")
        return EXIT_OK

    logger.error(f"Conversion failed: {result.get('error', 'Unknown error')}")
    return _EXIT_CODES.get(result.get('error_kind'), EXIT_INTERNAL_ERROR)


if __name__ == '__main__':
    sys.exit(main())
