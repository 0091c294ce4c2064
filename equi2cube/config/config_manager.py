"""
Configuration Manager for equi2cube
Handles saving/loading conversion configurations as JSON files
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import datetime

from .defaults import (
    DEFAULT_FACE_SIZE, FACE_SIZE_MIN, DEFAULT_INTERPOLATION, INTERPOLATION_MODES,
    DEFAULT_ROTATE, DEFAULT_OUTPUT_FORMAT, SUPPORTED_OUTPUT_FORMATS,
    DEFAULT_CUBEMAP_LAYOUT, CUBEMAP_LAYOUTS, DEFAULT_WORKER_COUNT, WORKER_COUNT_MIN,
    CONFIG_FILE_VERSION
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages conversion configurations for saving/loading user preferences.
    Allows users to save complete converter settings and restore them later.
    """

    DEFAULT_CONFIG_DIR = Path.home() / '.equi2cube' / 'configs'

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory for named configs (default: ~/.equi2cube/configs)
        """
        self.config_dir = Path(config_dir) if config_dir is not None else self.DEFAULT_CONFIG_DIR
        self.current_config: Dict[str, Any] = {}

    def save_config(self, config: Dict[str, Any], filepath: Optional[Path] = None,
                   config_name: Optional[str] = None) -> bool:
        """
        Save conversion configuration to JSON file.

        Args:
            config: Configuration dictionary to save
            filepath: Optional custom file path (if None, uses config directory)
            config_name: Optional config name (used if filepath is None)

        Returns:
            True if save successful, False otherwise
        """
        try:
            if filepath is None:
                if config_name is None:
                    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
                    config_name = f"config_{timestamp}"

                filepath = self.config_dir / f"{config_name}.json"
            filepath = Path(filepath)

            save_data = {
                'metadata': {
                    'saved_at': datetime.now().isoformat(),
                    'version': CONFIG_FILE_VERSION,
                    'config_name': config_name or filepath.stem
                },
                'pipeline_config': config
            }

            filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(save_data, f, indent=2)

            logger.info(f"Configuration saved to: {filepath}")
            self.current_config = config
            return True

        except (OSError, TypeError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def load_config(self, filepath: Path) -> Optional[Dict[str, Any]]:
        """
        Load conversion configuration from JSON file.

        Args:
            filepath: Path to configuration file

        Returns:
            Configuration dictionary, or None if load failed
        """
        filepath = Path(filepath)
        try:
            if not filepath.exists():
                logger.error(f"Configuration file not found: {filepath}")
                return None

            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                logger.error(f"Configuration file is not a JSON object: {filepath}")
                return None

            if 'pipeline_config' in data:
                config = data['pipeline_config']
                if not isinstance(config, dict):
                    logger.error(f"Configuration payload is not a JSON object: {filepath}")
                    return None
                metadata = data.get('metadata', {})
                logger.info(f"Configuration loaded: {metadata.get('config_name', filepath.stem)}")
                logger.debug(f"Saved at: {metadata.get('saved_at', 'Unknown')}")
            else:
                # Bare dict without metadata block
                config = data
                logger.info(f"Configuration loaded (bare format): {filepath.stem}")

            self.current_config = config
            return config

        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return None

    def list_saved_configs(self) -> list:
        """
        List all saved configurations in the config directory.

        Returns:
            List of tuples: (filepath, config_name, saved_date)
        """
        configs = []

        if not self.config_dir.exists():
            return configs

        for json_file in self.config_dir.glob('*.json'):
            try:
                with open(json_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                metadata = data.get('metadata', {})
                config_name = metadata.get('config_name', json_file.stem)
                saved_at = metadata.get('saved_at', 'Unknown')

                configs.append((json_file, config_name, saved_at))

            except (OSError, json.JSONDecodeError, AttributeError) as e:
                logger.warning(f"Could not read config {json_file}: {e}")

        # Newest first
        configs.sort(key=lambda x: x[2], reverse=True)
        return configs

    def delete_config(self, filepath: Path) -> bool:
        """Delete a saved configuration file."""
        filepath = Path(filepath)
        try:
            if filepath.exists():
                filepath.unlink()
                logger.info(f"Configuration deleted: {filepath}")
                return True
            else:
                logger.warning(f"Configuration file not found: {filepath}")
                return False

        except OSError as e:
            logger.error(f"Failed to delete configuration: {e}")
            return False

    def get_default_config(self) -> Dict[str, Any]:
        """
        Get default conversion configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            # Rendering
            'face_size': DEFAULT_FACE_SIZE,
            'interpolation': DEFAULT_INTERPOLATION,
            'rotate': DEFAULT_ROTATE,
            'workers': DEFAULT_WORKER_COUNT,

            # Output
            'output_format': DEFAULT_OUTPUT_FORMAT,
            'layout': DEFAULT_CUBEMAP_LAYOUT,

            # I/O
            'input_path': '',
            'output_dir': ''
        }

    def validate_config(self, config: Dict[str, Any]) -> tuple[bool, list]:
        """
        Validate configuration for completeness and correctness.

        Args:
            config: Configuration dictionary to validate

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if not config.get('input_path'):
            errors.append("Input path not specified")

        if not config.get('output_dir'):
            errors.append("Output directory not specified")

        face_size = config.get('face_size', 0)
        if isinstance(face_size, bool) or not isinstance(face_size, int) or face_size < FACE_SIZE_MIN:
            errors.append(f"Face size must be an integer >= {FACE_SIZE_MIN}")

        if config.get('interpolation') not in INTERPOLATION_MODES:
            errors.append(f"Interpolation must be one of: {', '.join(INTERPOLATION_MODES)}")

        if config.get('output_format') not in SUPPORTED_OUTPUT_FORMATS:
            errors.append(f"Output format must be one of: {', '.join(SUPPORTED_OUTPUT_FORMATS)}")

        if config.get('layout', DEFAULT_CUBEMAP_LAYOUT) not in CUBEMAP_LAYOUTS:
            errors.append(f"Layout must be one of: {', '.join(CUBEMAP_LAYOUTS)}")

        workers = config.get('workers', DEFAULT_WORKER_COUNT)
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < WORKER_COUNT_MIN:
            errors.append(f"Worker count must be an integer >= {WORKER_COUNT_MIN}")

        is_valid = len(errors) == 0
        return is_valid, errors


# Global instance
_config_manager = None

def get_config_manager() -> ConfigManager:
    """Get global ConfigManager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
