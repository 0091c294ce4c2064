"""
equi2cube Configuration Module
Provides access to default settings and saved conversion configs.
"""

from .defaults import *
from .config_manager import ConfigManager, get_config_manager

__all__ = [
    # Export all defaults
    'DEFAULT_FACE_SIZE', 'FACE_SIZE_MIN',
    'INTERPOLATION_MODES', 'DEFAULT_INTERPOLATION', 'DEFAULT_ROTATE',
    'SUPPORTED_OUTPUT_FORMATS', 'DEFAULT_OUTPUT_FORMAT',
    'CUBEMAP_LAYOUTS', 'DEFAULT_CUBEMAP_LAYOUT',
    'DEFAULT_WORKER_COUNT', 'DEFAULT_CHUNK_PIXELS',
    'APP_NAME', 'APP_VERSION', 'APP_DESCRIPTION',
    'ConfigManager', 'get_config_manager',
]
