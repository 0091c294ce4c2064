"""
equi2cube - Default Configuration Parameters
Central location for all default settings across the converter.
"""

import os

# ============================================================================
# CUBE FACE RENDERING DEFAULTS
# ============================================================================

# Output face dimensions (faces are always square)
DEFAULT_FACE_SIZE = 512
FACE_SIZE_MIN = 1

# Interpolation used when sampling the panorama
INTERPOLATION_MODES = {
    'linear': 'Bilinear (smooth)',
    'nearest': 'Nearest neighbour (sharp)'
}
DEFAULT_INTERPOLATION = 'linear'

# Rotate so the panorama's zenith lands on the +Z face (z-up skybox)
DEFAULT_ROTATE = False

# ============================================================================
# OUTPUT DEFAULTS
# ============================================================================

# Output formats
SUPPORTED_OUTPUT_FORMATS = ['png', 'jpg', 'webp']
DEFAULT_OUTPUT_FORMAT = 'png'

# Encoder settings
PNG_COMPRESSION_LEVEL = 6
JPEG_QUALITY = 95
WEBP_QUALITY = 95

# Supported panorama extensions when the input is a folder
SUPPORTED_INPUT_EXTENSIONS = ['.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp', '.webp']

# Cubemap layouts
CUBEMAP_LAYOUTS = {
    'separate': 'Separate files (6 images)',
    'cross_horizontal': 'Cross Horizontal (4:3)',
    'cross_vertical': 'Cross Vertical (3:4)',
    'strip_horizontal': 'Strip (6:1)'
}
DEFAULT_CUBEMAP_LAYOUT = 'separate'

# ============================================================================
# PERFORMANCE
# ============================================================================

# Worker threads for face rendering (one face per unit of work)
DEFAULT_WORKER_COUNT = min(6, os.cpu_count() or 1)
WORKER_COUNT_MIN = 1

# Upper bound on pixels resampled per chunk inside a face (caps temp memory)
DEFAULT_CHUNK_PIXELS = 1 << 20

# ============================================================================
# LOGGING
# ============================================================================

DEFAULT_LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# ============================================================================
# CONFIG FILE SETTINGS
# ============================================================================

CONFIG_FILE_VERSION = '1.0'

# ============================================================================
# VERSION INFO
# ============================================================================

APP_NAME = 'equi2cube'
APP_VERSION = '1.0.0'
APP_DESCRIPTION = 'Convert equirectangular panoramas into six cubemap (skybox) faces'
