"""
equi2cube - Equirectangular panorama to cubemap converter.
Resamples a lat-long panorama into six square skybox faces.
"""

from .config.defaults import APP_NAME, APP_VERSION
from .transforms import CubeFace, E2CTransform, EquirectImage, Interpolation, render

__version__ = APP_VERSION

__all__ = [
    'APP_NAME',
    'CubeFace',
    'E2CTransform',
    'EquirectImage',
    'Interpolation',
    'render',
    '__version__',
]
