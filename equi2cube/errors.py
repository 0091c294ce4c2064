"""
Error kinds raised by equi2cube.

Callers can tell a bad configuration from a bad input file from an internal
failure of the resampling engine by catching the matching subclass.
"""


class Equi2CubeError(Exception):
    """Base class for all equi2cube errors"""


class ConfigurationError(Equi2CubeError):
    """Invalid conversion settings (face size, mode, format, layout)"""


class InvalidInputError(Equi2CubeError):
    """Source image cannot be sampled (zero width or height)"""


class ImageIOError(Equi2CubeError):
    """Decoding, encoding or filesystem failure"""


class InternalComputationError(Equi2CubeError):
    """A face buffer was written twice or handed over incomplete"""


class RenderCancelled(Equi2CubeError):
    """Rendering stopped by the caller's cancel check"""
