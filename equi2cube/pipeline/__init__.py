"""
Pipeline Module
Batch orchestration and image I/O.
"""

from .batch_orchestrator import BatchOrchestrator
from .image_io import OutputFormat, load_equirect, save_face

__all__ = ['BatchOrchestrator', 'OutputFormat', 'load_equirect', 'save_face']
