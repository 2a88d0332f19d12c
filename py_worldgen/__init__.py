"""Procedural planet surface generation."""

from .config import WorldConfig, settings
from .errors import ConfigurationError, NoLandAvailableError, WorldGenerationError
from .core import World, WorldGenerator, generate_world

__version__ = "0.1.0"

__all__ = ['WorldConfig', 'settings', 'ConfigurationError', 'NoLandAvailableError',
           'WorldGenerationError', 'World', 'WorldGenerator', 'generate_world']
