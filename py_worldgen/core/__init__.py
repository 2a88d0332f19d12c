"""
Core world generation functionality.
"""

from .noise import NoiseField
from .sphere import sphere_point, sphere_grid, cell_coordinates
from .fields import FieldGenerator, FieldOptions, ElevationGrid, ClimateGrid
from .biomes import BiomeType, BiomeClassifier, BiomeOptions, BIOME_NAMES, classify_biome
from .territories import Territory, TerritoryGrower, TerritoryOptions, neighbors
from .world import World, WorldGenerator, generate_world

__all__ = ['NoiseField', 'sphere_point', 'sphere_grid', 'cell_coordinates',
           'FieldGenerator', 'FieldOptions', 'ElevationGrid', 'ClimateGrid',
           'BiomeType', 'BiomeClassifier', 'BiomeOptions', 'BIOME_NAMES', 'classify_biome',
           'Territory', 'TerritoryGrower', 'TerritoryOptions', 'neighbors',
           'World', 'WorldGenerator', 'generate_world']
