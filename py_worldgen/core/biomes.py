"""
Biome classification from elevation, temperature and humidity.

The classification is a fixed decision table: ocean below sea level, mountains
above ``MOUNTAIN_ELEVATION``, then a temperature/humidity matrix for the
remaining land.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np
import structlog

from .fields import ClimateGrid

logger = structlog.get_logger()

# Elevation above which land is mountain regardless of climate
MOUNTAIN_ELEVATION = 0.75


class BiomeType(IntEnum):
    """Closed set of biome tags."""

    OCEAN = 0
    TUNDRA = 1
    TAIGA = 2
    GRASSLAND = 3
    TEMPERATE_FOREST = 4
    MEDITERRANEAN = 5
    TROPICAL_RAINFOREST = 6
    SAVANNA = 7
    DESERT = 8
    MOUNTAIN = 9


# Biome names for display
BIOME_NAMES = {
    BiomeType.OCEAN: "Ocean",
    BiomeType.TUNDRA: "Tundra",
    BiomeType.TAIGA: "Taiga",
    BiomeType.GRASSLAND: "Grassland",
    BiomeType.TEMPERATE_FOREST: "Temperate Forest",
    BiomeType.MEDITERRANEAN: "Mediterranean",
    BiomeType.TROPICAL_RAINFOREST: "Tropical Rainforest",
    BiomeType.SAVANNA: "Savanna",
    BiomeType.DESERT: "Desert",
    BiomeType.MOUNTAIN: "Mountain",
}


@dataclass
class BiomeOptions:
    """Cut points of the decision table."""

    mountain_elevation: float = MOUNTAIN_ELEVATION
    tundra_below: float = -10.0  # °C
    taiga_below: float = 0.0
    cool_below: float = 15.0
    warm_below: float = 25.0
    cool_forest_humidity: float = 0.5
    warm_forest_humidity: float = 0.6
    mediterranean_humidity: float = 0.3
    rainforest_humidity: float = 0.7
    savanna_humidity: float = 0.3


def classify_biome(
    elevation: float,
    temperature: float,
    humidity: float,
    sea_level: float,
    options: Optional[BiomeOptions] = None,
) -> BiomeType:
    """Classify a single cell."""
    o = options or BiomeOptions()

    if elevation < sea_level:
        return BiomeType.OCEAN
    if elevation > o.mountain_elevation:
        return BiomeType.MOUNTAIN

    if temperature < o.tundra_below:
        return BiomeType.TUNDRA
    if temperature < o.taiga_below:
        return BiomeType.TAIGA

    if temperature < o.cool_below:
        if humidity > o.cool_forest_humidity:
            return BiomeType.TEMPERATE_FOREST
        return BiomeType.GRASSLAND
    if temperature < o.warm_below:
        if humidity > o.warm_forest_humidity:
            return BiomeType.TEMPERATE_FOREST
        if humidity > o.mediterranean_humidity:
            return BiomeType.MEDITERRANEAN
        return BiomeType.GRASSLAND

    if humidity > o.rainforest_humidity:
        return BiomeType.TROPICAL_RAINFOREST
    if humidity > o.savanna_humidity:
        return BiomeType.SAVANNA
    return BiomeType.DESERT


class BiomeClassifier:
    """Applies the decision table to a whole climate grid."""

    def __init__(self, sea_level: float, options: Optional[BiomeOptions] = None):
        self.sea_level = sea_level
        self.options = options or BiomeOptions()

    def classify(self, climate: ClimateGrid) -> np.ndarray:
        """
        Classify every cell of a finished climate grid.

        Conditions are evaluated in table order and the first match wins, so
        the result agrees with ``classify_biome`` cell for cell.

        Returns:
            uint8 array of ``BiomeType`` values, indexed [y, x]
        """
        logger.info("Classifying biomes")
        o = self.options
        e = climate.elevation
        t = climate.temperature
        h = climate.humidity

        cool = t < o.cool_below
        warm = t < o.warm_below
        conditions = [
            e < self.sea_level,
            e > o.mountain_elevation,
            t < o.tundra_below,
            t < o.taiga_below,
            cool & (h > o.cool_forest_humidity),
            cool,
            warm & (h > o.warm_forest_humidity),
            warm & (h > o.mediterranean_humidity),
            warm,
            h > o.rainforest_humidity,
            h > o.savanna_humidity,
        ]
        choices = [
            BiomeType.OCEAN,
            BiomeType.MOUNTAIN,
            BiomeType.TUNDRA,
            BiomeType.TAIGA,
            BiomeType.TEMPERATE_FOREST,
            BiomeType.GRASSLAND,
            BiomeType.TEMPERATE_FOREST,
            BiomeType.MEDITERRANEAN,
            BiomeType.GRASSLAND,
            BiomeType.TROPICAL_RAINFOREST,
            BiomeType.SAVANNA,
        ]
        biomes = np.select(conditions, [int(c) for c in choices], default=int(BiomeType.DESERT))
        biomes = biomes.astype(np.uint8)

        counts = np.bincount(biomes.ravel(), minlength=len(BiomeType))
        logger.debug(
            "Biomes classified",
            **{BIOME_NAMES[b].lower().replace(" ", "_"): int(counts[b]) for b in BiomeType},
        )
        return biomes
