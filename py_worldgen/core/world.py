"""
World generation pipeline.

``WorldGenerator.generate`` runs every stage as a full sweep over the grid:
elevation, then temperature and humidity, then biomes, then (optionally)
territories. The result is a ``World``: an immutable snapshot whose arrays
are read-only. Regenerating builds a new ``World`` and never touches one that
was already handed out.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

import numpy as np
import structlog
from pydantic import BaseModel, Field

from ..config import WorldConfig
from ..utils.random import derive_seeds, resolve_seed
from .alea_prng import AleaPRNG
from .biomes import BIOME_NAMES, BiomeClassifier, BiomeOptions, BiomeType
from .fields import FieldGenerator, FieldOptions
from .sphere import cell_coordinates
from .territories import UNCLAIMED, Territory, TerritoryGrower, TerritoryOptions

logger = structlog.get_logger()


class CellInfo(BaseModel):
    """Everything known about one cell."""

    x: int
    y: int
    latitude: float = Field(description="Degrees, +90 at y=0 (north up)")
    longitude: float = Field(description="Degrees, -180 at x=0")
    elevation: float
    temperature: float = Field(description="°C")
    humidity: float
    biome: BiomeType
    biome_name: str
    territory_id: int = Field(description="0 when unclaimed")
    territory_name: Optional[str] = None


class BiomeStatistics(BaseModel):
    """Distribution of one biome across the world."""

    biome: BiomeType
    biome_name: str
    cell_count: int
    percentage: float
    avg_temperature: Optional[float] = None
    avg_humidity: Optional[float] = None


@dataclass(frozen=True, eq=False)
class World:
    """Published result of one generation run, indexed [y, x]."""

    config: WorldConfig
    seed: int
    elevation: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray
    biomes: np.ndarray
    territory_ids: np.ndarray
    territories: Mapping[int, Territory] = field(default_factory=lambda: MappingProxyType({}))
    generation_time_seconds: float = 0.0

    @property
    def size(self) -> int:
        return self.config.size

    @property
    def sea_level(self) -> float:
        return self.config.sea_level

    @property
    def land_fraction(self) -> float:
        """Share of cells at or above sea level."""
        return float(np.mean(self.elevation >= self.sea_level))

    def territory(self, territory_id: int) -> Optional[Territory]:
        """Territory by id; None for 0 or unknown ids."""
        return self.territories.get(territory_id)

    def cell(self, x: int, y: int) -> CellInfo:
        """
        Describe cell (x, y).

        Raises:
            IndexError: If the coordinates are outside the grid
        """
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} grid")

        latitude, longitude = cell_coordinates(x, y, self.size)
        biome = BiomeType(int(self.biomes[y, x]))
        territory_id = int(self.territory_ids[y, x])
        territory = self.territory(territory_id)
        return CellInfo(
            x=x,
            y=y,
            latitude=latitude,
            longitude=longitude,
            elevation=float(self.elevation[y, x]),
            temperature=float(self.temperature[y, x]),
            humidity=float(self.humidity[y, x]),
            biome=biome,
            biome_name=BIOME_NAMES[biome],
            territory_id=territory_id,
            territory_name=territory.name if territory else None,
        )

    def biome_statistics(self) -> List[BiomeStatistics]:
        """Per-biome cell counts and mean climate, most common first."""
        total = self.biomes.size
        stats = []
        for biome in BiomeType:
            mask = self.biomes == biome
            count = int(np.count_nonzero(mask))
            if count == 0:
                continue
            stats.append(
                BiomeStatistics(
                    biome=biome,
                    biome_name=BIOME_NAMES[biome],
                    cell_count=count,
                    percentage=100.0 * count / total,
                    avg_temperature=float(self.temperature[mask].mean()),
                    avg_humidity=float(self.humidity[mask].mean()),
                )
            )
        stats.sort(key=lambda s: s.cell_count, reverse=True)
        return stats


class WorldGenerator:
    """Runs the full generation pipeline for one configuration."""

    def __init__(
        self,
        config: WorldConfig,
        field_options: Optional[FieldOptions] = None,
        biome_options: Optional[BiomeOptions] = None,
        territory_options: Optional[TerritoryOptions] = None,
    ):
        self.config = config
        self.field_options = field_options or FieldOptions()
        self.biome_options = biome_options or BiomeOptions()
        self.territory_options = territory_options or TerritoryOptions()

    def generate(self) -> World:
        """
        Generate a complete world.

        Raises:
            NoLandAvailableError: If territories are requested and their
                capitals cannot be placed
        """
        config = self.config
        seed = resolve_seed(config.seed)
        log = logger.bind(seed=seed, size=config.size)
        log.info("Starting world generation", sea_level=config.sea_level)
        start = time.perf_counter()

        seeds = derive_seeds(seed)
        fields = FieldGenerator(config, seeds, self.field_options)
        elevation = fields.generate_elevation()
        climate = fields.generate_climate(elevation)

        biomes = BiomeClassifier(config.sea_level, self.biome_options).classify(climate)
        biomes.flags.writeable = False

        territories: Dict[int, Territory] = {}
        if config.generate_territories:
            grower = TerritoryGrower(
                elevation,
                self.territory_options,
                prng=AleaPRNG(seeds["territories"]),
                name_prng=AleaPRNG(seeds["names"]),
            )
            territory_ids, territories = grower.grow(config.num_territories, config.territory_names)
        else:
            territory_ids = np.full((config.size, config.size), UNCLAIMED, dtype=np.int32)
        territory_ids.flags.writeable = False

        elapsed = time.perf_counter() - start
        log.info("World generation complete", seconds=round(elapsed, 3))

        return World(
            config=config,
            seed=seed,
            elevation=climate.elevation,
            temperature=climate.temperature,
            humidity=climate.humidity,
            biomes=biomes,
            territory_ids=territory_ids,
            territories=MappingProxyType(territories),
            generation_time_seconds=elapsed,
        )


def generate_world(**options) -> World:
    """Validate ``options`` as a ``WorldConfig`` and generate a world."""
    return WorldGenerator(WorldConfig.from_options(**options)).generate()
