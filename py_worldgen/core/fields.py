"""
Elevation, temperature and humidity field generation.

This module implements:
- Fractal elevation sampled on the unit sphere
- Latitude-based temperature with an altitude lapse rate and noise variation
- Noise-driven humidity scaled by temperature, saturated over the ocean

Each field is a full sweep over the grid. Temperature needs the finished
elevation grid and humidity needs both elevation and temperature, so every
stage takes the previous stage's grid object as input.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import structlog

from ..config import WorldConfig
from .noise import NoiseField
from .sphere import sphere_grid

logger = structlog.get_logger()


@dataclass
class FieldOptions:
    """Constants of the climate model."""

    # Elevation octaves
    persistence: float = 0.5  # Amplitude falloff per octave
    lacunarity: float = 2.0  # Frequency growth per octave

    # Temperature settings
    temperature_equator: float = 30.0  # °C at the equator
    temperature_span: float = 60.0  # °C drop from equator to pole
    max_altitude_m: float = 8000.0  # Height of elevation 1.0 above sea level
    lapse_rate: float = -0.0065  # °C per metre
    temperature_noise_frequency: float = 0.5
    temperature_noise_amplitude: float = 10.0  # ± °C

    # Humidity settings
    humidity_noise_frequency: float = 0.8
    humidity_temperature_offset: float = 30.0
    humidity_temperature_range: float = 70.0
    ocean_humidity: float = 1.0


def _freeze(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class ElevationGrid:
    """Finished elevation pass, values in [0, 1], indexed [y, x]."""

    size: int
    sea_level: float
    elevation: np.ndarray

    @property
    def land_mask(self) -> np.ndarray:
        """Cells at or above sea level."""
        return self.elevation >= self.sea_level

    @property
    def ocean_mask(self) -> np.ndarray:
        return self.elevation < self.sea_level


@dataclass(frozen=True)
class ClimateGrid:
    """Finished temperature and humidity passes on top of an elevation grid."""

    size: int
    sea_level: float
    elevation: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray


class FieldGenerator:
    """Builds the elevation and climate grids for one generation run."""

    def __init__(
        self,
        config: WorldConfig,
        seeds: Dict[str, int],
        options: Optional[FieldOptions] = None,
    ):
        """
        Initialize field generator.

        Args:
            config: Validated run configuration
            seeds: Sub-seeds for the ``elevation``, ``temperature`` and
                ``humidity`` noise fields
            options: Climate model constants
        """
        self.config = config
        self.options = options or FieldOptions()
        self.size = config.size
        self.sea_level = config.sea_level

        self.elevation_noise = NoiseField(seeds["elevation"])
        self.temperature_noise = NoiseField(seeds["temperature"])
        self.humidity_noise = NoiseField(seeds["humidity"])

        self._points = sphere_grid(self.size)

    def generate_elevation(self) -> ElevationGrid:
        """
        Sample fractal noise at every cell's sphere point.

        Higher ``scale`` gives smaller, more numerous landmasses; every extra
        octave adds one noise sample per cell.
        """
        logger.info(
            "Generating elevation",
            size=self.size,
            scale=self.config.scale,
            octaves=self.config.octaves,
        )
        cx, cy, cz = self._points
        value = self.elevation_noise.fractal3(
            cx,
            cy,
            cz,
            octaves=self.config.octaves,
            frequency=self.config.scale,
            persistence=self.options.persistence,
            lacunarity=self.options.lacunarity,
        )
        elevation = np.clip((value + 1) / 2, 0.0, 1.0)

        logger.debug(
            "Elevation done",
            min=float(elevation.min()),
            max=float(elevation.max()),
            land_fraction=float(np.mean(elevation >= self.sea_level)),
        )
        return ElevationGrid(self.size, self.sea_level, _freeze(elevation))

    def generate_climate(self, elevation: ElevationGrid) -> ClimateGrid:
        """Run the temperature pass, then the humidity pass."""
        temperature = self._calculate_temperature(elevation)
        humidity = self._calculate_humidity(elevation, temperature)
        return ClimateGrid(
            size=self.size,
            sea_level=self.sea_level,
            elevation=elevation.elevation,
            temperature=_freeze(temperature),
            humidity=_freeze(humidity),
        )

    def _calculate_temperature(self, elevation: ElevationGrid) -> np.ndarray:
        """
        Temperature in °C from latitude, altitude and noise.

        Base temperature falls linearly from the equator to both poles. Land
        above sea level cools by the lapse rate, treating elevation 1.0 as
        ``max_altitude_m`` above sea level.
        """
        logger.info("Calculating temperatures")
        opts = self.options
        size = self.size

        rows = np.arange(size, dtype=np.float64)
        lat_normalized = np.abs(rows / size - 0.5) * 2  # 0 at equator, 1 at poles
        base_temp = opts.temperature_equator - opts.temperature_span * lat_normalized
        base_temp = np.broadcast_to(base_temp[:, np.newaxis], (size, size))

        heights = elevation.elevation
        above = heights > self.sea_level
        altitude_mod = np.where(
            above,
            (heights - self.sea_level) / (1.0 - self.sea_level) * opts.max_altitude_m * opts.lapse_rate,
            0.0,
        )

        cx, cy, cz = self._points
        freq = opts.temperature_noise_frequency
        noise = self.temperature_noise.sample3(cx * freq, cy * freq, cz * freq)

        temperature = base_temp + altitude_mod + noise * opts.temperature_noise_amplitude
        logger.debug(
            "Temperatures done",
            min=float(temperature.min()),
            max=float(temperature.max()),
        )
        return temperature

    def _calculate_humidity(self, elevation: ElevationGrid, temperature: np.ndarray) -> np.ndarray:
        """Humidity in [0, 1]; ocean cells are saturated."""
        logger.info("Calculating humidity")
        opts = self.options

        cx, cy, cz = self._points
        freq = opts.humidity_noise_frequency
        base = (self.humidity_noise.sample3(cx * freq, cy * freq, cz * freq) + 1) / 2.0

        # Warm air holds more moisture
        temp_mod = (temperature + opts.humidity_temperature_offset) / opts.humidity_temperature_range

        humidity = np.clip(base * temp_mod, 0.0, 1.0)
        humidity = np.where(elevation.ocean_mask, opts.ocean_humidity, humidity)
        return humidity
