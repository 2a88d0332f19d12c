"""Tests for biome classification."""

import pytest
import numpy as np
from py_worldgen.core.biomes import (
    BIOME_NAMES,
    MOUNTAIN_ELEVATION,
    BiomeClassifier,
    BiomeOptions,
    BiomeType,
    classify_biome,
)
from py_worldgen.core.fields import ClimateGrid

SEA = 0.5


class TestDecisionTable:
    """Test the scalar decision table."""

    @pytest.mark.parametrize(
        "elevation, temperature, humidity, expected",
        [
            (0.2, 20.0, 1.0, BiomeType.OCEAN),
            (0.49999, 35.0, 0.0, BiomeType.OCEAN),
            (0.9, 30.0, 0.9, BiomeType.MOUNTAIN),
            (0.8, -40.0, 0.1, BiomeType.MOUNTAIN),
            (0.6, -20.0, 0.5, BiomeType.TUNDRA),
            (0.6, -5.0, 0.5, BiomeType.TAIGA),
            (0.6, 10.0, 0.8, BiomeType.TEMPERATE_FOREST),
            (0.6, 10.0, 0.2, BiomeType.GRASSLAND),
            (0.6, 20.0, 0.7, BiomeType.TEMPERATE_FOREST),
            (0.6, 20.0, 0.4, BiomeType.MEDITERRANEAN),
            (0.6, 20.0, 0.1, BiomeType.GRASSLAND),
            (0.6, 28.0, 0.8, BiomeType.TROPICAL_RAINFOREST),
            (0.6, 28.0, 0.5, BiomeType.SAVANNA),
            (0.6, 28.0, 0.1, BiomeType.DESERT),
        ],
    )
    def test_cases(self, elevation, temperature, humidity, expected):
        assert classify_biome(elevation, temperature, humidity, SEA) == expected

    def test_sea_level_is_land(self):
        assert classify_biome(SEA, 10.0, 0.2, SEA) != BiomeType.OCEAN

    def test_mountain_threshold_is_strict(self):
        assert classify_biome(MOUNTAIN_ELEVATION, 10.0, 0.2, SEA) == BiomeType.GRASSLAND
        assert classify_biome(MOUNTAIN_ELEVATION + 1e-9, 10.0, 0.2, SEA) == BiomeType.MOUNTAIN

    def test_temperature_cut_points(self):
        # Cut points belong to the warmer band
        assert classify_biome(0.6, -10.0, 0.2, SEA) == BiomeType.TAIGA
        assert classify_biome(0.6, 0.0, 0.2, SEA) == BiomeType.GRASSLAND
        assert classify_biome(0.6, 15.0, 0.55, SEA) == BiomeType.MEDITERRANEAN
        assert classify_biome(0.6, 25.0, 0.5, SEA) == BiomeType.SAVANNA

    def test_humidity_cut_points(self):
        assert classify_biome(0.6, 10.0, 0.5, SEA) == BiomeType.GRASSLAND
        assert classify_biome(0.6, 20.0, 0.6, SEA) == BiomeType.MEDITERRANEAN
        assert classify_biome(0.6, 20.0, 0.3, SEA) == BiomeType.GRASSLAND
        assert classify_biome(0.6, 30.0, 0.7, SEA) == BiomeType.SAVANNA
        assert classify_biome(0.6, 30.0, 0.3, SEA) == BiomeType.DESERT

    def test_custom_options(self):
        options = BiomeOptions(mountain_elevation=0.6)
        assert classify_biome(0.65, 10.0, 0.2, SEA, options) == BiomeType.MOUNTAIN

    def test_every_biome_has_name(self):
        for biome in BiomeType:
            assert BIOME_NAMES[biome]


class TestBiomeClassifier:
    """Test the vectorized classifier."""

    @pytest.fixture
    def climate(self):
        rng = np.random.default_rng(3)
        size = 40
        return ClimateGrid(
            size=size,
            sea_level=SEA,
            elevation=rng.uniform(0, 1, (size, size)),
            temperature=rng.uniform(-35, 40, (size, size)),
            humidity=rng.uniform(0, 1, (size, size)),
        )

    def test_agrees_with_scalar_table(self, climate):
        biomes = BiomeClassifier(SEA).classify(climate)

        assert biomes.shape == (40, 40)
        for y in range(40):
            for x in range(40):
                expected = classify_biome(
                    climate.elevation[y, x],
                    climate.temperature[y, x],
                    climate.humidity[y, x],
                    SEA,
                )
                assert biomes[y, x] == expected

    def test_agrees_on_cut_points(self):
        temps = np.array([-10.0, 0.0, 15.0, 25.0, 14.999, 24.999])
        hums = np.array([0.3, 0.5, 0.6, 0.7, 0.5, 0.6])
        t, h = np.meshgrid(temps, hums)
        climate = ClimateGrid(
            size=6,
            sea_level=SEA,
            elevation=np.full((6, 6), 0.6),
            temperature=t,
            humidity=h,
        )
        biomes = BiomeClassifier(SEA).classify(climate)
        for y in range(6):
            for x in range(6):
                assert biomes[y, x] == classify_biome(0.6, t[y, x], h[y, x], SEA)

    def test_ocean_and_mountain_override(self, climate):
        biomes = BiomeClassifier(SEA).classify(climate)

        assert np.all(biomes[climate.elevation < SEA] == BiomeType.OCEAN)
        assert np.all(biomes[climate.elevation > MOUNTAIN_ELEVATION] == BiomeType.MOUNTAIN)
