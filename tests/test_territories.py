"""Tests for territory growth."""

from collections import deque

import pytest
import numpy as np
from py_worldgen.core.alea_prng import AleaPRNG
from py_worldgen.core.fields import ElevationGrid
from py_worldgen.core.territories import (
    TERRITORY_COLORS,
    Territory,
    TerritoryGrower,
    TerritoryOptions,
    neighbors,
)
from py_worldgen.errors import NoLandAvailableError

SEA = 0.5
PLAINS = 0.6
MOUNTAIN = 0.9
OCEAN = 0.2


def make_grid(heights):
    heights = np.asarray(heights, dtype=np.float64)
    return ElevationGrid(size=heights.shape[0], sea_level=SEA, elevation=heights)


def wrapped_manhattan(a, b, size):
    dx = abs(a[0] - b[0])
    return min(dx, size - dx) + abs(a[1] - b[1])


class TestNeighbors:
    """Test the cylindrical neighbourhood."""

    def test_x_wraps(self):
        size = 10
        for y in range(size):
            assert (0, y) in set(neighbors(size - 1, y, size))
            assert (size - 1, y) in set(neighbors(0, y, size))

    def test_y_does_not_wrap(self):
        size = 10
        for x in range(size):
            assert all(ny >= 0 for _, ny in neighbors(x, 0, size))
            assert all(ny < size for _, ny in neighbors(x, size - 1, size))

    def test_counts(self):
        size = 8
        assert len(list(neighbors(3, 0, size))) == 3
        assert len(list(neighbors(3, size - 1, size))) == 3
        assert len(list(neighbors(3, 4, size))) == 4

    def test_symmetric(self):
        size = 6
        for y in range(size):
            for x in range(size):
                for nx, ny in neighbors(x, y, size):
                    assert (x, y) in set(neighbors(nx, ny, size))


class TestMoveCost:
    """Test terrain costs."""

    @pytest.fixture
    def grid(self):
        return make_grid([[OCEAN, PLAINS], [MOUNTAIN, PLAINS]])

    def test_default_costs(self, grid):
        grower = TerritoryGrower(grid)
        assert grower.move_cost(1, 0) == 1.0
        assert grower.move_cost(0, 1) == 5.0
        assert grower.move_cost(0, 0) is None

    def test_passable_ocean(self, grid):
        grower = TerritoryGrower(grid, TerritoryOptions(ocean_passable=True, ocean_cost=40.0))
        assert grower.move_cost(0, 0) == 40.0


class TestGrowth:
    """Test multi-source expansion."""

    def grower_with_capitals(self, grid, capitals, options=None):
        grower = TerritoryGrower(grid, options or TerritoryOptions(generate_names=False))
        grower.place_capitals = lambda count: list(capitals[:count])
        return grower

    def test_nearest_capital_wins_on_plains(self):
        size = 16
        grid = make_grid(np.full((size, size), PLAINS))
        capitals = [(2, 5), (10, 9)]
        ids, territories = self.grower_with_capitals(grid, capitals).grow(2)

        for y in range(size):
            for x in range(size):
                d1 = wrapped_manhattan((x, y), capitals[0], size)
                d2 = wrapped_manhattan((x, y), capitals[1], size)
                if d1 < d2:
                    assert ids[y, x] == 1
                elif d2 < d1:
                    assert ids[y, x] == 2
                else:
                    assert ids[y, x] in (1, 2)

        assert territories[1].cells + territories[2].cells == size * size

    def test_mountains_slow_growth(self):
        size = 16
        heights = np.full((size, size), PLAINS)
        capitals = [(4, 8), (12, 8)]

        ids, _ = self.grower_with_capitals(make_grid(heights), capitals).grow(2)
        assert ids[8, 7] == 1

        heights[:, 6] = MOUNTAIN
        ids, _ = self.grower_with_capitals(make_grid(heights), capitals).grow(2)
        assert ids[8, 7] == 2

    def test_growth_wraps_across_seam(self):
        size = 12
        heights = np.full((size, size), OCEAN)
        heights[5, :] = PLAINS
        heights[5, 4:8] = OCEAN
        capitals = [(1, 5)]

        ids, _ = self.grower_with_capitals(make_grid(heights), capitals).grow(1)

        assert ids[5, 11] == 1
        assert ids[5, 8] == 1
        assert np.all(ids[5, 4:8] == 0)

    def test_ocean_blocks_growth(self):
        size = 12
        heights = np.full((size, size), PLAINS)
        heights[:, 5] = OCEAN
        heights[:, 11] = OCEAN
        capitals = [(2, 2)]

        ids, territories = self.grower_with_capitals(make_grid(heights), capitals).grow(1)

        assert np.all(ids[:, 0:5] == 1)
        assert np.all(ids[:, 6:11] == 0)
        assert np.all(ids[:, 5] == 0)
        assert territories[1].cells == 5 * size

    def test_passable_ocean_is_crossed(self):
        size = 12
        heights = np.full((size, size), PLAINS)
        heights[:, 5] = OCEAN
        heights[:, 11] = OCEAN
        options = TerritoryOptions(ocean_passable=True, generate_names=False)

        ids, _ = self.grower_with_capitals(make_grid(heights), [(2, 2)], options).grow(1)
        assert np.all(ids == 1)

    def test_capital_keeps_its_id(self):
        size = 20
        grid = make_grid(np.full((size, size), PLAINS))
        capitals = [(0, 0), (1, 0), (19, 19), (10, 10)]
        ids, territories = self.grower_with_capitals(grid, capitals).grow(4)

        for tid, (x, y) in enumerate(capitals, start=1):
            assert ids[y, x] == tid
            assert territories[tid].capital == (x, y)


class TestPlacement:
    """Test capital placement."""

    @pytest.fixture
    def island_grid(self):
        rng = np.random.default_rng(11)
        return make_grid(rng.uniform(0, 1, (32, 32)))

    def test_capitals_on_distinct_land(self, island_grid):
        grower = TerritoryGrower(island_grid, prng=AleaPRNG(5))
        capitals = grower.place_capitals(10)

        assert len(set(capitals)) == 10
        for x, y in capitals:
            assert island_grid.elevation[y, x] >= SEA

    def test_placement_deterministic(self, island_grid):
        a = TerritoryGrower(island_grid, prng=AleaPRNG(5)).place_capitals(6)
        b = TerritoryGrower(island_grid, prng=AleaPRNG(5)).place_capitals(6)
        assert a == b

    def test_no_land(self):
        grower = TerritoryGrower(make_grid(np.full((16, 16), OCEAN)))
        with pytest.raises(NoLandAvailableError) as exc_info:
            grower.grow(1)
        assert exc_info.value.land_cells == 0
        assert exc_info.value.requested == 1

    def test_more_territories_than_land(self):
        heights = np.full((16, 16), OCEAN)
        heights[3, 3] = PLAINS
        heights[9, 12] = PLAINS
        with pytest.raises(NoLandAvailableError):
            TerritoryGrower(make_grid(heights)).grow(3)

    def test_bounded_attempts(self):
        heights = np.full((64, 64), OCEAN)
        heights[3, 3] = PLAINS
        heights[40, 12] = PLAINS
        options = TerritoryOptions(max_attempts_per_seed=1)
        with pytest.raises(NoLandAvailableError):
            TerritoryGrower(make_grid(heights), options, prng=AleaPRNG(1)).grow(2)

    def test_zero_territories(self, island_grid):
        ids, territories = TerritoryGrower(island_grid).grow(0)
        assert not ids.any()
        assert territories == {}


class TestRegistry:
    """Test territory metadata."""

    @pytest.fixture
    def grid(self):
        rng = np.random.default_rng(21)
        return make_grid(rng.uniform(0.3, 1, (24, 24)))

    def test_ids_and_colors(self, grid):
        ids, territories = TerritoryGrower(grid, prng=AleaPRNG(9)).grow(5)

        assert set(territories) == {1, 2, 3, 4, 5}
        assert set(np.unique(ids)) <= {0, 1, 2, 3, 4, 5}
        for tid, territory in territories.items():
            assert isinstance(territory, Territory)
            assert territory.id == tid
            assert territory.color == TERRITORY_COLORS[tid - 1]
            assert territory.cells == int(np.count_nonzero(ids == tid))

    def test_supplied_names(self, grid):
        _, territories = TerritoryGrower(grid, prng=AleaPRNG(9)).grow(3, ["North", "South"])

        assert territories[1].name == "North"
        assert territories[2].name == "South"
        assert territories[3].name

    def test_names_disabled(self, grid):
        options = TerritoryOptions(generate_names=False)
        _, territories = TerritoryGrower(grid, options, prng=AleaPRNG(9)).grow(2, ["Only"])

        assert territories[1].name == "Only"
        assert territories[2].name is None

    def test_generated_names_deterministic(self, grid):
        def names():
            grower = TerritoryGrower(grid, prng=AleaPRNG(9), name_prng=AleaPRNG("n"))
            _, territories = grower.grow(4)
            return [t.name for t in territories.values()]

        assert names() == names()

    def test_territory_frozen(self, grid):
        _, territories = TerritoryGrower(grid, prng=AleaPRNG(9)).grow(1)
        with pytest.raises(Exception):
            territories[1].cells = 0


def land_component(heights, start, sea_level):
    """Cells reachable from ``start`` over land."""
    size = heights.shape[0]
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for nx, ny in neighbors(x, y, size):
            if (nx, ny) not in seen and heights[ny, nx] >= sea_level:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


class TestSingleTerritory:
    """One capital claims exactly its landmass."""

    def test_claims_connected_land(self):
        rng = np.random.default_rng(8)
        heights = rng.uniform(0, 1, (32, 32))
        grid = make_grid(heights)

        ids, territories = TerritoryGrower(grid, prng=AleaPRNG(2)).grow(1)
        component = land_component(heights, territories[1].capital, SEA)

        claimed = {(int(x), int(y)) for y, x in np.argwhere(ids == 1)}
        assert claimed == component
        assert set(np.unique(ids)) <= {0, 1}
