"""
Territory generation by multi-source weighted shortest paths.

Capitals are placed on random land cells and grown outward at the same time
with Dijkstra's algorithm. Each cell goes to the capital that reaches it at
the lowest accumulated terrain cost. Ocean is impassable by default, so land
not connected to any capital stays unclaimed (id 0).
"""

from __future__ import annotations

import heapq
import math
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..errors import NoLandAvailableError
from .alea_prng import AleaPRNG
from .biomes import MOUNTAIN_ELEVATION
from .fields import ElevationGrid
from .markov_name_generator import DEFAULT_NAME_BASE, MarkovNameGenerator

logger = structlog.get_logger()

UNCLAIMED = 0

# Color palette for territories, cycled when there are more territories
TERRITORY_COLORS = [
    "#9e2a2b",
    "#e55934",
    "#f17c67",
    "#a53253",
    "#ce4a81",
    "#d4a259",
    "#c9850d",
    "#e8b511",
    "#6ba9cb",
    "#4682b4",
    "#0f8040",
    "#1a4b5c",
    "#8b4513",
    "#daa520",
    "#ff6347",
    "#4169e1",
    "#32cd32",
    "#ff1493",
    "#00ced1",
    "#ffd700",
]


class TerritoryOptions(BaseModel):
    """Territory growth options."""

    plains_cost: float = Field(default=1.0, gt=0, description="Cost to enter a lowland cell")
    mountain_cost: float = Field(default=5.0, gt=0, description="Cost to enter a mountain cell")
    mountain_elevation: float = Field(
        default=MOUNTAIN_ELEVATION, description="Elevation above which a cell counts as mountain"
    )
    ocean_passable: bool = Field(default=False, description="Allow growth across ocean cells")
    ocean_cost: float = Field(default=50.0, gt=0, description="Cost to enter an ocean cell when passable")
    max_attempts_per_seed: int = Field(
        default=10000, ge=1, description="Rejection sampling budget for each capital"
    )
    generate_names: bool = Field(default=True, description="Generate names for unnamed territories")


class Territory(BaseModel):
    """A grown territory."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Territory id, 1-based")
    name: Optional[str] = Field(default=None, description="Display name")
    color: str = Field(description="Display color in hex format")
    capital: Tuple[int, int] = Field(description="(x, y) of the seed cell")
    cells: int = Field(default=0, description="Number of cells owned")


def neighbors(x: int, y: int, size: int) -> Iterator[Tuple[int, int]]:
    """
    Four-neighborhood of a cell.

    Longitude (x) wraps around the planet; latitude (y) stops at the poles.
    """
    yield (x - 1) % size, y
    yield (x + 1) % size, y
    if y > 0:
        yield x, y - 1
    if y < size - 1:
        yield x, y + 1


class TerritoryGrower:
    """Partitions land among capitals by terrain-weighted distance."""

    def __init__(
        self,
        elevation: ElevationGrid,
        options: Optional[TerritoryOptions] = None,
        prng: Optional[AleaPRNG] = None,
        name_prng: Optional[AleaPRNG] = None,
    ):
        """
        Initialize territory grower.

        Args:
            elevation: Finished elevation grid
            options: Cost model and placement options
            prng: Random generator for capital placement
            name_prng: Random generator for territory names
        """
        self.elevation = elevation
        self.size = elevation.size
        self.sea_level = elevation.sea_level
        self.options = options or TerritoryOptions()
        self.prng = prng or AleaPRNG("territories")
        self.name_prng = name_prng or AleaPRNG("names")

    def grow(
        self, count: int, names: Optional[Sequence[str]] = None
    ) -> Tuple[np.ndarray, Dict[int, Territory]]:
        """
        Place ``count`` capitals and grow territories from them.

        Args:
            count: Number of territories
            names: Optional names, ``names[i - 1]`` naming territory ``i``

        Returns:
            Tuple of (territory id grid indexed [y, x], territories by id)

        Raises:
            NoLandAvailableError: If the capitals cannot be placed on land
        """
        logger.info("Growing territories", count=count)
        territory_ids = np.zeros((self.size, self.size), dtype=np.int32)
        if count == 0:
            return territory_ids, {}

        capitals = self.place_capitals(count)
        self._expand(capitals, territory_ids)

        cell_counts = np.bincount(territory_ids.ravel(), minlength=count + 1)
        territory_names = self._resolve_names(count, names)
        territories = {
            tid: Territory(
                id=tid,
                name=territory_names[tid - 1],
                color=TERRITORY_COLORS[(tid - 1) % len(TERRITORY_COLORS)],
                capital=capitals[tid - 1],
                cells=int(cell_counts[tid]),
            )
            for tid in range(1, count + 1)
        }
        logger.info(
            "Territories grown",
            claimed=int(np.count_nonzero(territory_ids)),
            unclaimed_land=int(np.count_nonzero(self.elevation.land_mask & (territory_ids == UNCLAIMED))),
        )
        return territory_ids, territories

    def place_capitals(self, count: int) -> List[Tuple[int, int]]:
        """
        Pick ``count`` distinct land cells uniformly at random.

        Raises:
            NoLandAvailableError: If there are fewer land cells than capitals,
                or rejection sampling exhausts its attempt budget
        """
        land_cells = int(np.count_nonzero(self.elevation.land_mask))
        if land_cells < count:
            logger.error("Not enough land for territories", requested=count, land_cells=land_cells)
            raise NoLandAvailableError(count, land_cells)

        heights = self.elevation.elevation
        budget = self.options.max_attempts_per_seed
        chosen: Set[Tuple[int, int]] = set()
        capitals: List[Tuple[int, int]] = []

        for tid in range(1, count + 1):
            for attempt in range(budget):
                x = self.prng.randint(self.size)
                y = self.prng.randint(self.size)
                if heights[y, x] >= self.sea_level and (x, y) not in chosen:
                    break
            else:
                logger.error(
                    "Capital placement exhausted its attempts",
                    territory=tid,
                    attempts=budget,
                    land_cells=land_cells,
                )
                raise NoLandAvailableError(
                    count,
                    land_cells,
                    f"No free land cell found for territory {tid} after {budget} attempts",
                )
            if attempt > budget // 2:
                logger.warning(f"Territory {tid} needed {attempt + 1} placement attempts")
            chosen.add((x, y))
            capitals.append((x, y))

        logger.debug("Placed capitals", capitals=capitals)
        return capitals

    def move_cost(self, x: int, y: int) -> Optional[float]:
        """
        Cost of entering cell (x, y).

        Returns:
            The cost, or None if the cell cannot be entered
        """
        height = self.elevation.elevation[y, x]
        if height < self.sea_level:
            if not self.options.ocean_passable:
                return None
            return self.options.ocean_cost
        if height > self.options.mountain_elevation:
            return self.options.mountain_cost
        return self.options.plains_cost

    def _expand(self, capitals: List[Tuple[int, int]], territory_ids: np.ndarray) -> None:
        """Multi-source Dijkstra from every capital at once."""
        size = self.size
        best_cost = np.full((size, size), math.inf)

        # Priority queue: (cost, y, x, territory_id)
        heap: List[Tuple[float, int, int, int]] = []
        for tid, (x, y) in enumerate(capitals, start=1):
            best_cost[y, x] = 0.0
            territory_ids[y, x] = tid
            heapq.heappush(heap, (0.0, y, x, tid))

        while heap:
            cost, y, x, tid = heapq.heappop(heap)

            # Stale entry, the cell was improved after this was pushed
            if cost > best_cost[y, x]:
                continue

            for nx, ny in neighbors(x, y, size):
                step = self.move_cost(nx, ny)
                if step is None:
                    continue
                total = cost + step
                if total < best_cost[ny, nx]:
                    best_cost[ny, nx] = total
                    territory_ids[ny, nx] = tid
                    heapq.heappush(heap, (total, ny, nx, tid))

    def _resolve_names(self, count: int, names: Optional[Sequence[str]]) -> List[Optional[str]]:
        resolved: List[Optional[str]] = list(names or [])[:count]
        resolved += [None] * (count - len(resolved))
        if not self.options.generate_names:
            return resolved

        generator = MarkovNameGenerator(self.name_prng)
        chain = generator.build_chain(DEFAULT_NAME_BASE)
        used = {name for name in resolved if name}
        for i, name in enumerate(resolved):
            if name:
                continue
            candidate = None
            for _ in range(10):
                candidate = generator.generate(chain)
                if candidate and candidate not in used:
                    break
            resolved[i] = candidate
            if candidate:
                used.add(candidate)
        return resolved
