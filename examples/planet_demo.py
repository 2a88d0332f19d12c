"""
Example generating a planet and printing a summary of it.
"""

import argparse

import numpy as np
from py_worldgen import NoLandAvailableError, WorldConfig, WorldGenerator
from py_worldgen.log_config import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Generate a planet surface")
    parser.add_argument("--size", type=int, default=256)
    parser.add_argument("--sea-level", type=float, default=0.5)
    parser.add_argument("--scale", type=float, default=2.0)
    parser.add_argument("--octaves", type=int, default=5)
    parser.add_argument("--territories", type=int, default=0)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    configure_logging()

    config = WorldConfig.from_options(
        size=args.size,
        sea_level=args.sea_level,
        scale=args.scale,
        octaves=args.octaves,
        generate_territories=args.territories > 0,
        num_territories=args.territories,
        seed=args.seed,
    )

    try:
        world = WorldGenerator(config).generate()
    except NoLandAvailableError as exc:
        print(f"Generation failed: {exc}")
        return

    print(f"Seed: {world.seed}")
    print(f"Generated in {world.generation_time_seconds:.2f}s")
    print(f"Land: {world.land_fraction * 100:.1f}%")
    print(f"Temperature range: {np.min(world.temperature):.1f}°C to {np.max(world.temperature):.1f}°C")

    print("\nBiomes:")
    for stats in world.biome_statistics():
        print(
            f"  {stats.biome_name:<20} {stats.percentage:5.1f}%"
            f"  avg {stats.avg_temperature:5.1f}°C  humidity {stats.avg_humidity:.2f}"
        )

    if world.territories:
        print("\nTerritories:")
        for territory in world.territories.values():
            print(f"  {territory.id:>3} {territory.name or '-':<12} {territory.color} {territory.cells} cells")

    centre = world.cell(world.size // 2, world.size // 2)
    print(f"\nCentre cell: {centre.biome_name} at {centre.latitude:.1f}°, {centre.longitude:.1f}°")


if __name__ == "__main__":
    main()
