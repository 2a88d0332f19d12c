"""
Grid to sphere mapping.

Grid column ``x`` is longitude and row ``y`` is latitude. Sampling 3D noise at
the corresponding point on the unit sphere makes the longitude axis wrap
seamlessly and avoids the stretching a flat 2D sample shows near the poles.
"""

import math
from typing import Tuple

import numpy as np


def sphere_angles(x, y, size: int):
    """Longitude in [0, 2π) and latitude in [-π/2, π/2) of grid cell (x, y)."""
    u = x / size
    v = y / size
    lon = u * 2 * math.pi
    lat = v * math.pi - math.pi / 2.0
    return lon, lat


def sphere_point(x: int, y: int, size: int) -> Tuple[float, float, float]:
    """Unit sphere point (cx, cy, cz) for grid cell (x, y)."""
    lon, lat = sphere_angles(x, y, size)
    return (
        math.cos(lat) * math.cos(lon),
        math.cos(lat) * math.sin(lon),
        math.sin(lat),
    )


def sphere_grid(size: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sphere points for every cell of a ``size x size`` grid.

    Returns:
        Arrays (cx, cy, cz), each of shape (size, size) and indexed [y, x]
    """
    ys, xs = np.mgrid[0:size, 0:size].astype(np.float64)
    lon, lat = sphere_angles(xs, ys, size)
    cos_lat = np.cos(lat)
    return cos_lat * np.cos(lon), cos_lat * np.sin(lon), np.sin(lat)


def cell_coordinates(x: int, y: int, size: int) -> Tuple[float, float]:
    """
    Map coordinates of a cell in degrees, as shown on a north-up map.

    Row 0 is the top edge (+90) and column 0 the left edge (-180). This is
    the display frame, not the sampling frame of ``sphere_angles``.

    Returns:
        (latitude, longitude) with latitude in (-90, 90] and longitude in
        [-180, 180)
    """
    latitude = 90.0 - y * 180.0 / size
    longitude = x * 360.0 / size - 180.0
    return latitude, longitude
