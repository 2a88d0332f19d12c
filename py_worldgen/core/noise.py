"""
Seeded simplex noise.

This module implements classic 2D and 3D simplex noise (Gustavson's
formulation). The permutation table is shuffled from a 64-bit seed with the
Alea PRNG, so a given seed always yields the same field. Every query accepts
plain floats or NumPy arrays; arrays are evaluated in one vectorized pass,
which is how whole grids are sampled.
"""

import math
from typing import Union

import numpy as np

from .alea_prng import AleaPRNG

ArrayLike = Union[float, np.ndarray]

# Skew/unskew factors
F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0
F3 = 1.0 / 3.0
G3 = 1.0 / 6.0

# Edge midpoints of a cube; the 2D variant uses the first two components
GRAD3 = np.array(
    [
        [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
        [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
        [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
    ],
    dtype=np.int64,
)


def _corner(t: np.ndarray, dot: np.ndarray) -> np.ndarray:
    """Radial falloff ``t^4 * dot`` where ``t`` is positive, else zero."""
    t = np.where(t < 0, 0.0, t)
    t = t * t
    return t * t * dot


def _finite_inputs(*coords: np.ndarray):
    """Replace non-finite coordinates with 0 and return the finite mask."""
    finite = np.ones(np.broadcast(*coords).shape, dtype=bool)
    for c in coords:
        finite &= np.isfinite(c)
    safe = tuple(np.where(finite, c, 0.0) for c in coords)
    return finite, safe


def _result(value: np.ndarray, finite: np.ndarray, scalar: bool) -> ArrayLike:
    value = np.where(finite, value, np.nan)
    if scalar:
        return float(value)
    return value


class NoiseField:
    """
    Simplex noise sampler bound to a seed.

    Instances are immutable once built; sampling is a pure function of the
    coordinates.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        table = AleaPRNG(self.seed).permutation(256)
        perm = np.array([table[i & 255] for i in range(512)], dtype=np.int64)
        perm.flags.writeable = False
        self._perm = perm
        self._perm_mod12 = perm % 12

    @property
    def permutation(self) -> np.ndarray:
        """Read-only 512-entry permutation table."""
        return self._perm

    def sample2(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """2D simplex noise, roughly in [-1, 1]."""
        scalar = np.ndim(x) == 0 and np.ndim(y) == 0
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        finite, (x, y) = _finite_inputs(x, y)
        perm, perm12 = self._perm, self._perm_mod12

        s = (x + y) * F2
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)
        t = (i + j) * G2
        x0 = x - (i - t)
        y0 = y - (j - t)

        # Lower triangle (x0 > y0) steps in x first, upper in y
        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2

        ii = i & 255
        jj = j & 255
        gi0 = perm12[ii + perm[jj]]
        gi1 = perm12[ii + i1 + perm[jj + j1]]
        gi2 = perm12[ii + 1 + perm[jj + 1]]

        n0 = _corner(0.5 - x0 * x0 - y0 * y0, GRAD3[gi0, 0] * x0 + GRAD3[gi0, 1] * y0)
        n1 = _corner(0.5 - x1 * x1 - y1 * y1, GRAD3[gi1, 0] * x1 + GRAD3[gi1, 1] * y1)
        n2 = _corner(0.5 - x2 * x2 - y2 * y2, GRAD3[gi2, 0] * x2 + GRAD3[gi2, 1] * y2)

        return _result(70.0 * (n0 + n1 + n2), finite, scalar)

    def sample3(self, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> ArrayLike:
        """3D simplex noise, roughly in [-1, 1]."""
        scalar = np.ndim(x) == 0 and np.ndim(y) == 0 and np.ndim(z) == 0
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        finite, (x, y, z) = _finite_inputs(x, y, z)
        perm, perm12 = self._perm, self._perm_mod12

        s = (x + y + z) * F3
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)
        k = np.floor(z + s).astype(np.int64)
        t = (i + j + k) * G3
        x0 = x - (i - t)
        y0 = y - (j - t)
        z0 = z - (k - t)

        # Pick the simplex from the ordering of the local coordinates
        xy = x0 >= y0
        yz = y0 >= z0
        xz = x0 >= z0
        i1 = (xy & (yz | xz)).astype(np.int64)
        j1 = (~xy & yz).astype(np.int64)
        k1 = ((xy & ~yz & ~xz) | (~xy & ~yz)).astype(np.int64)
        i2 = (xy | (~xy & yz & xz)).astype(np.int64)
        j2 = ((xy & yz) | ~xy).astype(np.int64)
        k2 = ((xy & ~yz) | (~xy & ~yz) | (~xy & ~xz)).astype(np.int64)

        x1 = x0 - i1 + G3
        y1 = y0 - j1 + G3
        z1 = z0 - k1 + G3
        x2 = x0 - i2 + 2.0 * G3
        y2 = y0 - j2 + 2.0 * G3
        z2 = z0 - k2 + 2.0 * G3
        x3 = x0 - 1.0 + 3.0 * G3
        y3 = y0 - 1.0 + 3.0 * G3
        z3 = z0 - 1.0 + 3.0 * G3

        ii = i & 255
        jj = j & 255
        kk = k & 255
        gi0 = perm12[ii + perm[jj + perm[kk]]]
        gi1 = perm12[ii + i1 + perm[jj + j1 + perm[kk + k1]]]
        gi2 = perm12[ii + i2 + perm[jj + j2 + perm[kk + k2]]]
        gi3 = perm12[ii + 1 + perm[jj + 1 + perm[kk + 1]]]

        def dot(gi, dx, dy, dz):
            return GRAD3[gi, 0] * dx + GRAD3[gi, 1] * dy + GRAD3[gi, 2] * dz

        n0 = _corner(0.6 - x0 * x0 - y0 * y0 - z0 * z0, dot(gi0, x0, y0, z0))
        n1 = _corner(0.6 - x1 * x1 - y1 * y1 - z1 * z1, dot(gi1, x1, y1, z1))
        n2 = _corner(0.6 - x2 * x2 - y2 * y2 - z2 * z2, dot(gi2, x2, y2, z2))
        n3 = _corner(0.6 - x3 * x3 - y3 * y3 - z3 * z3, dot(gi3, x3, y3, z3))

        return _result(32.0 * (n0 + n1 + n2 + n3), finite, scalar)

    def fractal3(
        self,
        x: ArrayLike,
        y: ArrayLike,
        z: ArrayLike,
        octaves: int,
        frequency: float,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
    ) -> ArrayLike:
        """
        Multi-octave 3D noise normalized by the total amplitude.

        Octave ``i`` samples at ``frequency * lacunarity**i`` with weight
        ``persistence**i``.

        Returns:
            Weighted mean of the octave samples, roughly in [-1, 1]
        """
        total = 0.0
        max_amplitude = 0.0
        amplitude = 1.0
        for octave in range(octaves):
            freq = frequency * lacunarity**octave
            total = total + amplitude * self.sample3(
                np.multiply(x, freq), np.multiply(y, freq), np.multiply(z, freq)
            )
            max_amplitude += amplitude
            amplitude *= persistence
        return total / max_amplitude
