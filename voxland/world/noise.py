from __future__ import annotations

import numpy as np
from opensimplex import OpenSimplex


class FastValueNoise2D:
    """Fast 2D value noise with fully vectorized numpy implementation.

    Uses an integer hash on lattice points and smooth interpolation.
    Deterministic for a given seed.

    Note: This is not simplex/perlin; it's value noise. It is blockier than
    simplex at low scales but much faster for large worlds.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed) & 0xFFFFFFFF

    @staticmethod
    def _fade(t: np.ndarray) -> np.ndarray:
        # smootherstep
        return t * t * t * (t * (t * 6 - 15) + 10)

    def _hash(self, xi: np.ndarray, zi: np.ndarray) -> np.ndarray:
        # Vectorized integer hash -> uint32 -> [0,1)
        x = (xi.astype(np.uint32) * np.uint32(374761393)) ^ (zi.astype(np.uint32) * np.uint32(668265263)) ^ np.uint32(self.seed)
        x ^= (x >> np.uint32(13))
        x *= np.uint32(1274126177)
        x ^= (x >> np.uint32(16))
        return x.astype(np.float64) / 2.0**32

    def noise(self, x: np.ndarray, z: np.ndarray) -> np.ndarray:
        # x,z: float arrays (same shape) -> [0,1)
        xi0 = np.floor(x).astype(np.int64)
        zi0 = np.floor(z).astype(np.int64)
        xi1 = xi0 + 1
        zi1 = zi0 + 1

        u = self._fade(x - xi0)
        v = self._fade(z - zi0)

        a = self._hash(xi0, zi0)
        b = self._hash(xi1, zi0)
        c = self._hash(xi0, zi1)
        d = self._hash(xi1, zi1)

        ab = a + (b - a) * u
        cd = c + (d - c) * u
        return ab + (cd - ab) * v

    def grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """Sample the lattice spanned by 1-D axes `xs` and `zs`.

        Returns an array of shape (len(xs), len(zs)) with values in [-1, 1).
        """
        gx, gz = np.meshgrid(np.asarray(xs, dtype=np.float64), np.asarray(zs, dtype=np.float64), indexing="ij")
        return self.noise(gx, gz) * 2.0 - 1.0

    def value(self, x: float, z: float) -> float:
        return float(self.grid(np.array([x]), np.array([z]))[0, 0])


class SimplexNoise2D:
    """OpenSimplex 2D noise. Slower than value noise but smoother."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._simp = OpenSimplex(self.seed)

    def grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        # noise2array returns (len(y), len(x)); we index as [x, z].
        n = self._simp.noise2array(np.asarray(xs, dtype=np.float64), np.asarray(zs, dtype=np.float64))
        return np.clip(np.asarray(n, dtype=np.float64).T, -1.0, 1.0)

    def value(self, x: float, z: float) -> float:
        return max(-1.0, min(1.0, float(self._simp.noise2(float(x), float(z)))))


NOISE_MODES = ("simplex", "fast")


def make_noise(mode: str, seed: int) -> FastValueNoise2D | SimplexNoise2D:
    if mode == "simplex":
        return SimplexNoise2D(seed)
    if mode == "fast":
        return FastValueNoise2D(seed)
    raise ValueError(f"unknown noise mode {mode!r} (expected one of {', '.join(NOISE_MODES)})")
