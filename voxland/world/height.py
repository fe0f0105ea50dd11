from __future__ import annotations

import logging

import numpy as np

from voxland.world.noise import make_noise

log = logging.getLogger(__name__)


class MissingHeightSampleError(LookupError):
    """A column outside the generated height field was requested.

    This means the field was sized too small for the chunks reading it.
    """


class HeightField:
    """Read-only terrain heights for every world column (x, z).

    Heights are stored in a (width, depth) float32 array indexed by global
    column coordinates. The array is write-protected after construction.
    """

    def __init__(self, heights: np.ndarray) -> None:
        h = np.array(heights, dtype=np.float32)
        if h.ndim != 2:
            raise ValueError(f"height field must be 2-D, got shape {h.shape}")
        h.flags.writeable = False
        self._h = h

    @property
    def width(self) -> int:
        return int(self._h.shape[0])

    @property
    def depth(self) -> int:
        return int(self._h.shape[1])

    @property
    def heights(self) -> np.ndarray:
        return self._h

    def __contains__(self, column: tuple[int, int]) -> bool:
        x, z = column
        return 0 <= x < self.width and 0 <= z < self.depth

    def __getitem__(self, column: tuple[int, int]) -> float:
        x, z = int(column[0]), int(column[1])
        # fractional columns have no sample of their own
        if x != column[0] or z != column[1] or (x, z) not in self:
            raise MissingHeightSampleError(
                f"no height sample for column ({column[0]}, {column[1]}); field covers {self.width}x{self.depth}"
            )
        return float(self._h[x, z])

    def columns(self, x0: int, z0: int, width: int, depth: int) -> np.ndarray:
        """Return the (width, depth) block of heights starting at global column (x0, z0)."""
        x0, z0 = int(x0), int(z0)
        x1, z1 = x0 + int(width), z0 + int(depth)
        if x0 < 0 or z0 < 0 or x1 > self.width or z1 > self.depth:
            raise MissingHeightSampleError(
                f"columns [{x0},{x1})x[{z0},{z1}) fall outside the height field "
                f"(covers {self.width}x{self.depth})"
            )
        return self._h[x0:x1, z0:z1]


def generate_height_field(
    width: int,
    depth: int,
    scale: float,
    seed: int,
    height_min: float,
    height_max: float,
    *,
    noise: str = "simplex",
) -> HeightField:
    """Sample seeded coherent noise at (x/scale, z/scale) for every column.

    Noise in [-1, 1] is normalized to [0, 1] and mapped linearly into
    [height_min, height_max]. Identical arguments give identical fields.
    """
    if width <= 0 or depth <= 0:
        raise ValueError(f"height field extent must be positive, got {width}x{depth}")
    if scale <= 0:
        raise ValueError(f"noise scale must be positive, got {scale}")

    src = make_noise(noise, seed)
    xs = np.arange(int(width), dtype=np.float64) / float(scale)
    zs = np.arange(int(depth), dtype=np.float64) / float(scale)
    n = src.grid(xs, zs)

    normalized = (n + 1.0) * 0.5
    h = float(height_min) + normalized * (float(height_max) - float(height_min))
    # float32 rounding may step just outside the range
    h = np.clip(h.astype(np.float32), np.float32(height_min), np.float32(height_max))

    log.info("height field %dx%d generated (noise=%s seed=%d scale=%.1f)", width, depth, noise, seed, scale)
    return HeightField(h)
