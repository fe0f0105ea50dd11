from __future__ import annotations

import numpy as np
import moderngl

from voxland.config import ATLAS_SIZE, ATLAS_TILE_SIZE

# (col, row) -> base colour (rgb 0..1)
_TILE_COLOURS = {
    (0, 0): (0.30, 0.62, 0.22),  # grass top
    (1, 0): (0.50, 0.50, 0.52),  # stone
    (2, 0): (0.47, 0.33, 0.20),  # dirt / grass bottom
    (3, 0): (0.47, 0.33, 0.20),  # grass side (dirt with a green rim)
}
_GRASS_SIDE = (3, 0)
_GRASS_RIM = (0.30, 0.62, 0.22)


def _soft_noise(h: int, w: int, *, seed: int, octaves: int = 3) -> np.ndarray:
    """Low-frequency value noise in [0,1] used to break up flat tile colours."""
    rng = np.random.default_rng(int(seed))
    img = np.zeros((h, w), dtype=np.float32)
    amp = 1.0
    total = 0.0
    for o in range(int(octaves)):
        step = max(1, 2 ** (o + 1))
        gh = max(2, h // step)
        gw = max(2, w // step)
        grid = rng.random((gh + 1, gw + 1), dtype=np.float32)

        # Bilinear upsample
        yy = np.linspace(0.0, gh, h, endpoint=False)
        xx = np.linspace(0.0, gw, w, endpoint=False)
        y0 = np.floor(yy).astype(np.int32)
        x0 = np.floor(xx).astype(np.int32)
        y1 = np.minimum(y0 + 1, gh)
        x1 = np.minimum(x0 + 1, gw)
        fy = (yy - y0).astype(np.float32)
        fx = (xx - x0).astype(np.float32)

        a = grid[y0[:, None], x0[None, :]] * (1.0 - fy)[:, None] + grid[y1[:, None], x0[None, :]] * fy[:, None]
        b = grid[y0[:, None], x1[None, :]] * (1.0 - fy)[:, None] + grid[y1[:, None], x1[None, :]] * fy[:, None]
        img += (a * (1.0 - fx)[None, :] + b * fx[None, :]) * amp
        total += amp
        amp *= 0.5

    img /= max(1e-6, total)
    return img


def build_atlas_image(*, seed: int = 7) -> np.ndarray:
    """Return a (256,256,4) uint8 stand-in atlas.

    Row r of the array is v = r / 256, so tile (col,row) covers
    rows [row*16, row*16+16) and columns [col*16, col*16+16).
    Unused tiles are magenta.
    """
    size = int(ATLAS_SIZE)
    tile = int(ATLAS_TILE_SIZE)

    img = np.zeros((size, size, 4), dtype=np.float32)
    img[..., 0] = 1.0
    img[..., 2] = 1.0
    img[..., 3] = 1.0

    for (col, row), rgb in _TILE_COLOURS.items():
        n = _soft_noise(tile, tile, seed=seed + col * 31 + row * 131)
        shade = 0.80 + 0.40 * n
        t = np.empty((tile, tile, 3), dtype=np.float32)
        for c in range(3):
            t[..., c] = rgb[c] * shade
        if (col, row) == _GRASS_SIDE:
            t[: tile // 4, :, :] = np.array(_GRASS_RIM, dtype=np.float32) * shade[: tile // 4, :, None]
        img[row * tile:(row + 1) * tile, col * tile:(col + 1) * tile, :3] = t

    return np.clip(img * 255.0, 0, 255).astype(np.uint8)


def build_atlas_texture(ctx: moderngl.Context, *, seed: int = 7) -> moderngl.Texture:
    img = build_atlas_image(seed=seed)
    h, w = img.shape[:2]
    tex = ctx.texture((w, h), 4, data=img.tobytes(order="C"))
    # Pixel-art tiles: no filtering, and no repeat so tiles don't bleed.
    tex.filter = (moderngl.NEAREST, moderngl.NEAREST)
    tex.repeat_x = False
    tex.repeat_y = False
    return tex
