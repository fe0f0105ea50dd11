from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from voxland.config import ATLAS_SIZE, ATLAS_TILE_SIZE
from voxland.world.mesh import Quad


class BlockType(IntEnum):
    AIR = 0
    DIRT = 1
    GRASS = 2
    STONE = 3


class Face(IntEnum):
    TOP = 0
    BOTTOM = 1
    LEFT = 2
    RIGHT = 3
    FRONT = 4
    BACK = 5


# Neighbor step per face, in local grid axes (x, y, z).
FACE_OFFSETS = {
    Face.TOP: (0, 1, 0),
    Face.BOTTOM: (0, -1, 0),
    Face.LEFT: (-1, 0, 0),
    Face.RIGHT: (1, 0, 0),
    Face.FRONT: (0, 0, -1),
    Face.BACK: (0, 0, 1),
}

# Order in which a voxel's faces are emitted during meshing.
MESH_FACE_ORDER = (Face.LEFT, Face.RIGHT, Face.BOTTOM, Face.TOP, Face.FRONT, Face.BACK)

# Unit-cube corners per face (half extent 1). Corner order makes
# triangles (0,1,2) and (0,2,3) counter-clockwise seen from outside, and
# on side faces keeps the rotated atlas v running along world y.
# The top face runs u along z.
FACE_TEMPLATES = np.array([
    [[-1, 1, -1], [-1, 1, 1], [1, 1, 1], [1, 1, -1]],  # top +y
    [[-1, -1, -1], [1, -1, -1], [1, -1, 1], [-1, -1, 1]],  # bottom -y
    [[-1, -1, 1], [-1, 1, 1], [-1, 1, -1], [-1, -1, -1]],  # left -x
    [[1, -1, -1], [1, 1, -1], [1, 1, 1], [1, -1, 1]],  # right +x
    [[1, -1, -1], [-1, -1, -1], [-1, 1, -1], [1, 1, -1]],  # front -z
    [[-1, -1, 1], [1, -1, 1], [1, 1, 1], [-1, 1, 1]],  # back +z
], dtype=np.float32)


def atlas_tile(block_type: BlockType, face: Face) -> tuple[int, int] | None:
    """Return the (col, row) atlas tile for a block face, None for air."""
    if block_type == BlockType.GRASS:
        if face == Face.TOP:
            return (0, 0)
        if face == Face.BOTTOM:
            return (2, 0)
        return (3, 0)
    if block_type == BlockType.DIRT:
        return (2, 0)
    if block_type == BlockType.STONE:
        return (1, 0)
    return None


def tile_uv_bounds(block_type: BlockType, face: Face) -> tuple[float, float, float, float]:
    """(u_min, v_min, u_max, v_max) of the tile used by a block face."""
    tile = atlas_tile(block_type, face)
    if tile is None:
        raise ValueError(f"{BlockType(block_type).name} has no texture")
    col, row = tile
    step = ATLAS_TILE_SIZE / ATLAS_SIZE
    u_min = col * ATLAS_TILE_SIZE / ATLAS_SIZE
    v_min = row * ATLAS_TILE_SIZE / ATLAS_SIZE
    return u_min, v_min, u_min + step, v_min + step


def tex_coords(block_type: BlockType, face: Face) -> np.ndarray:
    """Per-corner UVs (4,2) for a block face.

    Corners run (min,min),(max,min),(max,max),(min,max); side faces rotate
    that order (front/back by 2, left/right by 1) to keep textures upright.
    """
    u_min, v_min, u_max, v_max = tile_uv_bounds(block_type, face)
    uv = np.array([
        [u_min, v_min],
        [u_max, v_min],
        [u_max, v_max],
        [u_min, v_max],
    ], dtype=np.float32)
    if face in (Face.FRONT, Face.BACK):
        uv = np.roll(uv, 2, axis=0)
    elif face in (Face.LEFT, Face.RIGHT):
        uv = np.roll(uv, 1, axis=0)
    return uv


def _build_uv_table() -> np.ndarray:
    table = np.zeros((len(BlockType), len(Face), 4, 2), dtype=np.float32)
    for bt in BlockType:
        if bt == BlockType.AIR:
            continue
        for face in Face:
            table[bt, face] = tex_coords(bt, face)
    return table


# (block_type, face) -> (4,2) uvs; the air rows stay zero and are never read.
UV_TABLE = _build_uv_table()


@dataclass(frozen=True)
class Voxel:
    block_type: BlockType
    position: tuple[float, float, float]  # world space centre

    def is_air(self) -> bool:
        return self.block_type == BlockType.AIR

    def generate_face(self, face: Face, *, half_extent: float = 1.0) -> Quad:
        pos = np.asarray(self.position, dtype=np.float32)
        corners = FACE_TEMPLATES[face] * np.float32(half_extent) + pos[None, :]
        return Quad(positions=corners.astype(np.float32), uvs=tex_coords(self.block_type, face))
