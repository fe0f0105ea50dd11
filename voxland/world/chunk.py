from __future__ import annotations

import logging

import numpy as np

from voxland.config import BLOCK_SIZE, CHUNK_DEPTH, CHUNK_HEIGHT, CHUNK_WIDTH
from voxland.world.block import (
    FACE_OFFSETS,
    FACE_TEMPLATES,
    MESH_FACE_ORDER,
    UV_TABLE,
    BlockType,
    Voxel,
)
from voxland.world.height import HeightField
from voxland.world.mesh import Mesh

log = logging.getLogger(__name__)

_MESH_FACES = np.array([int(f) for f in MESH_FACE_ORDER], dtype=np.int64)


class VoxelChunk:
    """A W x H x D block of voxels with its corner at `origin` (grid units).

    Block types live in one flat uint8 buffer addressed ((x*H)+y)*D+z;
    `blocks` is a (W,H,D) view onto it. A fresh chunk is all air.
    The mesh is only rebuilt by an explicit generate_mesh() call.
    """

    def __init__(
        self,
        origin: tuple[float, float, float],
        *,
        width: int = CHUNK_WIDTH,
        height: int = CHUNK_HEIGHT,
        depth: int = CHUNK_DEPTH,
        block_size: float = BLOCK_SIZE,
    ) -> None:
        if width <= 0 or height <= 0 or depth <= 0:
            raise ValueError(f"chunk dimensions must be positive, got {width}x{height}x{depth}")
        self.origin = (float(origin[0]), float(origin[1]), float(origin[2]))
        self.width = int(width)
        self.height = int(height)
        self.depth = int(depth)
        self.block_size = float(block_size)

        self._data = np.zeros(self.width * self.height * self.depth, dtype=np.uint8)
        self.mesh = Mesh()

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.width, self.height, self.depth)

    @property
    def blocks(self) -> np.ndarray:
        return self._data.reshape(self.shape)

    def _check_local(self, x: int, y: int, z: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth):
            raise IndexError(f"local voxel ({x}, {y}, {z}) outside chunk {self.width}x{self.height}x{self.depth}")

    def world_position(self, x: int, y: int, z: int) -> tuple[float, float, float]:
        ox, oy, oz = self.origin
        s = np.float32(self.block_size)
        return (
            float((np.float32(ox) + np.float32(x)) * s),
            float((np.float32(oy) + np.float32(y)) * s),
            float((np.float32(oz) + np.float32(z)) * s),
        )

    def voxel(self, x: int, y: int, z: int) -> Voxel:
        self._check_local(x, y, z)
        bt = BlockType(int(self._data[(x * self.height + y) * self.depth + z]))
        return Voxel(bt, self.world_position(x, y, z))

    def set_block(self, x: int, y: int, z: int, block_type: BlockType) -> None:
        self._check_local(x, y, z)
        self._data[(x * self.height + y) * self.depth + z] = int(block_type)

    def populate(self, height_field: HeightField) -> None:
        """Fill every column from the height field, read at global columns.

        Per column, with level = floor(height): y == level -> grass,
        else y == 0 -> stone, else y < level -> dirt, else air.
        Raises MissingHeightSampleError if a column lies outside the field.
        """
        gx0 = int(self.origin[0])
        gz0 = int(self.origin[2])
        heights = height_field.columns(gx0, gz0, self.width, self.depth)

        # below-zero heights saturate to level 0
        levels = np.maximum(np.floor(heights), 0).astype(np.int64)[:, None, :]
        y = np.arange(self.height, dtype=np.int64)[None, :, None]

        blocks = np.where(
            y == levels,
            BlockType.GRASS,
            np.where(y == 0, BlockType.STONE, np.where(y < levels, BlockType.DIRT, BlockType.AIR)),
        )
        self._data[:] = blocks.astype(np.uint8).reshape(-1)

    def _exposed(self, solid: np.ndarray) -> np.ndarray:
        # Out-of-bounds neighbors count as air, so chunk borders always render.
        padded = np.pad(solid, 1, mode="constant", constant_values=False)
        w, h, d = self.shape
        masks = []
        for face in MESH_FACE_ORDER:
            dx, dy, dz = FACE_OFFSETS[face]
            neighbor = padded[1 + dx:1 + dx + w, 1 + dy:1 + dy + h, 1 + dz:1 + dz + d]
            masks.append(solid & ~neighbor)
        return np.stack(masks, axis=-1)

    def generate_mesh(self) -> Mesh:
        """Rebuild the chunk mesh from scratch: one quad per visible face."""
        blocks = self.blocks
        solid = blocks != BlockType.AIR
        mesh = Mesh()
        if solid.any():
            # nonzero walks (x, y, z, face) in row-major order
            xs, ys, zs, k = np.nonzero(self._exposed(solid))
            faces = _MESH_FACES[k]
            types = blocks[xs, ys, zs].astype(np.int64)

            origin = np.array(self.origin, dtype=np.float32)
            local = np.stack([xs, ys, zs], axis=1).astype(np.float32)
            centres = (origin[None, :] + local) * np.float32(self.block_size)

            half = np.float32(self.block_size * 0.5)
            positions = FACE_TEMPLATES[faces] * half + centres[:, None, :]
            mesh.add_quads(positions, UV_TABLE[types, faces])

        self.mesh = mesh
        log.debug("chunk %s meshed: %d faces", self.origin, mesh.face_count)
        return mesh

    def __repr__(self) -> str:
        return f"VoxelChunk(origin={self.origin}, shape={self.shape})"
