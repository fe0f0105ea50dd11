from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

# pos (3) + uv (2), float32
VERTEX_FLOATS = 5
VERTEX_FORMAT = "3f 2f"

# 1 face = 2 triangles = 6 indices = 4 vertices
QUAD_INDICES = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)


@dataclass(frozen=True)
class Quad:
    positions: np.ndarray  # (4,3) float32
    uvs: np.ndarray  # (4,2) float32


class Mesh:
    """Triangle list: interleaved (N,5) float32 vertices + uint32 indices.

    Every index is < vertex_count, index_count is a multiple of 3, and
    triangles wind counter-clockwise seen from the outward side.
    """

    def __init__(self, vertices: np.ndarray | None = None, indices: np.ndarray | None = None) -> None:
        if vertices is None:
            vertices = np.zeros((0, VERTEX_FLOATS), dtype=np.float32)
        if indices is None:
            indices = np.zeros((0,), dtype=np.uint32)
        self.vertices = np.ascontiguousarray(vertices, dtype=np.float32).reshape(-1, VERTEX_FLOATS)
        self.indices = np.ascontiguousarray(indices, dtype=np.uint32).reshape(-1)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    @property
    def face_count(self) -> int:
        return self.index_count // QUAD_INDICES.size

    @property
    def positions(self) -> np.ndarray:
        return self.vertices[:, 0:3]

    @property
    def uvs(self) -> np.ndarray:
        return self.vertices[:, 3:5]

    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def add_quads(self, positions: np.ndarray, uvs: np.ndarray) -> None:
        """Append K quads given (K,4,3) positions and (K,4,2) uvs.

        Each quad becomes triangles (0,1,2) and (0,2,3), rebased by the
        vertex count before the append.
        """
        positions = np.asarray(positions, dtype=np.float32).reshape(-1, 4, 3)
        uvs = np.asarray(uvs, dtype=np.float32).reshape(-1, 4, 2)
        if positions.shape[0] != uvs.shape[0]:
            raise ValueError(f"got {positions.shape[0]} quad positions but {uvs.shape[0]} quad uvs")
        k = positions.shape[0]
        if k == 0:
            return

        base_index = self.vertex_count
        verts = np.concatenate([positions, uvs], axis=2).reshape(-1, VERTEX_FLOATS)
        bases = base_index + np.arange(k, dtype=np.uint32) * np.uint32(4)
        idx = (bases[:, None] + QUAD_INDICES[None, :]).reshape(-1)

        self.vertices = np.concatenate([self.vertices, verts], axis=0)
        self.indices = np.concatenate([self.indices, idx.astype(np.uint32)], axis=0)

    def add_face(self, quad: Quad) -> None:
        self.add_quads(quad.positions[None, ...], quad.uvs[None, ...])

    @classmethod
    def merge(cls, meshes: Iterable["Mesh"]) -> "Mesh":
        """Concatenate meshes in order, rebasing each mesh's indices by the
        number of vertices appended before it."""
        verts: list[np.ndarray] = []
        idx: list[np.ndarray] = []
        base_index = 0
        for mesh in meshes:
            verts.append(mesh.vertices)
            idx.append(mesh.indices.astype(np.uint64) + np.uint64(base_index))
            base_index += mesh.vertex_count

        if base_index > np.iinfo(np.uint32).max:
            raise ValueError(f"merged mesh has {base_index} vertices, too many for uint32 indices")
        if not verts:
            return cls()
        return cls(np.concatenate(verts, axis=0), np.concatenate(idx, axis=0).astype(np.uint32))

    def validate(self) -> None:
        if self.index_count % 3 != 0:
            raise ValueError(f"index count {self.index_count} is not a multiple of 3")
        if self.index_count and int(self.indices.max()) >= self.vertex_count:
            raise ValueError(
                f"index {int(self.indices.max())} out of range for {self.vertex_count} vertices"
            )

    # Renderer contract: interleaved "3f 2f" vertex buffer + uint32 index buffer.
    def vertex_bytes(self) -> bytes:
        return self.vertices.astype("<f4", copy=False).tobytes()

    def index_bytes(self) -> bytes:
        return self.indices.astype("<u4", copy=False).tobytes()

    def same_as(self, other: "Mesh") -> bool:
        return np.array_equal(self.vertices, other.vertices) and np.array_equal(self.indices, other.indices)

    def __repr__(self) -> str:
        return f"Mesh(vertices={self.vertex_count}, indices={self.index_count})"
