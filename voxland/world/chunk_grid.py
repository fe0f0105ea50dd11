from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from voxland.config import (
    BLOCK_SIZE,
    CHUNK_DEPTH,
    CHUNK_HEIGHT,
    CHUNK_WIDTH,
    DEFAULT_CHUNK_COUNT,
    DEFAULT_HEIGHT_MAX,
    DEFAULT_HEIGHT_MIN,
    DEFAULT_NOISE,
    DEFAULT_NOISE_SCALE,
    DEFAULT_SEED,
)
from voxland.world.chunk import VoxelChunk
from voxland.world.height import HeightField, generate_height_field
from voxland.world.mesh import Mesh
from voxland.world.noise import NOISE_MODES

log = logging.getLogger(__name__)

ChunkKey = Tuple[int, int, int]


class MeshCache:
    """Settable and clearable memo cell for a merged mesh.

    Never invalidates on its own; the owner decides when to clear it.
    """

    def __init__(self) -> None:
        self._mesh: Optional[Mesh] = None

    def is_set(self) -> bool:
        return self._mesh is not None

    def get(self) -> Optional[Mesh]:
        return self._mesh

    def set(self, mesh: Mesh) -> Mesh:
        self._mesh = mesh
        return mesh

    def clear(self) -> None:
        self._mesh = None


class ChunkGrid:
    """Owns the chunks of a world and their merged mesh.

    Chunks are indexed by integer chunk coordinate and merged in insertion
    order. The merged mesh is computed on first request and then served
    from cache, even if chunk contents change afterwards: callers that
    re-mesh chunks must call clear_cache() themselves.
    """

    def __init__(self, chunks: Iterable[VoxelChunk] = ()) -> None:
        self._chunks: Dict[ChunkKey, VoxelChunk] = {}
        self._shape: Optional[Tuple[int, int, int]] = None
        self._cache = MeshCache()
        for ch in chunks:
            self.add_chunk(ch)

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[VoxelChunk]:
        return iter(self._chunks.values())

    def _key(self, position: Tuple[float, float, float]) -> Optional[ChunkKey]:
        if self._shape is None:
            return None
        key = []
        for p, size in zip(position, self._shape):
            p = float(p)
            if not p.is_integer() or int(p) % size != 0:
                return None
            key.append(int(p) // size)
        return (key[0], key[1], key[2])

    def add_chunk(self, chunk: VoxelChunk) -> None:
        if self._shape is None:
            self._shape = chunk.shape
        elif chunk.shape != self._shape:
            raise ValueError(f"chunk {chunk.origin} has shape {chunk.shape}, grid uses {self._shape}")

        key = self._key(chunk.origin)
        if key is None:
            raise ValueError(f"chunk origin {chunk.origin} is not aligned to the {self._shape} chunk lattice")
        if key in self._chunks:
            raise ValueError(f"a chunk at {chunk.origin} already exists")
        self._chunks[key] = chunk

    def get_chunk(self, position: Tuple[float, float, float]) -> Optional[VoxelChunk]:
        """Return the chunk whose origin equals `position`, or None."""
        key = self._key(position)
        if key is None:
            return None
        return self._chunks.get(key)

    def chunk_at(self, cx: int, cz: int, cy: int = 0) -> Optional[VoxelChunk]:
        return self._chunks.get((int(cx), int(cy), int(cz)))

    def merge_meshes(self) -> Mesh:
        merged = Mesh.merge(ch.mesh for ch in self._chunks.values())
        log.debug("merged %d chunk meshes: %d vertices, %d indices", len(self), merged.vertex_count, merged.index_count)
        return merged

    def mesh(self) -> Mesh:
        cached = self._cache.get()
        if cached is not None:
            log.debug("merged mesh cache hit (%d faces)", cached.face_count)
            return cached
        log.debug("merged mesh cache miss, merging %d chunks", len(self._chunks))
        return self._cache.set(self.merge_meshes())

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache(self) -> MeshCache:
        return self._cache


@dataclass(frozen=True)
class GenerationParams:
    chunk_count: int = DEFAULT_CHUNK_COUNT  # chunks per axis (x and z)
    chunk_width: int = CHUNK_WIDTH
    chunk_height: int = CHUNK_HEIGHT
    chunk_depth: int = CHUNK_DEPTH
    block_size: float = BLOCK_SIZE
    seed: int = DEFAULT_SEED
    noise_scale: float = DEFAULT_NOISE_SCALE
    height_min: float = DEFAULT_HEIGHT_MIN
    height_max: float = DEFAULT_HEIGHT_MAX
    noise: str = DEFAULT_NOISE

    def validate(self) -> None:
        if self.chunk_count <= 0:
            raise ValueError(f"chunk_count must be positive, got {self.chunk_count}")
        if min(self.chunk_width, self.chunk_height, self.chunk_depth) <= 0:
            raise ValueError(
                f"chunk dimensions must be positive, got {self.chunk_width}x{self.chunk_height}x{self.chunk_depth}"
            )
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if self.noise_scale <= 0:
            raise ValueError(f"noise_scale must be positive, got {self.noise_scale}")
        if self.height_min > self.height_max:
            raise ValueError(f"height_min {self.height_min} is above height_max {self.height_max}")
        if self.noise not in NOISE_MODES:
            raise ValueError(f"unknown noise mode {self.noise!r}")


def _build_chunk(chunk: VoxelChunk, height_field: HeightField) -> VoxelChunk:
    chunk.populate(height_field)
    chunk.generate_mesh()
    return chunk


def generate_chunks(params: GenerationParams, *, workers: int = 1) -> ChunkGrid:
    """Generate a chunk_count x chunk_count world and return it as a ChunkGrid.

    One height field covers the whole world; each chunk reads it at global
    columns. With workers > 1 chunks are populated and meshed on a thread
    pool; the grid is assembled only after every chunk is done.
    """
    params.validate()
    t0 = time.perf_counter()

    height_field = generate_height_field(
        params.chunk_count * params.chunk_width,
        params.chunk_count * params.chunk_depth,
        params.noise_scale,
        params.seed,
        params.height_min,
        params.height_max,
        noise=params.noise,
    )

    chunks = []
    for chunk_x in range(params.chunk_count):
        for chunk_z in range(params.chunk_count):
            origin = (
                float(chunk_x * params.chunk_width),
                0.0,
                float(chunk_z * params.chunk_depth),
            )
            chunks.append(
                VoxelChunk(
                    origin,
                    width=params.chunk_width,
                    height=params.chunk_height,
                    depth=params.chunk_depth,
                    block_size=params.block_size,
                )
            )

    if workers > 1:
        with ThreadPoolExecutor(max_workers=int(workers), thread_name_prefix="chunkgen") as pool:
            built = list(pool.map(lambda ch: _build_chunk(ch, height_field), chunks))
    else:
        built = [_build_chunk(ch, height_field) for ch in chunks]

    grid = ChunkGrid(built)
    log.info(
        "generated %d chunks (%dx%dx%d) in %.2fs using %d worker(s)",
        len(grid),
        params.chunk_width,
        params.chunk_height,
        params.chunk_depth,
        time.perf_counter() - t0,
        max(1, int(workers)),
    )
    return grid
