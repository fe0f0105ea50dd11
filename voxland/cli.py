from __future__ import annotations

import argparse
import logging
import random
from typing import Optional, Sequence

from voxland.app import run_app
from voxland.config import (
    APP_VERSION,
    BLOCK_SIZE,
    CHUNK_DEPTH,
    CHUNK_HEIGHT,
    CHUNK_WIDTH,
    DEFAULT_CAMERA_SPEED,
    DEFAULT_CHUNK_COUNT,
    DEFAULT_HEIGHT_MAX,
    DEFAULT_HEIGHT_MIN,
    DEFAULT_NOISE,
    DEFAULT_NOISE_SCALE,
    DEFAULT_SEED,
    DEFAULT_WORKERS,
    FOG_END,
    FOG_START,
)
from voxland.setup_logging import setup_logging
from voxland.world.chunk_grid import GenerationParams, generate_chunks
from voxland.world.noise import NOISE_MODES

log = logging.getLogger("voxland.cli")

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="voxland", description=f"Voxel terrain generator and mesher v{APP_VERSION}")
    p.add_argument("--seed", default=str(DEFAULT_SEED), help=f"int seed or 'random' (default: {DEFAULT_SEED})")
    p.add_argument("--chunks", type=int, default=DEFAULT_CHUNK_COUNT, help=f"chunks per axis (default: {DEFAULT_CHUNK_COUNT})")
    p.add_argument("--chunk-width", type=int, default=CHUNK_WIDTH, help="voxels per chunk along x")
    p.add_argument("--chunk-height", type=int, default=CHUNK_HEIGHT, help="voxels per chunk along y")
    p.add_argument("--chunk-depth", type=int, default=CHUNK_DEPTH, help="voxels per chunk along z")
    p.add_argument("--block-size", type=float, default=BLOCK_SIZE, help="world units per voxel (default: 2.0)")
    p.add_argument("--noise-scale", type=float, default=DEFAULT_NOISE_SCALE, help="noise sampling scale; larger = smoother terrain")
    p.add_argument("--height-min", type=float, default=DEFAULT_HEIGHT_MIN, help="lowest terrain height (voxels)")
    p.add_argument("--height-max", type=float, default=DEFAULT_HEIGHT_MAX, help="highest terrain height (voxels)")
    p.add_argument("--noise", choices=list(NOISE_MODES), default=DEFAULT_NOISE, help="height noise (simplex or fast value noise)")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="threads for chunk population/meshing (1 = sequential)")
    p.add_argument("--view", action="store_true", help="open the preview window after generating")
    p.add_argument("--wireframe", action="store_true", help="render wireframe (with --view)")
    p.add_argument("--camera-speed", type=float, default=DEFAULT_CAMERA_SPEED, help="preview camera speed (world units / sec)")
    p.add_argument("--fog-start", type=float, default=FOG_START, help="fog start distance")
    p.add_argument("--fog-end", type=float, default=FOG_END, help="fog end distance")
    p.add_argument("--debug", action="store_true", help="debug logging")
    p.add_argument("--log-file", default=None, help="also write logs to this file")
    return p.parse_args(argv)

def _resolve_seed(raw: str) -> int:
    if isinstance(raw, str) and raw.lower() == "random":
        return random.randint(0, 2**32 - 1)
    return int(raw)

def build_params(args: argparse.Namespace) -> GenerationParams:
    return GenerationParams(
        chunk_count=int(args.chunks),
        chunk_width=int(args.chunk_width),
        chunk_height=int(args.chunk_height),
        chunk_depth=int(args.chunk_depth),
        block_size=float(args.block_size),
        seed=_resolve_seed(args.seed),
        noise_scale=float(args.noise_scale),
        height_min=float(args.height_min),
        height_max=float(args.height_max),
        noise=str(args.noise),
    )

def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    setup_logging(debug=bool(args.debug), log_file=args.log_file)

    params = build_params(args)
    grid = generate_chunks(params, workers=int(args.workers))
    mesh = grid.mesh()
    log.info(
        "seed=%d chunks=%d vertices=%d indices=%d faces=%d",
        params.seed,
        len(grid),
        mesh.vertex_count,
        mesh.index_count,
        mesh.face_count,
    )

    if args.view:
        run_app(
            grid,
            seed=params.seed,
            wireframe=bool(args.wireframe),
            debug=bool(args.debug),
            camera_speed=float(args.camera_speed),
            fog_start=float(args.fog_start),
            fog_end=float(args.fog_end),
        )

if __name__ == "__main__":
    main()
