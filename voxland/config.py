from __future__ import annotations

# App
APP_VERSION = "0.3.0"

# Window (preview viewer)
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS_CAP = 0  # 0 = uncapped

# Chunks
CHUNK_WIDTH = 32
CHUNK_HEIGHT = 32
CHUNK_DEPTH = 32
BLOCK_SIZE = 2.0  # grid units -> world units
DEFAULT_CHUNK_COUNT = 16  # chunks per axis

# Terrain / noise
DEFAULT_SEED = 1234
DEFAULT_NOISE_SCALE = 50.0
DEFAULT_HEIGHT_MIN = 0.0
DEFAULT_HEIGHT_MAX = 15.0
DEFAULT_NOISE = "simplex"  # "simplex" | "fast"

# Generation
DEFAULT_WORKERS = 1  # 1 = sequential

# Texture atlas
ATLAS_SIZE = 256.0
ATLAS_TILE_SIZE = 16.0

# Rendering
FOV_DEG = 45.0
NEAR = 0.5
FAR = 600.0
FOG_START = 220.0
FOG_END = 520.0

# Camera (preview viewer)
DEFAULT_CAMERA_SPEED = 20.0  # world units / sec
DEFAULT_MOUSE_SENSITIVITY = 0.0025  # rad per pixel
DEFAULT_CAMERA_START = (0.0, 40.0, -20.0)
