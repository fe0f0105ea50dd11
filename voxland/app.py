from __future__ import annotations

import logging
import time

import moderngl
import pygame

from voxland.config import (
    DEFAULT_CAMERA_SPEED,
    DEFAULT_CAMERA_START,
    DEFAULT_MOUSE_SENSITIVITY,
    FOG_END,
    FOG_START,
    FPS_CAP,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from voxland.render.camera import FlyCamera
from voxland.render.renderer import Renderer
from voxland.world.chunk_grid import ChunkGrid

log = logging.getLogger(__name__)


def _init_pygame_gl() -> None:
    pygame.init()
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
    pygame.display.gl_set_attribute(pygame.GL_DEPTH_SIZE, 24)
    pygame.display.gl_set_attribute(pygame.GL_DOUBLEBUFFER, 1)


def _axis(keys, neg: int, pos: int) -> float:
    return float(bool(keys[pos])) - float(bool(keys[neg]))


def run_app(
    grid: ChunkGrid,
    *,
    seed: int,
    wireframe: bool = False,
    debug: bool = False,
    camera_speed: float = DEFAULT_CAMERA_SPEED,
    fog_start: float = FOG_START,
    fog_end: float = FOG_END,
) -> None:
    """Open a window and fly over the merged mesh of `grid`.

    The mesh is fetched from the grid every frame (served from its cache)
    and re-uploaded only when a different mesh object comes back.
    """
    _init_pygame_gl()

    flags = pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE
    pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), flags)
    pygame.display.set_caption(f"voxland (seed={seed})")

    try:
        ctx = moderngl.create_context()
    except Exception as e:
        pygame.quit()
        raise RuntimeError("Failed to create ModernGL context (need OpenGL 3.2+)") from e

    log.debug("moderngl ctx version_code=%s renderer=%s", ctx.version_code, ctx.info.get("GL_RENDERER"))

    ctx.viewport = (0, 0, WINDOW_WIDTH, WINDOW_HEIGHT)
    if wireframe:
        ctx.wireframe = True

    renderer = Renderer(ctx, WINDOW_WIDTH, WINDOW_HEIGHT)
    cam = FlyCamera(DEFAULT_CAMERA_START, speed=camera_speed, sensitivity=DEFAULT_MOUSE_SENSITIVITY)

    pygame.event.set_grab(True)
    pygame.mouse.set_visible(False)

    clock = pygame.time.Clock()
    running = True
    last_t = time.perf_counter()
    last_log = last_t
    fps_est = 0.0

    try:
        while running:
            now = time.perf_counter()
            dt = min(now - last_t, 0.05)
            last_t = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.MOUSEMOTION:
                    cam.look(event.rel[0], event.rel[1])
                elif event.type == pygame.VIDEORESIZE:
                    w, h = max(64, event.w), max(64, event.h)
                    pygame.display.set_mode((w, h), flags)
                    renderer.resize(w, h)

            keys = pygame.key.get_pressed()
            cam.update(
                dt,
                forward=_axis(keys, pygame.K_s, pygame.K_w),
                strafe=_axis(keys, pygame.K_a, pygame.K_d),
                lift=_axis(keys, pygame.K_LSHIFT, pygame.K_SPACE),
            )

            mesh = grid.mesh()
            if mesh is not renderer.uploaded_mesh:
                renderer.upload_mesh(mesh)

            renderer.begin_frame()
            renderer.set_common_uniforms(
                view=cam.view_matrix(),
                cam_pos=cam.eye(),
                fog_start=float(fog_start),
                fog_end=float(fog_end),
            )
            renderer.draw_terrain()
            pygame.display.flip()

            if dt > 0:
                inst_fps = 1.0 / dt
                fps_est = (0.9 * fps_est + 0.1 * inst_fps) if fps_est > 0 else inst_fps
            if debug and now - last_log >= 1.0:
                last_log = now
                p = cam.eye()
                log.debug("fps~%.0f cam=(%.1f, %.1f, %.1f) faces=%d", fps_est, p[0], p[1], p[2], mesh.face_count)

            if FPS_CAP and FPS_CAP > 0:
                clock.tick(FPS_CAP)
            else:
                clock.tick()
    finally:
        renderer.release()
        pygame.quit()
