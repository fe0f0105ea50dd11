from __future__ import annotations

import logging

import moderngl
import numpy as np

from voxland.config import FAR, FOV_DEG, NEAR
from voxland.render.shaders import shader_sources
from voxland.render.textures import build_atlas_texture
from voxland.world.mesh import VERTEX_FORMAT, Mesh

log = logging.getLogger(__name__)


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Projection matrix laid out column-major for OpenGL."""
    focal = 1.0 / np.tan(np.radians(fov_deg) * 0.5)
    depth = near - far
    return np.array([
        [focal / aspect, 0.0, 0.0, 0.0],
        [0.0, focal, 0.0, 0.0],
        [0.0, 0.0, (far + near) / depth, -1.0],
        [0.0, 0.0, 2.0 * far * near / depth, 0.0],
    ], dtype=np.float32)


class Renderer:
    """Draws one terrain mesh with the block atlas.

    The mesh is uploaded once per upload_mesh() call; draw_terrain() only
    issues the draw.
    """

    def __init__(self, ctx: moderngl.Context, width: int, height: int) -> None:
        self.ctx = ctx
        self.width = width
        self.height = height

        vert, frag = shader_sources(ctx.version_code)
        self.prog = self.ctx.program(vertex_shader=vert, fragment_shader=frag)

        self.atlas = build_atlas_texture(ctx)
        self.prog["u_atlas"].value = 0

        self._proj = perspective(FOV_DEG, width / height, NEAR, FAR).astype(np.float32)
        self.prog["u_proj"].write(self._proj.tobytes())

        self.ctx.enable(moderngl.DEPTH_TEST | moderngl.CULL_FACE)
        self.ctx.front_face = "ccw"

        self._vbo: moderngl.Buffer | None = None
        self._ibo: moderngl.Buffer | None = None
        self._vao: moderngl.VertexArray | None = None
        self._mesh: Mesh | None = None

    @property
    def proj(self) -> np.ndarray:
        return self._proj

    @property
    def uploaded_mesh(self) -> Mesh | None:
        return self._mesh

    def _release_mesh(self) -> None:
        for obj in (self._vao, self._vbo, self._ibo):
            if obj is not None:
                obj.release()
        self._vao = self._vbo = self._ibo = None
        self._mesh = None

    def upload_mesh(self, mesh: Mesh) -> None:
        self._release_mesh()
        self._mesh = mesh
        if mesh.is_empty():
            return
        self._vbo = self.ctx.buffer(mesh.vertex_bytes())
        self._ibo = self.ctx.buffer(mesh.index_bytes())
        self._vao = self.ctx.vertex_array(
            self.prog,
            [
                (self._vbo, VERTEX_FORMAT, "in_pos", "in_uv"),
            ],
            self._ibo,
            index_element_size=4,
        )
        log.info("uploaded terrain mesh: %d vertices, %d indices", mesh.vertex_count, mesh.index_count)

    def release(self) -> None:
        self._release_mesh()
        for obj in (self.atlas, self.prog):
            obj.release()

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.ctx.viewport = (0, 0, width, height)
        self._proj = perspective(FOV_DEG, width / height, NEAR, FAR).astype(np.float32)
        self.prog["u_proj"].write(self._proj.tobytes())

    def begin_frame(self) -> None:
        self.ctx.clear(0.62, 0.78, 0.95, 1.0)

    def set_common_uniforms(self, view: np.ndarray, cam_pos: np.ndarray, fog_start: float, fog_end: float) -> None:
        self.prog["u_view"].write(view.astype(np.float32).tobytes())
        self.prog["u_cam_pos"].value = (float(cam_pos[0]), float(cam_pos[1]), float(cam_pos[2]))
        self.prog["u_fog_start"].value = float(fog_start)
        self.prog["u_fog_end"].value = float(fog_end)

    def draw_terrain(self) -> None:
        if self._vao is None:
            return
        self.atlas.use(location=0)
        self._vao.render(mode=moderngl.TRIANGLES)
