import numpy as np
import pytest

from voxland.world.block import (
    FACE_OFFSETS,
    FACE_TEMPLATES,
    BlockType,
    Face,
    Voxel,
    atlas_tile,
    tex_coords,
    tile_uv_bounds,
)
from voxland.world.mesh import QUAD_INDICES


def test_grass_top_uses_first_tile():
    u_min, v_min, u_max, v_max = tile_uv_bounds(BlockType.GRASS, Face.TOP)
    assert (u_min, v_min) == (0.0, 0.0)
    assert (u_max, v_max) == (16 / 256, 16 / 256)


@pytest.mark.parametrize("face", list(Face))
def test_stone_uses_second_tile_on_every_face(face):
    u_min, v_min, _, _ = tile_uv_bounds(BlockType.STONE, face)
    assert (u_min, v_min) == (16 / 256, 0.0)


def test_grass_and_dirt_tiles():
    assert atlas_tile(BlockType.GRASS, Face.BOTTOM) == (2, 0)
    for face in (Face.LEFT, Face.RIGHT, Face.FRONT, Face.BACK):
        assert atlas_tile(BlockType.GRASS, face) == (3, 0)
    for face in Face:
        assert atlas_tile(BlockType.DIRT, face) == (2, 0)
    assert atlas_tile(BlockType.AIR, Face.TOP) is None


def test_air_has_no_texture():
    with pytest.raises(ValueError):
        tex_coords(BlockType.AIR, Face.TOP)


def test_corner_order_and_side_rotation():
    lo, hi = 16 / 256, 32 / 256
    base = np.array([[lo, 0], [hi, 0], [hi, 1 / 16], [lo, 1 / 16]], dtype=np.float32)
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.TOP), base)
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.BOTTOM), base)
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.LEFT), base[[3, 0, 1, 2]])
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.RIGHT), base[[3, 0, 1, 2]])
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.FRONT), base[[2, 3, 0, 1]])
    np.testing.assert_allclose(tex_coords(BlockType.STONE, Face.BACK), base[[2, 3, 0, 1]])


@pytest.mark.parametrize("face", list(Face))
def test_face_templates_wind_ccw_from_outside(face):
    corners = FACE_TEMPLATES[face].astype(np.float64)
    outward = np.array(FACE_OFFSETS[face], dtype=np.float64)
    for tri in QUAD_INDICES.reshape(2, 3):
        a, b, c = corners[tri]
        normal = np.cross(b - a, c - a)
        assert float(np.dot(normal, outward)) > 0.0
    # the face sits on the side of the cube it is named after
    axis = int(np.flatnonzero(outward)[0])
    assert np.all(corners[:, axis] == outward[axis])


def test_generate_face_offsets_voxel_position():
    v = Voxel(BlockType.DIRT, (4.0, 2.0, 6.0))
    quad = v.generate_face(Face.TOP)
    assert quad.positions.shape == (4, 3)
    np.testing.assert_allclose(quad.positions[:, 1], 3.0)
    np.testing.assert_allclose(quad.positions.mean(axis=0), [4.0, 3.0, 6.0])
    np.testing.assert_allclose(quad.uvs, tex_coords(BlockType.DIRT, Face.TOP))
    assert not v.is_air()
    assert Voxel(BlockType.AIR, (0.0, 0.0, 0.0)).is_air()


SIDE_FACES = [Face.LEFT, Face.RIGHT, Face.FRONT, Face.BACK]


@pytest.mark.parametrize("face", SIDE_FACES)
def test_side_texture_runs_upright(face):
    quad = Voxel(BlockType.GRASS, (0.0, 0.0, 0.0)).generate_face(face)
    ys = quad.positions[:, 1]
    v = quad.uvs[:, 1]
    top_v = set(v[ys > 0].tolist())
    bottom_v = set(v[ys < 0].tolist())
    assert len(top_v) == 1
    assert len(bottom_v) == 1
    # atlas rows grow downwards: the tile's first row (grass rim) sits on top
    assert top_v == {0.0}
    assert bottom_v == {16 / 256}


@pytest.mark.parametrize("face", SIDE_FACES)
def test_side_texture_u_runs_the_same_way_on_every_side(face):
    quad = Voxel(BlockType.GRASS, (0.0, 0.0, 0.0)).generate_face(face)
    outward = np.array(FACE_OFFSETS[face], dtype=np.float64)
    # right-hand direction of someone outside looking at the face
    viewer_right = np.cross(-outward, [0.0, 1.0, 0.0])
    along = quad.positions.astype(np.float64) @ viewer_right
    u = quad.uvs[:, 0]
    assert set(u[along > 0].tolist()) == {48 / 256}
    assert set(u[along < 0].tolist()) == {64 / 256}
