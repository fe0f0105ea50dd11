import numpy as np
import pytest

from voxland.world.block import BlockType, Face, Voxel
from voxland.world.chunk import VoxelChunk
from voxland.world.mesh import Mesh, Quad


def _quad(offset=0.0):
    pos = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=np.float32) + offset
    uv = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=np.float32)
    return Quad(pos, uv)


def test_empty_mesh():
    m = Mesh()
    assert m.vertex_count == 0
    assert m.index_count == 0
    assert m.is_empty()
    m.validate()


def test_add_face_rebases_by_current_vertex_count():
    m = Mesh()
    m.add_face(_quad())
    m.add_face(_quad(5.0))
    assert m.vertex_count == 8
    assert m.indices.tolist() == [0, 1, 2, 0, 2, 3, 4, 5, 6, 4, 6, 7]
    assert m.face_count == 2
    np.testing.assert_allclose(m.positions[4], [5.0, 5.0, 5.0])
    np.testing.assert_allclose(m.uvs[6], [1.0, 1.0])
    m.validate()


def test_add_quads_shape_mismatch():
    m = Mesh()
    with pytest.raises(ValueError):
        m.add_quads(np.zeros((2, 4, 3)), np.zeros((1, 4, 2)))


def _chunk_with(*cells):
    ch = VoxelChunk((0.0, 0.0, 0.0), width=4, height=4, depth=4)
    for x, y, z in cells:
        ch.set_block(x, y, z, BlockType.STONE)
    ch.generate_mesh()
    return ch


def test_merge_rebases_second_mesh_indices():
    a = _chunk_with((1, 1, 1)).mesh
    b = _chunk_with((0, 0, 0), (0, 1, 0)).mesh
    merged = Mesh.merge([a, b])

    n_a = a.vertex_count
    assert merged.vertex_count == n_a + b.vertex_count
    assert np.array_equal(merged.indices[: a.index_count], a.indices)
    assert np.array_equal(merged.indices[a.index_count:], b.indices + n_a)
    assert int(merged.indices.max()) < merged.vertex_count
    assert np.array_equal(merged.vertices[n_a:], b.vertices)
    merged.validate()


def test_merge_of_nothing_is_empty():
    assert Mesh.merge([]).is_empty()


def test_validate_catches_bad_indices():
    m = Mesh(np.zeros((3, 5), dtype=np.float32), np.array([0, 1, 3], dtype=np.uint32))
    with pytest.raises(ValueError):
        m.validate()
    m = Mesh(np.zeros((3, 5), dtype=np.float32), np.array([0, 1], dtype=np.uint32))
    with pytest.raises(ValueError):
        m.validate()


def test_renderer_buffers_are_packed_little_endian():
    m = Mesh()
    m.add_face(Voxel(BlockType.GRASS, (0.0, 0.0, 0.0)).generate_face(Face.TOP))
    vb = m.vertex_bytes()
    ib = m.index_bytes()
    assert len(vb) == 4 * 5 * 4
    assert len(ib) == 6 * 4
    back = np.frombuffer(vb, dtype="<f4").reshape(-1, 5)
    assert np.array_equal(back, m.vertices)
    assert np.frombuffer(ib, dtype="<u4").tolist() == [0, 1, 2, 0, 2, 3]
