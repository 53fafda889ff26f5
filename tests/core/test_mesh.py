"""Mesh モデルと立方体ジオメトリのテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from glexp.core import v3
from glexp.core.mesh import Mesh, cube, face_colors, face_palette


def test_cube_shape() -> None:
    mesh = cube()
    assert mesh.vertices.shape == (24, 3)
    assert mesh.indices.shape == (36,)
    assert mesh.normals.shape == (24, 3)
    assert mesh.triangles().shape == (12, 3)
    assert mesh.has_normals
    assert np.all(np.abs(mesh.vertices) == 1.0)


def test_cube_normals_are_outward_unit_vectors() -> None:
    mesh = cube()
    for vertex, normal in zip(mesh.vertices, mesh.normals):
        assert v3.magnitude(normal) == pytest.approx(1.0)
        assert v3.dot(vertex, normal) == pytest.approx(1.0)


def test_cube_triangles_are_counterclockwise_from_outside() -> None:
    mesh = cube()
    for tri in mesh.triangles():
        a, b, c = (mesh.vertices[int(i)] for i in tri)
        winding = v3.cross(v3.subtract(b, a), v3.subtract(c, a))
        assert v3.dot(winding, mesh.normals[int(tri[0])]) > 0.0


def test_mesh_arrays_are_read_only() -> None:
    mesh = cube()
    for arr in (mesh.vertices, mesh.indices, mesh.normals):
        assert arr.flags.writeable is False


def test_mesh_without_normals() -> None:
    mesh = Mesh(vertices=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], indices=[0, 1, 2])
    assert mesh.normals.shape == (0, 3)
    assert not mesh.has_normals
    assert mesh.indices.dtype == np.int32


def test_empty_mesh_is_allowed() -> None:
    mesh = Mesh(vertices=[], indices=[])
    assert mesh.vertices.shape == (0, 3)
    assert mesh.triangles().shape == (0, 3)
    assert face_colors(mesh).shape == (0, 4)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"vertices": [[0, 0], [1, 0], [0, 1]], "indices": [0, 1, 2]},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]], "indices": [0, 1]},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]], "indices": [0, 1, 3]},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]], "indices": [0, 1, 2], "normals": [[0, 0, 1]]},
    ],
)
def test_invalid_mesh_is_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        Mesh(**kwargs)


def test_face_colors_follow_palette_per_face() -> None:
    mesh = cube()
    colors = face_colors(mesh)
    palette = face_palette()
    assert colors.shape == (24, 4)
    np.testing.assert_array_equal(colors[0], palette[0])
    np.testing.assert_array_equal(colors[5], palette[1])
    np.testing.assert_array_equal(colors[23], palette[5])


def test_face_colors_wraps_custom_palette() -> None:
    mesh = cube()
    palette = [(1.0, 1.0, 1.0, 1.0), (0.0, 0.0, 0.0, 1.0)]
    colors = face_colors(mesh, palette)
    np.testing.assert_array_equal(colors[4], palette[1])
    np.testing.assert_array_equal(colors[9], palette[0])

    with pytest.raises(ValueError):
        face_colors(mesh, [])
