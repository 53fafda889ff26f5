"""カメラ行列と投影行列（look_at / orthographic / perspective）のテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from glexp.core import m4, v3


def test_perspective_maps_near_and_far_plane_centers_to_depth_extremes() -> None:
    near, far = 1.0, 10.0
    p = m4.perspective_projection(math.pi / 2, 1.5, near, far)

    at_near = m4.multiply_vector(p, (0.0, 0.0, -near, 1.0))
    np.testing.assert_allclose(at_near, [0.0, 0.0, -1.0, 1.0], rtol=0.0, atol=1e-12)

    at_far = m4.multiply_vector(p, (0.0, 0.0, -far, 1.0))
    np.testing.assert_allclose(at_far, [0.0, 0.0, 1.0, 1.0], rtol=0.0, atol=1e-12)


def test_perspective_matrix_layout() -> None:
    near, far, aspect = 2.0, 20.0, 2.0
    p = m4.perspective_projection(math.pi / 2, aspect, near, far)
    s = 1.0 / math.tan(math.pi / 4)
    expected = np.array(
        [
            [s / aspect, 0.0, 0.0, 0.0],
            [0.0, s, 0.0, 0.0],
            [0.0, 0.0, (near + far) / (near - far), 2 * near * far / (near - far)],
            [0.0, 0.0, -1.0, 0.0],
        ]
    )
    np.testing.assert_allclose(p, expected, rtol=1e-12, atol=1e-12)


def test_perspective_near_plane_edges_map_to_ndc_edges() -> None:
    fov, aspect, near = math.pi / 3, 1.5, 2.0
    p = m4.perspective_projection(fov, aspect, near, 100.0)
    half_h = math.tan(fov / 2) * near
    half_w = half_h * aspect

    top = m4.multiply_vector(p, (0.0, half_h, -near, 1.0))
    right = m4.multiply_vector(p, (half_w, 0.0, -near, 1.0))
    assert top[1] == pytest.approx(1.0)
    assert right[0] == pytest.approx(1.0)


def test_perspective_foreshortens_with_distance() -> None:
    p = m4.perspective_projection(math.pi / 2, 1.0, 1.0, 100.0)
    close = m4.multiply_vector(p, (1.0, 0.0, -2.0, 1.0))
    distant = m4.multiply_vector(p, (1.0, 0.0, -4.0, 1.0))
    assert close[0] == pytest.approx(0.5)
    assert distant[0] == pytest.approx(0.25)
    assert close[2] < distant[2]


def test_orthographic_frustum_maps_corner_and_center() -> None:
    p = m4.orthographic_frustum(-1.0, 1.0, -1.0, 1.0, 1.0, 10.0)

    corner = m4.multiply_vector(p, (1.0, 1.0, 1.0, 1.0))
    np.testing.assert_allclose(corner, [1.0, 1.0, -1.0, 1.0], rtol=0.0, atol=1e-12)

    center = m4.multiply_vector(p, (0.0, 0.0, 5.5, 1.0))
    np.testing.assert_allclose(center, [0.0, 0.0, 0.0, 1.0], rtol=0.0, atol=1e-12)

    far_corner = m4.multiply_vector(p, (-1.0, -1.0, 10.0, 1.0))
    np.testing.assert_allclose(far_corner, [-1.0, -1.0, 1.0, 1.0], rtol=0.0, atol=1e-12)


def test_orthographic_frustum_translates_before_scaling() -> None:
    p = m4.orthographic_frustum(0.0, 4.0, 0.0, 2.0, 1.0, 3.0)
    expected = m4.multiply(
        m4.scaling((0.5, 1.0, 1.0)),
        m4.translation((-2.0, -1.0, -2.0)),
    )
    np.testing.assert_allclose(p, expected, rtol=0.0, atol=1e-12)


def test_orthographic_projection_derives_frustum_from_fov() -> None:
    fov, aspect, near, far = math.pi / 2, 2.0, 1.0, 3.0
    p = m4.orthographic_projection(fov, aspect, near, far)
    np.testing.assert_allclose(
        p,
        m4.orthographic_frustum(-2.0, 2.0, -1.0, 1.0, near, far),
        rtol=0.0,
        atol=1e-12,
    )
    corner = m4.multiply_vector(p, (2.0, 1.0, 1.0, 1.0))
    np.testing.assert_allclose(corner, [1.0, 1.0, -1.0, 1.0], rtol=0.0, atol=1e-12)


def test_look_at_along_z_is_translation() -> None:
    m = m4.look_at((0.0, 0.0, 5.0), (0.0, 0.0, 0.0))
    np.testing.assert_allclose(m, m4.translation((0.0, 0.0, 5.0)), rtol=0.0, atol=1e-12)


def test_look_at_forward_points_to_target() -> None:
    camera = (5.0, 2.0, -3.0)
    target = (0.0, 0.5, 1.0)
    m = m4.look_at(camera, target)

    forward = m4.multiply_vector(m, (0.0, 0.0, -1.0, 0.0), perspective_divide=False)
    expected = v3.normalize(v3.subtract(target, camera))
    np.testing.assert_allclose(forward[:3], expected, rtol=0.0, atol=1e-12)

    block = np.asarray(m)[:3, :3]
    np.testing.assert_allclose(block.T @ block, np.eye(3), rtol=0.0, atol=1e-12)
    assert m4.determinant(m) == pytest.approx(1.0)
    np.testing.assert_array_equal(np.asarray(m)[3], [0.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(np.asarray(m)[:3, 3], camera)


def test_inverted_look_at_puts_target_on_negative_z() -> None:
    camera = (3.0, 1.0, 4.0)
    target = (0.0, 1.0, 0.0)
    world_to_camera = m4.invert(m4.look_at(camera, target))
    out = m4.multiply_vector(world_to_camera, (*target, 1.0))
    np.testing.assert_allclose(out, [0.0, 0.0, -5.0, 1.0], rtol=0.0, atol=1e-12)


def test_look_at_parallel_to_world_up_is_degenerate() -> None:
    m = m4.look_at((0.0, 5.0, 0.0), (0.0, 0.0, 0.0))
    assert np.isnan(np.asarray(m)).any()
