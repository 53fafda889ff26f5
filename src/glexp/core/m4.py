# どこで: `src/glexp/core/m4.py`。
# 何を: 4x4 行列の生成・合成・逆行列・行列式・カメラ/投影行列を純粋関数として提供する。
# なぜ: model -> world -> camera -> clip の変換列を描画層から独立して組み立てるため。

"""4x4 行列（Matrix4）の純粋関数群。

規約
----
- 行列は行優先 `m[row, col]` で、列ベクトルに左から掛ける（`v' = M v`）。
- `multiply_piped(A, B, C)` は `C B A` を返す（先頭の引数が最初に適用される）。
- 角度はすべてラジアン。
"""

from __future__ import annotations

import json
import math
from typing import Any

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from glexp.core import v3, v4
from glexp.core.errors import SingularMatrixError
from glexp.core.types import Matrix4, Vector4, as_matrix4, as_vector3, as_vector4, freeze

_WORLD_UP = (0.0, 1.0, 0.0)


def _new(rows: list[list[float]]) -> Matrix4:
    return freeze(np.array(rows, dtype=np.float64))


def identity() -> Matrix4:
    return _new(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def scale(m: Any, s: float) -> Matrix4:
    """16 要素すべてを `s` 倍した行列を返す（`scaling` とは別物）。"""
    return freeze(as_matrix4(m) * np.float64(s))


def transpose(m: Any) -> Matrix4:
    mm = as_matrix4(m)
    out = np.empty((4, 4), dtype=np.float64)
    for i in range(4):
        for j in range(4):
            out[j, i] = mm[i, j]
    return freeze(out)


def multiply(m: Any, n: Any) -> Matrix4:
    """行列積 `m n` を返す。

    各要素は `m` の i 行と `n` の j 列（= `transpose(n)` の j 行）の内積。
    """
    mm = as_matrix4(m)
    nt = transpose(n)
    out = np.empty((4, 4), dtype=np.float64)
    for i in range(4):
        for j in range(4):
            out[i, j] = v4.dot(mm[i], nt[j])
    return freeze(out)


def multiply_piped(*matrices: Any) -> Matrix4:
    """行列を適用順（左から右）に合成する。

    `multiply_piped(A, B, C)` は `C B A` を返す。ベクトルには A が最初に作用する。
    引数なしのときは単位行列を返す。

    Examples
    --------
    平行移動してから拡大する:

    >>> m = multiply_piped(translation((1, 0, 0)), scaling((2, 2, 2)))
    >>> multiply_vector(m, (1, 0, 0, 1)).tolist()
    [4.0, 0.0, 0.0, 1.0]
    """
    product = identity()
    for matrix in matrices:
        product = multiply(matrix, product)
    return product


def multiply_vector(m: Any, v: Any, perspective_divide: bool = True) -> Vector4:
    """同次座標ベクトルに行列を掛けた結果を返す。

    Parameters
    ----------
    m : Matrix4
        変換行列。
    v : Vector4
        同次座標ベクトル。
    perspective_divide : bool, default True
        True かつ結果の w が 1 でないとき、4 成分すべてを w で割る。

    Notes
    -----
    w == 0 で除算すると成分は ±inf / nan になる（無限遠点）。
    例外にはせず、そのまま呼び出し側へ返す。
    """
    mm = as_matrix4(m)
    vv = as_vector4(v)
    product = np.array([v4.dot(mm[i], vv) for i in range(4)], dtype=np.float64)

    w = product[3]
    if not perspective_divide or w == 1.0:
        return freeze(product)
    with np.errstate(divide="ignore", invalid="ignore"):
        inv = np.float64(1.0) / w
    return v4.scale(inv, product)


@njit(cache=True, error_model="numpy")
def _transform_points(points: np.ndarray, mat: np.ndarray, divide: bool) -> np.ndarray:
    n = points.shape[0]
    out = np.empty((n, 4), dtype=np.float64)
    for i in range(n):
        x = points[i, 0]
        y = points[i, 1]
        z = points[i, 2]
        w = points[i, 3]
        for r in range(4):
            out[i, r] = mat[r, 0] * x + mat[r, 1] * y + mat[r, 2] * z + mat[r, 3] * w
        if divide:
            ow = out[i, 3]
            if ow != 1.0:
                inv = 1.0 / ow
                for r in range(4):
                    out[i, r] = out[i, r] * inv
    return out


def transform_points(m: Any, points: Any, perspective_divide: bool = True) -> np.ndarray:
    """点列に `multiply_vector` を一括適用する。

    Parameters
    ----------
    m : Matrix4
        変換行列。
    points : array-like
        shape (N, 3) または (N, 4)。3 列のときは w=1 を補完する。
    perspective_divide : bool, default True
        行ごとに `multiply_vector` と同じ規則で w 除算する。

    Returns
    -------
    np.ndarray
        float64 shape (N, 4) の読み取り専用配列。
    """
    mm = np.ascontiguousarray(as_matrix4(m))
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] not in (3, 4):
        raise ValueError(f"points は shape (N,3) または (N,4) である必要がある: got={pts.shape}")
    if pts.shape[1] == 3:
        w = np.ones((pts.shape[0], 1), dtype=np.float64)
        pts = np.concatenate([pts, w], axis=1)
    pts = np.ascontiguousarray(pts)
    if pts.shape[0] == 0:
        return freeze(np.zeros((0, 4), dtype=np.float64))
    return freeze(_transform_points(pts, mm, bool(perspective_divide)))


#
# 線形変換
#


def scaling(s: Any) -> Matrix4:
    """各軸を独立に拡大縮小する対角行列を返す。"""
    sx, sy, sz = (float(x) for x in as_vector3(s))
    return _new(
        [
            [sx, 0.0, 0.0, 0.0],
            [0.0, sy, 0.0, 0.0],
            [0.0, 0.0, sz, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


# 以下の回転はいずれも、正の軸側から原点を見て反時計回りが正。


def rotation_x(a: float) -> Matrix4:
    c = math.cos(a)
    s = math.sin(a)
    return _new(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_y(a: float) -> Matrix4:
    c = math.cos(a)
    s = math.sin(a)
    return _new(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_z(a: float) -> Matrix4:
    c = math.cos(a)
    s = math.sin(a)
    return _new(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


#
# アフィン変換
#


def translation(t: Any) -> Matrix4:
    """最終列の xyz に `t` を置いた平行移動行列を返す。"""
    tx, ty, tz = (float(x) for x in as_vector3(t))
    return _new(
        [
            [1.0, 0.0, 0.0, tx],
            [0.0, 1.0, 0.0, ty],
            [0.0, 0.0, 1.0, tz],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


#
# 行列式・逆行列
#


def _sub_determinants(mm: np.ndarray) -> tuple[float, ...]:
    """上 2 行・下 2 行それぞれの 2x2 小行列式 b00..b11 を返す。"""
    a00, a01, a02, a03 = (float(x) for x in mm[0])
    a10, a11, a12, a13 = (float(x) for x in mm[1])
    a20, a21, a22, a23 = (float(x) for x in mm[2])
    a30, a31, a32, a33 = (float(x) for x in mm[3])
    return (
        a00 * a11 - a01 * a10,
        a00 * a12 - a02 * a10,
        a00 * a13 - a03 * a10,
        a01 * a12 - a02 * a11,
        a01 * a13 - a03 * a11,
        a02 * a13 - a03 * a12,
        a20 * a31 - a21 * a30,
        a20 * a32 - a22 * a30,
        a20 * a33 - a23 * a30,
        a21 * a32 - a22 * a31,
        a21 * a33 - a23 * a31,
        a22 * a33 - a23 * a32,
    )


def _det_from(b: tuple[float, ...]) -> float:
    b00, b01, b02, b03, b04, b05, b06, b07, b08, b09, b10, b11 = b
    return b00 * b11 - b01 * b10 + b02 * b09 + b03 * b08 - b04 * b07 + b05 * b06


def determinant(m: Any) -> float:
    """4x4 行列式を 2x2 小行列式の余因子展開で返す。"""
    return _det_from(_sub_determinants(as_matrix4(m)))


def invert(m: Any) -> Matrix4:
    """余因子行列 / 行列式 による逆行列を返す。

    Raises
    ------
    SingularMatrixError
        行列式が 0 または非有限の場合。
    """
    mm = as_matrix4(m)
    b = _sub_determinants(mm)
    det = _det_from(b)
    if det == 0.0 or not math.isfinite(det):
        raise SingularMatrixError(det)

    b00, b01, b02, b03, b04, b05, b06, b07, b08, b09, b10, b11 = b
    a00, a01, a02, a03 = (float(x) for x in mm[0])
    a10, a11, a12, a13 = (float(x) for x in mm[1])
    a20, a21, a22, a23 = (float(x) for x in mm[2])
    a30, a31, a32, a33 = (float(x) for x in mm[3])

    inv = 1.0 / det
    out = [
        [
            (a11 * b11 - a12 * b10 + a13 * b09) * inv,
            (a02 * b10 - a01 * b11 - a03 * b09) * inv,
            (a31 * b05 - a32 * b04 + a33 * b03) * inv,
            (a22 * b04 - a21 * b05 - a23 * b03) * inv,
        ],
        [
            (a12 * b08 - a10 * b11 - a13 * b07) * inv,
            (a00 * b11 - a02 * b08 + a03 * b07) * inv,
            (a32 * b02 - a30 * b05 - a33 * b01) * inv,
            (a20 * b05 - a22 * b02 + a23 * b01) * inv,
        ],
        [
            (a10 * b10 - a11 * b08 + a13 * b06) * inv,
            (a01 * b08 - a00 * b10 - a03 * b06) * inv,
            (a30 * b04 - a31 * b02 + a33 * b00) * inv,
            (a21 * b02 - a20 * b04 - a23 * b00) * inv,
        ],
        [
            (a11 * b07 - a10 * b09 - a12 * b06) * inv,
            (a00 * b09 - a01 * b07 + a02 * b06) * inv,
            (a31 * b01 - a30 * b03 - a32 * b00) * inv,
            (a20 * b03 - a21 * b01 + a22 * b00) * inv,
        ],
    ]
    return _new(out)


def normal_matrix(m: Any) -> Matrix4:
    """法線用の変換行列 `transpose(invert(m))` を返す。

    非一様スケールを含む model 行列でも法線が面に垂直なまま保たれる。
    """
    return transpose(invert(m))


#
# カメラ・投影
#


def look_at(camera_position: Any, target_position: Any) -> Matrix4:
    """カメラ空間 -> ワールド空間の姿勢行列を返す。

    カメラはローカル -Z 方向を向く。列は x 軸, y 軸, z 軸, カメラ位置。

    Notes
    -----
    視線がワールド上方向 (0,1,0) と平行だと外積が零ベクトルになり、
    要素は nan になる（例外にはしない）。
    """
    cam = as_vector3(camera_position)
    z_axis = v3.normalize(v3.subtract(cam, target_position))
    x_axis = v3.normalize(v3.cross(_WORLD_UP, z_axis))
    y_axis = v3.normalize(v3.cross(z_axis, x_axis))
    return _new(
        [
            [x_axis[0], y_axis[0], z_axis[0], cam[0]],
            [x_axis[1], y_axis[1], z_axis[1], cam[1]],
            [x_axis[2], y_axis[2], z_axis[2], cam[2]],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def orthographic_frustum(
    left: float,
    right: float,
    bottom: float,
    top: float,
    near: float,
    far: float,
) -> Matrix4:
    """明示的な frustum 座標から正射影行列を返す。

    frustum 中心を原点へ平行移動してから、各軸を [-1, 1] に拡大縮小する。
    """
    w = abs(right - left)
    h = abs(top - bottom)
    d = abs(far - near)

    to_center = translation(
        (
            -(left + right) / 2,
            -(bottom + top) / 2,
            -(near + far) / 2,
        )
    )
    to_ndc = scaling((2 / w, 2 / h, 2 / d))
    return multiply_piped(to_center, to_ndc)


def orthographic_projection(fov: float, aspect: float, near: float, far: float) -> Matrix4:
    """垂直画角 `fov` から正射影行列を返す。

    near 面の半分の高さ `tan(fov/2) * near` と、それに `aspect` を掛けた半幅で
    frustum を決める。
    """
    top = math.tan(fov / 2) * near
    right = top * aspect
    return orthographic_frustum(-right, right, -top, top, near, far)


def perspective_projection(fov: float, aspect: float, near: float, far: float) -> Matrix4:
    """透視投影行列を返す。

    Parameters
    ----------
    fov : float
        垂直画角 [rad]。
    aspect : float
        ビューポートの幅 / 高さ。
    near, far : float
        near/far クリップ面までの距離（正の値）。

    Notes
    -----
    右手系・カメラは -Z 方向を向く・NDC の深度は [-1, 1]（OpenGL 規約）。
    z=-near は w 除算後に -1、z=-far は +1 になる。
    """
    theta = fov / 2
    # 1 / tan(theta) と等価。
    s = math.tan(math.pi * 0.5 - theta)
    r = 1.0 / (near - far)
    return _new(
        [
            [s / aspect, 0.0, 0.0, 0.0],
            [0.0, s, 0.0, 0.0],
            [0.0, 0.0, (near + far) * r, 2 * near * far * r],
            [0.0, 0.0, -1.0, 0.0],
        ]
    )


#
# 表示・転送
#


def format_matrix(m: Any) -> str:
    """1 行 1 row の文字列表現を返す（デバッグログ用）。"""
    mm = as_matrix4(m)
    rows = [json.dumps([float(x) for x in mm[i]]) for i in range(4)]
    return "[\n" + ",\n".join(f"  {row}" for row in rows) + "\n]"


def flat(m: Any) -> np.ndarray:
    """行優先で平坦化した float32 shape (16,) の配列を返す。

    Notes
    -----
    uniform への転送時の転置フラグは描画層の責務。
    """
    return freeze(np.ascontiguousarray(as_matrix4(m), dtype=np.float32).reshape(16).copy())


__all__ = [
    "determinant",
    "flat",
    "format_matrix",
    "identity",
    "invert",
    "look_at",
    "multiply",
    "multiply_piped",
    "multiply_vector",
    "normal_matrix",
    "orthographic_frustum",
    "orthographic_projection",
    "perspective_projection",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "scale",
    "scaling",
    "transform_points",
    "translation",
    "transpose",
]
