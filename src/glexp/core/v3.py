"""Vector3（3 次元ベクトル）の純粋関数群。

すべての関数は入力を変更せず、新しい読み取り専用配列を返す。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from glexp.core.types import Vector3, Vector4, as_vector3, freeze


def dot(a: Any, b: Any) -> float:
    """要素積の総和を返す。"""
    va = as_vector3(a)
    vb = as_vector3(b)
    return float(va[0] * vb[0] + va[1] * vb[1] + va[2] * vb[2])


def scale(s: float, v: Any) -> Vector3:
    """各要素を `s` 倍したベクトルを返す。"""
    with np.errstate(invalid="ignore", over="ignore"):
        return freeze(as_vector3(v) * np.float64(s))


def magnitude(v: Any) -> float:
    """ユークリッドノルム `sqrt(x^2 + y^2 + z^2)` を返す。"""
    vv = as_vector3(v)
    return float(np.sqrt(vv[0] * vv[0] + vv[1] * vv[1] + vv[2] * vv[2]))


def normalize(v: Any) -> Vector3:
    """長さ 1 に正規化したベクトルを返す。

    Notes
    -----
    前提条件: `magnitude(v) != 0`。
    零ベクトルでは 1/0 = inf を掛けるため、結果は nan になる（例外は送出しない）。
    """
    with np.errstate(divide="ignore"):
        inv = np.float64(1.0) / np.float64(magnitude(v))
    return scale(inv, v)


def add(a: Any, b: Any) -> Vector3:
    return freeze(as_vector3(a) + as_vector3(b))


def subtract(a: Any, b: Any) -> Vector3:
    """`a - b` を返す。"""
    return freeze(as_vector3(a) - as_vector3(b))


def cross(v: Any, w: Any) -> Vector3:
    """右手系の外積 `v x w` を返す。"""
    a = as_vector3(v)
    b = as_vector3(w)
    out = np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=np.float64,
    )
    return freeze(out)


def to_vector4(v: Any, w: float = 1.0) -> Vector4:
    """同次座標へ持ち上げた Vector4 を返す（w=1 は点、w=0 は方向）。"""
    vv = as_vector3(v)
    return freeze(np.array([vv[0], vv[1], vv[2], float(w)], dtype=np.float64))


__all__ = [
    "add",
    "cross",
    "dot",
    "magnitude",
    "normalize",
    "scale",
    "subtract",
    "to_vector4",
]
