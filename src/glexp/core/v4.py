"""Vector4（同次座標ベクトル）の純粋関数群。"""

from __future__ import annotations

from typing import Any

import numpy as np

from glexp.core.types import Vector3, Vector4, as_vector4, freeze


def zero() -> Vector4:
    """同次座標の原点 `(0, 0, 0, 1)` を返す。

    Notes
    -----
    零ベクトルではなく「点としての原点」（w=1）である。
    """
    return freeze(np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64))


def dot(a: Any, b: Any) -> float:
    va = as_vector4(a)
    vb = as_vector4(b)
    return float(va[0] * vb[0] + va[1] * vb[1] + va[2] * vb[2] + va[3] * vb[3])


def scale(s: float, v: Any) -> Vector4:
    """各要素を `s` 倍したベクトルを返す（inf/nan はそのまま伝播する）。"""
    with np.errstate(invalid="ignore", over="ignore"):
        return freeze(as_vector4(v) * np.float64(s))


def to_vector3(v: Any) -> Vector3:
    """xyz 成分だけを取り出す（w による除算はしない）。"""
    vv = as_vector4(v)
    return freeze(vv[:3].copy())


__all__ = ["dot", "scale", "to_vector3", "zero"]
