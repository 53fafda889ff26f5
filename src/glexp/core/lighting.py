"""単一の平行光源による陰影（Lambert 項）。"""

from __future__ import annotations

from typing import Any, Sequence

from glexp.core import v3
from glexp.core.mesh import RGBA

AMBIENT = 0.5
"""光が当たらない面にも残る色の割合。"""


def directional_intensity(normal: Any, light_direction: Any) -> float:
    """法線と光の向きから拡散光の強さ（0..1）を返す。

    Parameters
    ----------
    normal : Vector3
        面の法線。長さは任意（内部で正規化する）。
    light_direction : Vector3
        光が進む向き。正規化しない（反転だけして法線と内積を取る）。

    Notes
    -----
    法線が零ベクトルのときは nan が伝播し、clamp の結果は 0 になる。
    """
    n = v3.normalize(normal)
    reversed_light = v3.scale(-1.0, light_direction)
    d = v3.dot(n, reversed_light)
    if not d > 0.0:
        return 0.0
    return 1.0 if d > 1.0 else d


def shade(color: Sequence[float], intensity: float) -> RGBA:
    """`rgb * 0.5 + rgb * intensity * 0.5` を返す（alpha は維持）。"""
    r, g, b, a = (float(c) for c in color)
    k = AMBIENT + float(intensity) * (1.0 - AMBIENT)
    return (r * k, g * k, b * k, a)


__all__ = ["AMBIENT", "directional_intensity", "shade"]
