# src/glexp/core/mesh.py
# 三角形メッシュ（頂点・インデックス・法線）のモデルと立方体ジオメトリ。

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

RGBA = tuple[float, float, float, float]

_FACE_PALETTE: tuple[RGBA, ...] = (
    (0.8, 0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0),
    (0.0, 0.0, 1.0, 1.0),
    (0.5, 0.5, 0.0, 1.0),
    (0.5, 0.0, 0.5, 1.0),
    (0.0, 0.5, 0.5, 1.0),
)


@dataclass(frozen=True, slots=True)
class Mesh:
    """三角形リストで表したメッシュ。

    Parameters
    ----------
    vertices : np.ndarray
        float64 型 shape (N, 3) の頂点配列。
    indices : np.ndarray
        int32 型 shape (M,) の三角形リスト。M は 3 の倍数。
    normals : np.ndarray
        float64 型 shape (N, 3) の頂点法線。法線なしは shape (0, 3)。

    Notes
    -----
    配列は writeable=False で保持する。
    反時計回りに並んだ 3 頂点を表面とする。
    """

    vertices: np.ndarray
    indices: np.ndarray
    normals: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float64))

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float64)
        indices = np.array(self.indices, dtype=np.int32)
        normals = np.array(self.normals, dtype=np.float64)

        if vertices.size == 0:
            vertices = np.zeros((0, 3), dtype=np.float64)
        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise ValueError("vertices は shape (N,3) の 2 次元配列である必要がある")
        if indices.ndim != 1:
            raise ValueError("indices は 1 次元配列である必要がある")
        if indices.size % 3 != 0:
            raise ValueError("indices の長さは 3 の倍数である必要がある")
        if indices.size and (indices.min() < 0 or indices.max() >= vertices.shape[0]):
            raise ValueError("indices が頂点数の範囲外を参照している")
        if normals.size == 0:
            normals = np.zeros((0, 3), dtype=np.float64)
        elif normals.shape != vertices.shape:
            raise ValueError("normals は vertices と同じ shape である必要がある")

        vertices.setflags(write=False)
        indices.setflags(write=False)
        normals.setflags(write=False)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "normals", normals)

    @property
    def has_normals(self) -> bool:
        return self.normals.shape[0] == self.vertices.shape[0] and self.normals.shape[0] > 0

    def triangles(self) -> np.ndarray:
        """三角形ごとの頂点インデックス（shape (T, 3)）を返す。"""
        return self.indices.reshape(-1, 3)


def cube() -> Mesh:
    """[-1, 1]^3 の立方体（24 頂点・12 三角形）を返す。

    右手系（+z が手前）で、面の順序は 前・後・上・下・右・左。
    各面 4 頂点に同じ外向き法線を持たせる。
    """
    vertices = [
        [-1.0, -1.0, +1.0], [+1.0, -1.0, +1.0], [+1.0, +1.0, +1.0], [-1.0, +1.0, +1.0],  # 前
        [-1.0, -1.0, -1.0], [-1.0, +1.0, -1.0], [+1.0, +1.0, -1.0], [+1.0, -1.0, -1.0],  # 後
        [-1.0, +1.0, -1.0], [-1.0, +1.0, +1.0], [+1.0, +1.0, +1.0], [+1.0, +1.0, -1.0],  # 上
        [-1.0, -1.0, -1.0], [+1.0, -1.0, -1.0], [+1.0, -1.0, +1.0], [-1.0, -1.0, +1.0],  # 下
        [+1.0, -1.0, -1.0], [+1.0, +1.0, -1.0], [+1.0, +1.0, +1.0], [+1.0, -1.0, +1.0],  # 右
        [-1.0, -1.0, -1.0], [-1.0, -1.0, +1.0], [-1.0, +1.0, +1.0], [-1.0, +1.0, -1.0],  # 左
    ]  # fmt: skip
    face_normals = [
        [0.0, 0.0, 1.0],
        [0.0, 0.0, -1.0],
        [0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0],
        [1.0, 0.0, 0.0],
        [-1.0, 0.0, 0.0],
    ]
    normals = [n for n in face_normals for _ in range(4)]

    indices: list[int] = []
    for face in range(6):
        base = face * 4
        indices.extend([base, base + 1, base + 2, base, base + 2, base + 3])

    return Mesh(vertices=vertices, indices=indices, normals=normals)


def face_palette() -> tuple[RGBA, ...]:
    """面ごとの既定 6 色パレットを返す。"""
    return _FACE_PALETTE


def face_colors(mesh: Mesh, palette: Sequence[RGBA] | None = None) -> np.ndarray:
    """頂点 i に `palette[(i // 4) % len(palette)]` を割り当てた RGBA 配列を返す。

    Returns
    -------
    np.ndarray
        float64 型 shape (N, 4)。
    """
    colors = _FACE_PALETTE if palette is None else tuple(palette)
    if not colors:
        raise ValueError("palette は 1 色以上を含む必要がある")
    n = mesh.vertices.shape[0]
    out = np.array([colors[(i // 4) % len(colors)] for i in range(n)], dtype=np.float64)
    if n == 0:
        out = np.zeros((0, 4), dtype=np.float64)
    out.setflags(write=False)
    return out


__all__ = ["Mesh", "RGBA", "cube", "face_colors", "face_palette"]
