"""
どこで: `src/glexp/core/raster.py`。
何を: メッシュを clip/NDC/画面座標へ投影し、可視三角形を奥から手前の順に列挙する。
なぜ: GPU なしでも変換列の結果を SVG などへ書き出せるようにするため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from glexp.core import m4
from glexp.core.lighting import directional_intensity, shade
from glexp.core.mesh import RGBA, Mesh, face_colors
from glexp.core.scene import Transforms

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProjectedFace:
    """画面座標へ投影された 1 三角形。

    Parameters
    ----------
    points : np.ndarray
        float64 型 shape (3, 2) の画素座標（原点は左上、y は下向き）。
    depth : float
        3 頂点の NDC z の平均。大きいほど奥。
    color : RGBA
        陰影適用後の塗り色。
    """

    points: np.ndarray
    depth: float
    color: RGBA


def viewport(ndc_xy: Any, canvas_size: tuple[int, int]) -> np.ndarray:
    """NDC の xy（[-1, 1]）を画素座標へ変換して返す。

    Returns
    -------
    np.ndarray
        float64 型 shape (N, 2)。y は上下反転する。
    """
    w, h = canvas_size
    if w <= 0 or h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")
    xy = np.asarray(ndc_xy, dtype=np.float64).reshape(-1, 2)
    out = np.empty_like(xy)
    out[:, 0] = (xy[:, 0] + 1.0) * 0.5 * float(w)
    out[:, 1] = (1.0 - xy[:, 1]) * 0.5 * float(h)
    return out


def _signed_area2(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    return float((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))


def project_mesh(
    mesh: Mesh,
    transforms: Transforms,
    canvas_size: tuple[int, int],
    *,
    colors: Any = None,
    light_direction: Any = None,
) -> list[ProjectedFace]:
    """メッシュを投影し、可視な三角形を奥から手前の順で返す。

    Parameters
    ----------
    mesh : Mesh
        描画対象。
    transforms : Transforms
        local -> world / local -> clip の行列。
    canvas_size : tuple[int, int]
        出力キャンバスの画素寸法。
    colors : array-like or None, optional
        頂点ごとの RGBA（shape (N, 4)）。None なら面ごとの既定パレット。
        三角形の色は先頭頂点の色を使う。
    light_direction : Vector3 or None, optional
        平行光源の向き。None なら陰影なし。法線を持たないメッシュでは無視する。

    Notes
    -----
    - w <= 0 の頂点、または NDC z が [-1, 1] の外にある頂点を含む三角形は捨てる。
    - NDC 上で反時計回りの三角形を表面とし、裏面は捨てる。
    """
    vertex_colors = face_colors(mesh) if colors is None else np.asarray(colors, dtype=np.float64)
    if vertex_colors.shape != (mesh.vertices.shape[0], 4):
        raise ValueError("colors は shape (N,4) である必要がある")

    clip = m4.transform_points(transforms.local_to_clip, mesh.vertices, perspective_divide=False)
    w = clip[:, 3]
    visible = w > 0.0
    ndc = np.zeros((clip.shape[0], 3), dtype=np.float64)
    ndc[visible] = clip[visible, :3] / w[visible, None]
    screen = viewport(ndc[:, :2], canvas_size)

    normals_world: np.ndarray | None = None
    if light_direction is not None and mesh.has_normals:
        normal3 = np.asarray(transforms.normal_matrix)[:3, :3]
        normals_world = mesh.normals @ normal3.T

    faces: list[ProjectedFace] = []
    clipped = 0
    culled = 0
    for tri in mesh.triangles():
        i0, i1, i2 = (int(i) for i in tri)
        if not (visible[i0] and visible[i1] and visible[i2]):
            clipped += 1
            continue
        z = ndc[[i0, i1, i2], 2]
        if np.any(z < -1.0) or np.any(z > 1.0):
            clipped += 1
            continue
        if _signed_area2(ndc[i0], ndc[i1], ndc[i2]) <= 0.0:
            culled += 1
            continue

        color: RGBA = tuple(float(c) for c in vertex_colors[i0])  # type: ignore[assignment]
        if normals_world is not None:
            intensity = directional_intensity(normals_world[i0], light_direction)
            color = shade(color, intensity)

        faces.append(
            ProjectedFace(
                points=screen[[i0, i1, i2]].copy(),
                depth=float(z.mean()),
                color=color,
            )
        )

    faces.sort(key=lambda f: f.depth, reverse=True)
    _logger.debug("projected faces: emitted=%d clipped=%d culled=%d", len(faces), clipped, culled)
    return faces


@dataclass(frozen=True, slots=True)
class Drawable:
    """シーンに置く 1 物体（メッシュ・変換・頂点色）。"""

    mesh: Mesh
    transforms: Transforms
    colors: Any = None


def project_scene(
    drawables: Sequence[Drawable],
    canvas_size: tuple[int, int],
    *,
    light_direction: Any = None,
) -> list[ProjectedFace]:
    """複数物体を投影し、全三角形をまとめて奥から手前の順で返す。"""
    faces: list[ProjectedFace] = []
    for drawable in drawables:
        faces.extend(
            project_mesh(
                drawable.mesh,
                drawable.transforms,
                canvas_size,
                colors=drawable.colors,
                light_direction=light_direction,
            )
        )
    faces.sort(key=lambda f: f.depth, reverse=True)
    return faces


__all__ = ["Drawable", "ProjectedFace", "project_mesh", "project_scene", "viewport"]
