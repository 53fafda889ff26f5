# どこで: `src/glexp/core/scene.py`。
# 何を: カメラ設定と local -> world -> clip の変換列を組み立てるヘルパを提供する。
# なぜ: 立方体を並べる各シーンで同じ合成手順（multiply_piped の順序）を共有するため。

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Literal

from glexp.core import m4
from glexp.core.types import Matrix4, as_matrix4, as_vector3

_logger = logging.getLogger(__name__)

ProjectionKind = Literal["perspective", "orthographic"]
_PROJECTION_KINDS = ("perspective", "orthographic")


@dataclass(frozen=True, slots=True)
class Camera:
    """投影パラメータ。

    Parameters
    ----------
    fov : float
        垂直画角 [rad]。
    near, far : float
        クリップ面までの距離（正、near < far）。
    kind : {"perspective", "orthographic"}
        投影の種類。
    """

    fov: float = 0.15 * math.pi
    near: float = 1.0
    far: float = 1000.0
    kind: ProjectionKind = "perspective"

    def __post_init__(self) -> None:
        if self.kind not in _PROJECTION_KINDS:
            raise ValueError(f"未対応の投影種別です: got={self.kind!r}")
        if not (0.0 < float(self.fov) < math.pi):
            raise ValueError(f"fov は (0, pi) の範囲である必要がある: got={self.fov!r}")
        if float(self.near) <= 0.0 or float(self.far) <= 0.0:
            raise ValueError("near/far は正の値である必要がある")
        if float(self.far) <= float(self.near):
            raise ValueError(f"far は near より大きい必要がある: near={self.near!r}, far={self.far!r}")

    def projection(self, aspect: float) -> Matrix4:
        """camera -> clip の投影行列を返す。"""
        if aspect <= 0:
            raise ValueError(f"aspect は正の値である必要がある: got={aspect!r}")
        if self.kind == "orthographic":
            return m4.orthographic_projection(self.fov, aspect, self.near, self.far)
        return m4.perspective_projection(self.fov, aspect, self.near, self.far)


def local_to_world(
    position: Any,
    *,
    angles: tuple[float, float, float] = (0.0, 0.0, 0.0),
    scale: float = 1.0,
) -> Matrix4:
    """モデルをワールドに配置する行列を返す。

    拡大 -> X 回転 -> Y 回転 -> Z 回転 -> 平行移動 の順に適用する。
    """
    ax, ay, az = (float(a) for a in angles)
    s = float(scale)
    return m4.multiply_piped(
        m4.scaling((s, s, s)),
        m4.rotation_x(ax),
        m4.rotation_y(ay),
        m4.rotation_z(az),
        m4.translation(as_vector3(position)),
    )


def orbit_camera(distance: float, angle: float) -> Matrix4:
    """z=-distance にある物体を中心に Y 軸まわりで回り込む world -> camera 行列を返す。"""
    d = float(distance)
    return m4.multiply_piped(
        m4.translation((0.0, 0.0, d)),
        m4.rotation_y(angle),
        m4.translation((0.0, 0.0, -d)),
    )


def world_to_clip(world_to_camera: Any, camera_to_clip: Any) -> Matrix4:
    return m4.multiply_piped(world_to_camera, camera_to_clip)


@dataclass(frozen=True, slots=True)
class Transforms:
    """1 物体を描くための変換行列の組。"""

    local_to_world: Matrix4
    local_to_clip: Matrix4

    def __post_init__(self) -> None:
        object.__setattr__(self, "local_to_world", as_matrix4(self.local_to_world))
        object.__setattr__(self, "local_to_clip", as_matrix4(self.local_to_clip))

    @property
    def normal_matrix(self) -> Matrix4:
        """local -> world の逆転置（法線用）。特異なら SingularMatrixError。"""
        return m4.normal_matrix(self.local_to_world)


def transforms(local_to_world_matrix: Any, world_to_clip_matrix: Any) -> Transforms:
    """local -> world と world -> clip から Transforms を作る。"""
    local_to_clip = m4.multiply_piped(local_to_world_matrix, world_to_clip_matrix)
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("local_to_clip=%s", m4.format_matrix(local_to_clip))
    return Transforms(local_to_world=local_to_world_matrix, local_to_clip=local_to_clip)


__all__ = [
    "Camera",
    "ProjectionKind",
    "Transforms",
    "local_to_world",
    "orbit_camera",
    "transforms",
    "world_to_clip",
]
