"""
どこで: `src/glexp/export/svg.py`。
何を: 投影済みの三角形列を塗りつぶしポリゴンの SVG として保存する関数を提供する。
なぜ: GPU/ウィンドウなしで変換列の結果を確認できる出力を用意するため。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from glexp.core.raster import Drawable, ProjectedFace, project_scene
from glexp.core.runtime_config import RuntimeConfig, runtime_config

_logger = logging.getLogger(__name__)

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def rgb01_to_rgb255(rgb: tuple[float, float, float]) -> tuple[int, int, int]:
    """0..1 float の RGB を 0..255 int の RGB に変換して返す。"""

    out: list[int] = []
    for v in rgb:
        fv = float(v)
        fv = 0.0 if fv < 0.0 else 1.0 if fv > 1.0 else fv
        out.append(int(round(fv * 255.0)))
    return int(out[0]), int(out[1]), int(out[2])


def _rgb01_to_hex(rgb01: tuple[float, float, float]) -> str:
    r, g, b = rgb01_to_rgb255(rgb01)
    return f"#{r:02X}{g:02X}{b:02X}"


def _polygon_points(face: ProjectedFace, *, decimals: int) -> str:
    return " ".join(
        f"{_fmt(x, decimals=decimals)},{_fmt(y, decimals=decimals)}" for x, y in face.points
    )


def export_svg(
    faces: Sequence[ProjectedFace],
    path: str | Path,
    *,
    canvas_size: tuple[int, int],
    background_color: tuple[float, float, float] | None = None,
    decimals: int = _FLOAT_DECIMALS,
) -> Path:
    """三角形列を SVG として保存する。

    Parameters
    ----------
    faces : Sequence[ProjectedFace]
        奥から手前の順に並んだ三角形列（この順に描く）。
    path : str or Path
        出力先パス。親ディレクトリは作成する。
    canvas_size : tuple[int, int]
        キャンバスの画素寸法。
    background_color : tuple[float, float, float] or None, optional
        背景色（0..1 RGB）。None なら背景を描かない。
    decimals : int, default 3
        座標の小数桁数。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が正でない場合。
    """
    _path = Path(path)
    canvas_w, canvas_h = canvas_size
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        (
            f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {int(canvas_w)} {int(canvas_h)}" '
            f'width="{int(canvas_w)}" height="{int(canvas_h)}">'
        )
    )
    if background_color is not None:
        lines.append(
            f'  <rect x="0" y="0" width="{int(canvas_w)}" height="{int(canvas_h)}" '
            f'fill="{_rgb01_to_hex(background_color)}" />'
        )

    for face in faces:
        r, g, b, a = face.color
        fill = _rgb01_to_hex((r, g, b))
        attrs = f'points="{_polygon_points(face, decimals=decimals)}" fill="{fill}"'
        if a < 1.0:
            attrs += f' fill-opacity="{_fmt(a)}"'
        lines.append(f"  <polygon {attrs} />")

    lines.append("</svg>")

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write("\n".join(lines) + "\n")

    _logger.debug("SVG を保存しました: %s (faces=%d)", _path, len(faces))
    return _path


def render_svg(
    drawables: Sequence[Drawable],
    path: str | Path | None = None,
    *,
    config: RuntimeConfig | None = None,
    name: str = "scene.svg",
) -> Path:
    """物体列を投影し、実行時設定のキャンバス・光源・背景色で SVG を保存する。

    Notes
    -----
    `path` が None のとき `config.output_dir / name` に保存する。
    """
    cfg = runtime_config() if config is None else config
    out_path = Path(cfg.output_dir) / name if path is None else Path(path)
    faces = project_scene(
        drawables,
        cfg.canvas_size,
        light_direction=cfg.light_direction,
    )
    return export_svg(
        faces,
        out_path,
        canvas_size=cfg.canvas_size,
        background_color=cfg.clear_color,
        decimals=cfg.svg_decimals,
    )


__all__ = ["export_svg", "render_svg", "rgb01_to_rgb255"]
