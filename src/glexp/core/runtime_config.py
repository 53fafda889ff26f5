# どこで: `src/glexp/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: キャンバス寸法・カメラ・光源・出力先をコードを書き換えずに指定できるようにするため。

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from glexp.core.scene import Camera

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """glexp の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    canvas_size: tuple[int, int]
    clear_color: tuple[float, float, float]
    camera: Camera
    light_direction: tuple[float, float, float]
    svg_decimals: int

    @property
    def aspect(self) -> float:
        w, h = self.canvas_size
        return float(w) / float(h)


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".glexp" / "config.yaml",
        home / ".config" / "glexp" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_float_tuple(value: Any, *, key: str, size: int) -> tuple[float, ...] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は長さ {size} の配列である必要があります: got={value!r}") from exc
    if len(seq) != size:
        raise RuntimeError(f"{key} は長さ {size} の配列である必要があります: got={value!r}")
    try:
        out = tuple(float(v) for v in seq)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値の配列である必要があります: got={value!r}") from exc
    if not all(math.isfinite(v) for v in out):
        raise ValueError(f"{key} は有限値である必要があります: got={value!r}")
    return out


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("glexp")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="glexp/resource/default_config.yaml")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping 同士は再帰的に、それ以外は後勝ちで上書きした dict を返す。"""
    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = _merge(current, value)
        else:
            out[key] = value
    return out


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.glexp/config.yaml` / `~/.config/glexp/config.yaml`（先に見つかった方）
    3) `set_config_path(...)` で指定した config
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        _logger.debug("config を読み込みます: %s", discovered_path)
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        _logger.debug("config を読み込みます: %s", explicit_path)
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _require(_as_optional_path(paths.get("output_dir")), key="paths.output_dir")

    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    canvas_size = _require(_as_int_pair(canvas.get("size"), key="canvas.size"), key="canvas.size")
    if canvas_size[0] <= 0 or canvas_size[1] <= 0:
        raise ValueError(f"canvas.size は正の値である必要があります: got={canvas_size}")
    clear_color = _require(
        _as_float_tuple(canvas.get("clear_color"), key="canvas.clear_color", size=3),
        key="canvas.clear_color",
    )

    camera_payload = _as_mapping(payload.get("camera"), key="camera")
    kind = str(_require(camera_payload.get("kind"), key="camera.kind"))
    fov = _require(_as_float(camera_payload.get("fov"), key="camera.fov"), key="camera.fov")
    near = _require(_as_float(camera_payload.get("near"), key="camera.near"), key="camera.near")
    far = _require(_as_float(camera_payload.get("far"), key="camera.far"), key="camera.far")
    camera = Camera(fov=fov, near=near, far=far, kind=kind)  # type: ignore[arg-type]

    light = _as_mapping(payload.get("light"), key="light")
    light_direction = _require(
        _as_float_tuple(light.get("direction"), key="light.direction", size=3),
        key="light.direction",
    )

    export = _as_mapping(payload.get("export"), key="export")
    svg = _as_mapping(export.get("svg"), key="export.svg")
    svg_decimals = _require(_as_int(svg.get("decimals"), key="export.svg.decimals"), key="export.svg.decimals")
    if svg_decimals < 0:
        raise ValueError(f"export.svg.decimals は 0 以上である必要があります: got={svg_decimals}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        canvas_size=canvas_size,
        clear_color=clear_color,  # type: ignore[arg-type]
        camera=camera,
        light_direction=light_direction,  # type: ignore[arg-type]
        svg_decimals=svg_decimals,
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    cfg = runtime_config()
    return Path(cfg.output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
