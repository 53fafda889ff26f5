import math
from pathlib import Path

import pytest

from glexp.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.canvas_size == (800, 600)
    assert cfg.aspect == pytest.approx(800 / 600)
    assert cfg.clear_color == (0.6, 0.6, 0.6)
    assert cfg.camera.kind == "perspective"
    assert cfg.camera.fov == pytest.approx(0.3 * 0.5 * math.pi)
    assert cfg.camera.near == 1.0
    assert cfg.camera.far == 1000.0
    assert cfg.light_direction == (1.0, -1.0, -1.0)
    assert cfg.svg_decimals == 3


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    assert runtime_config() is runtime_config()


def test_discovered_config_merges_nested_sections(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = _write(
        tmp_path / ".glexp" / "config.yaml",
        'paths:\n  output_dir: "./out_discovered"\ncamera:\n  fov: 1.0\n',
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.output_dir == Path("out_discovered")
    assert cfg.camera.fov == 1.0
    # 指定していないキーは同梱デフォルトのまま。
    assert cfg.camera.near == 1.0
    assert cfg.camera.far == 1000.0
    assert cfg.canvas_size == (800, 600)


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = _write(
        tmp_path / ".config" / "glexp" / "config.yaml",
        "canvas:\n  size: [320, 240]\n",
    )

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.canvas_size == (320, 240)


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    _write(
        tmp_path / ".glexp" / "config.yaml",
        'paths:\n  output_dir: "./out_discovered"\ncamera:\n  kind: "orthographic"\n',
    )
    explicit = _write(
        tmp_path / "explicit.yaml",
        'paths:\n  output_dir: "./out_explicit"\nlight:\n  direction: [0, 0, -1]\n',
    )

    set_config_path(explicit)
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.output_dir == Path("out_explicit")
    assert cfg.camera.kind == "orthographic"
    assert cfg.light_direction == (0.0, 0.0, -1.0)


def test_set_config_path_invalidates_cache(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    explicit = _write(tmp_path / "explicit.yaml", "export:\n  svg:\n    decimals: 1\n")
    set_config_path(explicit)
    second = runtime_config()
    assert first.svg_decimals == 3
    assert second.svg_decimals == 1


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    ("text", "error"),
    [
        ("version: 2\n", RuntimeError),
        ("- a\n- b\n", RuntimeError),
        ("canvas:\n  size: [1, 2, 3]\n", RuntimeError),
        ("canvas:\n  size: [0, 100]\n", ValueError),
        ("camera: 5\n", RuntimeError),
        ("camera:\n  near: 10\n  far: 5\n", ValueError),
        ("camera:\n  kind: fisheye\n", ValueError),
        ("light:\n  direction: [1, x, 0]\n", RuntimeError),
        ("export:\n  svg:\n    decimals: -1\n", ValueError),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, error):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(_write(tmp_path / "bad.yaml", text))
    with pytest.raises(error):
        runtime_config()
