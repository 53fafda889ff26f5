# どこで: `src/glexp/core/types.py`。
# 何を: Vector3 / Vector4 / Matrix4 の表現（読み取り専用 float64 配列）と正規化関数を定義する。
# なぜ: v3/v4/m4 の全関数が同じ入力検証と不変化を共有するため。

from __future__ import annotations

from typing import Any, TypeAlias

import numpy as np

Vector3: TypeAlias = np.ndarray
"""float64 shape (3,) の読み取り専用配列。"""

Vector4: TypeAlias = np.ndarray
"""float64 shape (4,) の読み取り専用配列（同次座標）。"""

Matrix4: TypeAlias = np.ndarray
"""float64 shape (4, 4) の読み取り専用配列（行優先 `m[row, col]`）。"""


def freeze(array: np.ndarray) -> np.ndarray:
    """配列を writeable=False にして返す。"""
    array.setflags(write=False)
    return array


def _coerce(value: Any, *, shape: tuple[int, ...], name: str) -> np.ndarray:
    arr = np.array(value, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"{name} は shape {shape} である必要がある: got={arr.shape}")
    return freeze(arr)


def as_vector3(value: Any) -> Vector3:
    """array-like を Vector3 に正規化して返す。

    Raises
    ------
    ValueError
        shape が (3,) でない場合。
    """
    return _coerce(value, shape=(3,), name="Vector3")


def as_vector4(value: Any) -> Vector4:
    """array-like を Vector4 に正規化して返す。"""
    return _coerce(value, shape=(4,), name="Vector4")


def as_matrix4(value: Any) -> Matrix4:
    """array-like を Matrix4 に正規化して返す。

    Notes
    -----
    入力が既に読み取り専用の float64 (4,4) 配列でもコピーを作る。
    戻り値を書き換えても入力側には影響しない。
    """
    return _coerce(value, shape=(4, 4), name="Matrix4")


__all__ = ["Matrix4", "Vector3", "Vector4", "as_matrix4", "as_vector3", "as_vector4", "freeze"]
