# どこで: `src/glexp/__init__.py`。
# 何を: ルート `glexp` パッケージを定義し、v3/v4/m4 と例外を再エクスポートする。
# なぜ: `from glexp import m4` の形で行列ライブラリを使えるようにするため。

from __future__ import annotations

from glexp.core import m4, v3, v4
from glexp.core.errors import SingularMatrixError

__all__ = ["SingularMatrixError", "m4", "v3", "v4"]
