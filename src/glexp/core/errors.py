"""行列演算で発生する例外。"""

from __future__ import annotations


class SingularMatrixError(ArithmeticError):
    """行列式が 0（または非有限）のため逆行列を計算できない。

    Attributes
    ----------
    determinant : float
        検出した行列式の値。
    """

    def __init__(self, determinant: float) -> None:
        self.determinant = float(determinant)
        super().__init__(f"特異行列のため逆行列を計算できない: determinant={self.determinant!r}")


__all__ = ["SingularMatrixError"]
