# どこで: `src/cmdpanel/core/value_types.py`。
# 何を: コマンド引数として編集できる「リッチ値型」（ベクトル/色/矩形/曲線など）を提供する。
# なぜ: 型注釈から編集ウィジェットを決めるため、フォームで扱える値型を閉じた集合として持つ必要があるため。

from __future__ import annotations

from dataclasses import astuple, dataclass, field, fields
from typing import Any, Sequence

import numpy as np


class _Components:
    """成分タプルとの相互変換（ウィジェット用）。"""

    __slots__ = ()

    def components(self) -> tuple[Any, ...]:
        """成分をフラットなタプルで返す。"""

        return astuple(self)  # type: ignore[call-overload]

    @classmethod
    def from_components(cls, values: Sequence[Any]):
        """成分列から値を生成する。

        Raises
        ------
        ValueError
            成分数が一致しない場合。
        """

        names = [f.name for f in fields(cls)]  # type: ignore[arg-type]
        seq = list(values)
        if len(seq) != len(names):
            raise ValueError(
                f"{cls.__name__} requires {len(names)} components: got={len(seq)}"
            )
        return cls(*seq)


@dataclass(frozen=True, slots=True)
class Vector2(_Components):
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class Vector2Int(_Components):
    x: int = 0
    y: int = 0


@dataclass(frozen=True, slots=True)
class Vector3(_Components):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True, slots=True)
class Vector3Int(_Components):
    x: int = 0
    y: int = 0
    z: int = 0


@dataclass(frozen=True, slots=True)
class Vector4(_Components):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


@dataclass(frozen=True, slots=True)
class Color(_Components):
    """RGBA（各成分 0..1）。既定値は全成分 0（透明な黒）。"""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


@dataclass(frozen=True, slots=True)
class Rect(_Components):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True, slots=True)
class RectInt(_Components):
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(frozen=True, slots=True)
class Bounds:
    """中心とサイズで表す軸平行バウンディングボックス。"""

    center: Vector3 = field(default_factory=Vector3)
    size: Vector3 = field(default_factory=Vector3)

    @property
    def extents(self) -> Vector3:
        return Vector3(self.size.x * 0.5, self.size.y * 0.5, self.size.z * 0.5)


@dataclass(frozen=True, slots=True)
class BoundsInt:
    """原点とサイズで表す整数バウンディングボックス。"""

    position: Vector3Int = field(default_factory=Vector3Int)
    size: Vector3Int = field(default_factory=Vector3Int)


@dataclass(frozen=True, slots=True)
class Quaternion(_Components):
    """(x, y, z, w) の四元数。既定値は全成分 0（単位四元数ではない）。"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(0.0, 0.0, 0.0, 1.0)

    def normalized(self) -> "Quaternion":
        """正規化した四元数を返す。ノルム 0 の場合は単位四元数を返す。"""

        v = np.asarray(self.components(), dtype=np.float64)
        norm = float(np.linalg.norm(v))
        if norm == 0.0:
            return Quaternion.identity()
        x, y, z, w = (v / norm).tolist()
        return Quaternion(x, y, z, w)


def _zero_matrix_values() -> tuple[float, ...]:
    return (0.0,) * 16


@dataclass(frozen=True, slots=True)
class Matrix4x4:
    """行優先 16 要素の 4x4 行列。既定値はゼロ行列。"""

    values: tuple[float, ...] = field(default_factory=_zero_matrix_values)

    def __post_init__(self) -> None:
        if len(self.values) != 16:
            raise ValueError(f"Matrix4x4 requires 16 values: got={len(self.values)}")

    @classmethod
    def identity(cls) -> "Matrix4x4":
        return cls.from_array(np.eye(4, dtype=np.float64))

    @classmethod
    def from_array(cls, array: Any) -> "Matrix4x4":
        """(4, 4) 配列から行列を生成する。"""

        a = np.asarray(array, dtype=np.float64)
        if a.shape != (4, 4):
            raise ValueError(f"Matrix4x4 requires shape (4, 4): got={a.shape}")
        return cls(tuple(float(v) for v in a.reshape(-1)))

    def as_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64).reshape(4, 4)

    def row(self, index: int) -> tuple[float, float, float, float]:
        i = int(index) * 4
        v = self.values
        return float(v[i]), float(v[i + 1]), float(v[i + 2]), float(v[i + 3])

    def with_row(self, index: int, row: Sequence[float]) -> "Matrix4x4":
        """index 行目を置き換えた行列を返す。"""

        a = self.as_array()
        a[int(index), :] = np.asarray(list(row), dtype=np.float64)
        return Matrix4x4.from_array(a)


@dataclass(frozen=True, slots=True)
class Hash128:
    """128bit ハッシュ値。"""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= int(self.value) < (1 << 128):
            raise ValueError(f"Hash128 out of range: {self.value!r}")

    @classmethod
    def parse(cls, text: str) -> "Hash128":
        """32 桁以内の 16 進文字列から生成する。"""

        s = str(text).strip().lower()
        if s.startswith("0x"):
            s = s[2:]
        if not s:
            return cls(0)
        if len(s) > 32:
            raise ValueError(f"Hash128 hex must be <= 32 digits: {text!r}")
        return cls(int(s, 16))

    def hex(self) -> str:
        return f"{int(self.value):032x}"


@dataclass(frozen=True, slots=True)
class CurveKey:
    time: float = 0.0
    value: float = 0.0


@dataclass(frozen=True, slots=True)
class Curve:
    """キーフレーム列による 1 次元カーブ（キー間は線形補間）。"""

    keys: tuple[CurveKey, ...] = ()

    def evaluate(self, t: float) -> float:
        """時刻 t の値を返す。キーが無い場合は 0.0。"""

        if not self.keys:
            return 0.0
        ordered = sorted(self.keys, key=lambda k: k.time)
        xs = np.asarray([k.time for k in ordered], dtype=np.float64)
        ys = np.asarray([k.value for k in ordered], dtype=np.float64)
        return float(np.interp(float(t), xs, ys))


@dataclass(frozen=True, slots=True)
class GradientKey:
    color: Color = field(default_factory=Color)
    time: float = 0.0


def _default_gradient_keys() -> tuple[GradientKey, ...]:
    white = Color(1.0, 1.0, 1.0, 1.0)
    return (GradientKey(white, 0.0), GradientKey(white, 1.0))


@dataclass(frozen=True, slots=True)
class Gradient:
    """色キー列によるグラデーション。既定値は白→白。"""

    keys: tuple[GradientKey, ...] = field(default_factory=_default_gradient_keys)

    def evaluate(self, t: float) -> Color:
        """時刻 t の色を返す（成分ごとの線形補間）。"""

        if not self.keys:
            return Color()
        ordered = sorted(self.keys, key=lambda k: k.time)
        xs = np.asarray([k.time for k in ordered], dtype=np.float64)
        channels = np.asarray([k.color.components() for k in ordered], dtype=np.float64)
        out = [float(np.interp(float(t), xs, channels[:, i])) for i in range(4)]
        return Color(*out)


VALUE_TYPES: tuple[type, ...] = (
    Curve,
    Bounds,
    BoundsInt,
    Color,
    Gradient,
    Hash128,
    Quaternion,
    Rect,
    RectInt,
    Vector2,
    Vector2Int,
    Vector3,
    Vector3Int,
    Vector4,
    Matrix4x4,
)
"""フォームで編集できる値型（構造体相当）の一覧。"""


__all__ = [
    "Bounds",
    "BoundsInt",
    "Color",
    "Curve",
    "CurveKey",
    "Gradient",
    "GradientKey",
    "Hash128",
    "Matrix4x4",
    "Quaternion",
    "Rect",
    "RectInt",
    "VALUE_TYPES",
    "Vector2",
    "Vector2Int",
    "Vector3",
    "Vector3Int",
    "Vector4",
]
