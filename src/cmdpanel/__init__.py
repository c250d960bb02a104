# どこで: `src/cmdpanel/__init__.py`。
# 何を: ルート `cmdpanel` パッケージを定義する。
# なぜ: import 起点を `cmdpanel` に統一するため。

from __future__ import annotations

from cmdpanel.api import (
    Display,
    EngineObject,
    command,
    command_registry,
    display_as,
    run,
    timer,
)
from cmdpanel.core.value_types import (
    Bounds,
    BoundsInt,
    Color,
    Curve,
    CurveKey,
    Gradient,
    GradientKey,
    Hash128,
    Matrix4x4,
    Quaternion,
    Rect,
    RectInt,
    Vector2,
    Vector2Int,
    Vector3,
    Vector3Int,
    Vector4,
)

__all__ = [
    "Bounds",
    "BoundsInt",
    "Color",
    "Curve",
    "CurveKey",
    "Display",
    "EngineObject",
    "Gradient",
    "GradientKey",
    "Hash128",
    "Matrix4x4",
    "Quaternion",
    "Rect",
    "RectInt",
    "Vector2",
    "Vector2Int",
    "Vector3",
    "Vector3Int",
    "Vector4",
    "command",
    "command_registry",
    "display_as",
    "run",
    "timer",
]
