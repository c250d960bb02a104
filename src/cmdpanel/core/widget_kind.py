# どこで: `src/cmdpanel/core/widget_kind.py`。
# 何を: 引数ごとの編集ウィジェット種別（WidgetKind）と、display_as で要求できる表示モード（Display）を定義する。
# なぜ: 描画側の分岐を閉じた列挙に固定し、判定を descriptor 構築時の 1 回に限定するため。

from __future__ import annotations

from enum import Enum


class WidgetKind(str, Enum):
    """解決済みの編集ウィジェット種別。"""

    UNSUPPORTED = "unsupported"
    OBJECT_REFERENCE = "object_reference"
    STRUCTURED_PROPERTY = "property"
    ENUM = "enum"
    ENUM_FLAGS = "enum_flags"
    TEXT_AREA = "text_area"
    INT_SLIDER = "int_slider"
    FLOAT_SLIDER = "float_slider"
    DELAYED_FLOAT = "delayed_float"
    DELAYED_DOUBLE = "delayed_double"
    DELAYED_INT = "delayed_int"
    DELAYED_TEXT = "delayed_text"
    ARRAY = "array"
    LIST = "list"


class Display(str, Enum):
    """`display_as(name, Display.X)` で指定できる表示モード。

    スライダーは Display ではなく `display_as(name, min, max)` で指定する。
    """

    TEXT_AREA = "text_area"
    ENUM_FLAGS = "enum_flags"
    DELAYED = "delayed"


# ValueStore の共有スロットを経由して描画する種別。
SLOT_KINDS = frozenset(
    {WidgetKind.STRUCTURED_PROPERTY, WidgetKind.ARRAY, WidgetKind.LIST}
)


__all__ = ["Display", "SLOT_KINDS", "WidgetKind"]
