# どこで: `src/cmdpanel/core/resolver.py`。
# 何を: 引数の型注釈と display_as 指定から、編集ウィジェット種別・初期値・スライダー範囲を決める。
# なぜ: 「どう表示するか」の判定を 1 つの純粋関数へ集約し、描画フレームごとの再判定を無くすため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from .directives import DisplayAs
from .errors import OverrideDirectiveError
from .type_support import (
    is_enum_type,
    is_flag_enum,
    is_object_reference_type,
    is_supported_array,
    is_supported_list,
    is_supported_property,
    zero_value,
)
from .widget_kind import Display, WidgetKind

_logger = logging.getLogger(__name__)

# Display.DELAYED を受け付ける型（完全一致）→ ウィジェット種別。
_DELAYED_KINDS: dict[type, WidgetKind] = {
    float: WidgetKind.DELAYED_FLOAT,
    np.float64: WidgetKind.DELAYED_DOUBLE,
    int: WidgetKind.DELAYED_INT,
    str: WidgetKind.DELAYED_TEXT,
}


@dataclass(frozen=True, slots=True)
class ParamResolution:
    """1 引数の解決結果。

    slider_range は INT_SLIDER / FLOAT_SLIDER の場合のみ設定される。
    """

    kind: WidgetKind
    default: Any = None
    slider_range: tuple[Any, Any] | None = None


def _resolve_override(type_: Any, directive: DisplayAs) -> ParamResolution | None:
    """指定が型と両立すれば解決結果を返し、両立しなければ None を返す。"""

    if directive.is_slider:
        lo, hi = directive.slider_min, directive.slider_max
        if type_ is float:
            return ParamResolution(
                WidgetKind.FLOAT_SLIDER, 0.0, (float(lo), float(hi))  # type: ignore[arg-type]
            )
        if type_ is int and not directive.is_float_slider:
            return ParamResolution(WidgetKind.INT_SLIDER, 0, (int(lo), int(hi)))  # type: ignore[arg-type]
        return None

    if directive.display is Display.DELAYED:
        kind = _DELAYED_KINDS.get(type_) if isinstance(type_, type) else None
        if kind is None:
            return None
        return ParamResolution(kind, zero_value(type_))

    if directive.display is Display.ENUM_FLAGS:
        if not is_flag_enum(type_):
            return None
        return ParamResolution(WidgetKind.ENUM_FLAGS, zero_value(type_))

    if directive.display is Display.TEXT_AREA:
        if type_ is not str:
            return None
        return ParamResolution(WidgetKind.TEXT_AREA, "")

    return None


def resolve_default(type_: Any) -> ParamResolution:
    """上書き指定なしの既定規則で解決する（先にマッチした規則が勝つ）。"""

    if is_object_reference_type(type_):
        return ParamResolution(WidgetKind.OBJECT_REFERENCE, None)
    if is_flag_enum(type_):
        return ParamResolution(WidgetKind.ENUM_FLAGS, zero_value(type_))
    if is_enum_type(type_):
        return ParamResolution(WidgetKind.ENUM, zero_value(type_))
    if is_supported_property(type_):
        return ParamResolution(WidgetKind.STRUCTURED_PROPERTY, zero_value(type_))
    if is_supported_array(type_):
        return ParamResolution(WidgetKind.ARRAY, None)
    if is_supported_list(type_):
        return ParamResolution(WidgetKind.LIST, None)
    return ParamResolution(WidgetKind.UNSUPPORTED, None)


def resolve_parameter(
    type_: Any,
    directive: DisplayAs | None = None,
    *,
    strict: bool = False,
    label: str = "",
) -> ParamResolution:
    """引数の型と上書き指定から ParamResolution を返す。

    Parameters
    ----------
    type_ : Any
        引数の型注釈（未注釈は `inspect.Parameter.empty`）。
    directive : DisplayAs or None
        引数名に一致した最初の display_as 指定。
    strict : bool
        True の場合、型と両立しない指定を OverrideDirectiveError として送出する。
        False の場合は指定を無視して既定規則へフォールバックする。
    label : str
        ログ/例外メッセージ用の識別子（`command.arg` など）。

    Raises
    ------
    OverrideDirectiveError
        strict=True で指定が型と両立しない場合。
    """

    if directive is not None:
        resolved = _resolve_override(type_, directive)
        if resolved is not None:
            return resolved
        target = label or directive.parameter
        if strict:
            raise OverrideDirectiveError(
                f"display_as が型と両立しません: {target} type={type_!r} directive={directive!r}"
            )
        _logger.debug(
            "display_as が型と両立しないため無視します: %s type=%r directive=%r",
            target,
            type_,
            directive,
        )
    return resolve_default(type_)


__all__ = ["ParamResolution", "resolve_default", "resolve_parameter"]
