# どこで: `src/cmdpanel/interactive/console/widgets.py`。
# 何を: ParameterData.kind を pyimgui の値ウィジェットへ対応付けて描画する。
# なぜ: kind ごとの UI 実装を閉じ込め、コマンド一覧の描画から分離するため。

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import numpy as np

from cmdpanel.core.descriptor import CommandDescriptor, ParameterData
from cmdpanel.core.engine_object import EngineObject, find_objects
from cmdpanel.core.type_support import (
    NUMPY_SCALAR_TYPES,
    array_element_type,
    list_element_type,
    unwrap_optional,
    zero_value,
)
from cmdpanel.core.value_store import ValueStore
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
from cmdpanel.core.widget_kind import SLOT_KINDS, WidgetKind

WidgetFn = Callable[[Any, ParameterData], tuple[bool, Any]]

# ImGui の int 系ウィジェットは int32 を前提にする。
_INT32_MIN = -2_147_483_648
_INT32_MAX = 2_147_483_647

_NONE_LABEL = "(None)"


def _clamp_int32(value: int) -> int:
    return max(_INT32_MIN, min(_INT32_MAX, int(value)))


def _slider_int_range(parameter: ParameterData) -> tuple[int, int]:
    """int スライダーのレンジ (min, max) を返す。

    ImGui の slider_int は min/max が int32 の “半分レンジ” 以内であることを要求する。
    """

    lo, hi = parameter.slider_range or (0, 100)
    lo_i = max(-1_073_741_824, min(1_073_741_823, int(lo)))
    hi_i = max(-1_073_741_824, min(1_073_741_823, int(hi)))
    if lo_i > hi_i:
        lo_i, hi_i = hi_i, lo_i
    return lo_i, hi_i


def _slider_float_range(parameter: ParameterData) -> tuple[float, float]:
    lo, hi = parameter.slider_range or (0.0, 1.0)
    lo_f, hi_f = float(lo), float(hi)
    if lo_f > hi_f:
        lo_f, hi_f = hi_f, lo_f
    return lo_f, hi_f


# --- 単一値（STRUCTURED_PROPERTY / 配列要素）---


def _input_integer(imgui: Any, label: str, type_: type, value: Any) -> tuple[bool, Any]:
    """int / numpy 整数を入力させ、型の範囲に丸めて返す。"""

    current = 0 if value is None else int(value)
    changed, out = imgui.input_int(label, _clamp_int32(current))
    if not changed:
        return False, value if value is not None else type_(0)
    if type_ is int:
        return True, int(out)
    info = np.iinfo(type_)
    return True, type_(max(int(info.min), min(int(info.max), int(out))))


def _input_real(imgui: Any, label: str, type_: type, value: Any) -> tuple[bool, Any]:
    current = 0.0 if value is None else float(value)
    if type_ is np.float32:
        changed, out = imgui.input_float(label, current)
    else:
        changed, out = imgui.input_double(label, current)
    if not changed:
        return False, value if value is not None else type_(0.0)
    return True, type_(out)


def _input_components(
    imgui: Any, label: str, values: tuple[Any, ...], *, integer: bool
) -> tuple[bool, tuple[Any, ...]]:
    """2〜4 成分の数値入力を描画する。"""

    n = len(values)
    prefix = "input_int" if integer else "input_float"
    fn = getattr(imgui, f"{prefix}{n}")
    if integer:
        changed, out = fn(label, *(_clamp_int32(v) for v in values))
        return changed, tuple(int(v) for v in out)
    changed, out = fn(label, *(float(v) for v in values))
    return changed, tuple(float(v) for v in out)


def _engine_object_combo(
    imgui: Any, label: str, type_: type, value: Any
) -> tuple[bool, Any]:
    """生存オブジェクトから 1 つ（または None）を選ばせる。"""

    candidates = find_objects(type_)
    preview = _NONE_LABEL if value is None else str(getattr(value, "name", value))
    changed = False
    out = value
    if imgui.begin_combo(label, preview):
        try:
            clicked, _ = imgui.selectable(_NONE_LABEL, value is None)
            if clicked:
                changed, out = value is not None, None
            for i, obj in enumerate(candidates):
                clicked, _ = imgui.selectable(f"{obj.name}##{i}", obj is value)
                if clicked:
                    changed, out = obj is not value, obj
        finally:
            imgui.end_combo()
    return changed, out


def _curve_editor(imgui: Any, label: str, value: Curve) -> tuple[bool, Curve]:
    imgui.text(label)
    keys = list(value.keys)
    changed = False
    remove: int | None = None
    for i, key in enumerate(keys):
        key_changed, (t, v) = imgui.input_float2(f"##{label}_key{i}", float(key.time), float(key.value))
        if key_changed:
            keys[i] = CurveKey(time=float(t), value=float(v))
            changed = True
        imgui.same_line()
        if imgui.button(f"-##{label}_del{i}"):
            remove = i
    if remove is not None:
        del keys[remove]
        changed = True
    if imgui.button(f"+##{label}_add"):
        last_t = keys[-1].time if keys else 0.0
        keys.append(CurveKey(time=float(last_t) + 1.0, value=0.0))
        changed = True
    return changed, Curve(keys=tuple(keys)) if changed else value


def _gradient_editor(imgui: Any, label: str, value: Gradient) -> tuple[bool, Gradient]:
    imgui.text(label)
    keys = list(value.keys)
    changed = False
    remove: int | None = None
    for i, key in enumerate(keys):
        c_changed, rgba = imgui.color_edit4(f"##{label}_color{i}", *key.color.components())
        imgui.same_line()
        t_changed, t = imgui.input_float(f"##{label}_time{i}", float(key.time))
        if c_changed or t_changed:
            keys[i] = GradientKey(color=Color(*(float(c) for c in rgba)), time=float(t))
            changed = True
        imgui.same_line()
        if imgui.button(f"-##{label}_del{i}"):
            remove = i
    if remove is not None:
        del keys[remove]
        changed = True
    if imgui.button(f"+##{label}_add"):
        keys.append(GradientKey(color=Color(1.0, 1.0, 1.0, 1.0), time=1.0))
        changed = True
    return changed, Gradient(keys=tuple(keys)) if changed else value


def render_property_value(
    imgui: Any, label: str, type_: type, value: Any
) -> tuple[bool, Any]:
    """許可リスト型の値を 1 つ描画し、(changed, value) を返す。

    Raises
    ------
    ValueError
        許可リスト外の型の場合。
    """

    if type_ is bool or type_ is np.bool_:
        clicked, state = imgui.checkbox(label, bool(value))
        return clicked, type_(state)
    if type_ is int or (type_ in NUMPY_SCALAR_TYPES and np.issubdtype(type_, np.integer)):
        return _input_integer(imgui, label, type_, value)
    if type_ is float or type_ is np.float32 or type_ is np.float64:
        return _input_real(imgui, label, type_, value)
    if type_ is str:
        return imgui.input_text(label, "" if value is None else str(value))
    if type_ is EngineObject:
        return _engine_object_combo(imgui, label, EngineObject, value)

    v = zero_value(type_) if value is None else value
    if type_ in (Vector2, Vector3, Vector4, Quaternion, Rect):
        changed, out = _input_components(imgui, label, v.components(), integer=False)
        return changed, type_.from_components(out) if changed else v
    if type_ in (Vector2Int, Vector3Int, RectInt):
        changed, out = _input_components(imgui, label, v.components(), integer=True)
        return changed, type_.from_components(out) if changed else v
    if type_ is Color:
        changed, rgba = imgui.color_edit4(label, *v.components())
        return changed, Color(*(float(c) for c in rgba)) if changed else v
    if type_ is Bounds:
        c_changed, center = _input_components(imgui, f"{label} center", v.center.components(), integer=False)
        s_changed, size = _input_components(imgui, f"{label} size", v.size.components(), integer=False)
        if not (c_changed or s_changed):
            return False, v
        return True, Bounds(Vector3(*center), Vector3(*size))
    if type_ is BoundsInt:
        p_changed, pos = _input_components(imgui, f"{label} position", v.position.components(), integer=True)
        s_changed, size = _input_components(imgui, f"{label} size", v.size.components(), integer=True)
        if not (p_changed or s_changed):
            return False, v
        return True, BoundsInt(Vector3Int(*pos), Vector3Int(*size))
    if type_ is Matrix4x4:
        imgui.text(label)
        out_m = v
        changed_any = False
        for i in range(4):
            changed, row = _input_components(imgui, f"##{label}_row{i}", v.row(i), integer=False)
            if changed:
                out_m = out_m.with_row(i, row)
                changed_any = True
        return changed_any, out_m
    if type_ is Hash128:
        changed, text = imgui.input_text(label, v.hex())
        if not changed:
            return False, v
        try:
            return True, Hash128.parse(text)
        except ValueError:
            return False, v
    if type_ is Curve:
        return _curve_editor(imgui, label, v)
    if type_ is Gradient:
        return _gradient_editor(imgui, label, v)
    raise ValueError(f"unsupported property type: {type_!r}")


def render_sequence_value(
    imgui: Any,
    label: str,
    element_type: type,
    values: Any,
    *,
    container: type,
) -> tuple[bool, Any]:
    """配列/リストを「要素数 + 各要素」として描画し、(changed, container(values)) を返す。"""

    items = list(values) if values is not None else []
    imgui.text(label)
    size_changed, size = imgui.input_int(f"size##{label}", len(items))
    changed = False
    if size_changed:
        n = max(0, int(size))
        if n < len(items):
            del items[n:]
        else:
            items.extend(zero_value(element_type) for _ in range(n - len(items)))
        changed = True
    imgui.indent()
    try:
        for i, item in enumerate(items):
            item_changed, new_item = render_property_value(
                imgui, f"[{i}]##{label}", element_type, item
            )
            if item_changed:
                items[i] = new_item
                changed = True
    finally:
        imgui.unindent()
    if not changed:
        return False, values
    return True, container(items)


# --- kind ごとのウィジェット ---


def widget_object_reference(imgui: Any, parameter: ParameterData) -> tuple[bool, Any]:
    """kind=object_reference の選択コンボを描画する。"""

    return _engine_object_combo(
        imgui, parameter.name, unwrap_optional(parameter.type_), parameter.value
    )


def widget_enum(imgui: Any, parameter: ParameterData) -> tuple[bool, Any]:
    """kind=enum のコンボを描画し、選択されたメンバーを返す。"""

    members = list(parameter.type_)
    if not members:
        imgui.text(f"{parameter.name}: (empty enum)")
        return False, parameter.value
    names = [m.name for m in members]
    try:
        current = members.index(parameter.value)
    except ValueError:
        current = 0
    clicked, selected = imgui.combo(parameter.name, current, names)
    if not clicked or int(selected) == current:
        return False, parameter.value
    return True, members[int(selected)]


def widget_enum_flags(imgui: Any, parameter: ParameterData) -> tuple[bool, Any]:
    """kind=enum_flags をメンバーごとのチェックボックスで描画する。"""

    type_ = parameter.type_
    value = type_(0) if parameter.value is None else parameter.value
    imgui.text(parameter.name)
    changed = False
    for i, member in enumerate(type_):
        clicked, state = imgui.checkbox(f"{member.name}##{parameter.name}", member in value)
        if clicked:
            value = (value | member) if state else (value & ~member)
            changed = True
        if i % 4 != 3:
            imgui.same_line()
    imgui.new_line()
    return changed, value


def widget_text_area(imgui: Any, parameter: ParameterData) -> tuple[bool, str]:
    """kind=text_area の複数行テキスト入力を描画する。"""

    value = "" if parameter.value is None else str(parameter.value)
    imgui.text(parameter.name)
    line_count = int(value.count("\n")) + 1
    visible_lines = max(3, min(8, line_count))
    height = float(imgui.get_text_line_height()) * float(visible_lines) + 8.0
    return imgui.input_text_multiline(f"##{parameter.name}", value, -1, 0.0, float(height))


def widget_int_slider(imgui: Any, parameter: ParameterData) -> tuple[bool, int]:
    lo, hi = _slider_int_range(parameter)
    return imgui.slider_int(parameter.name, int(parameter.value or 0), lo, hi)


def widget_float_slider(imgui: Any, parameter: ParameterData) -> tuple[bool, float]:
    """kind=float_slider のスライダーを描画し、(changed, value) を返す。"""

    lo, hi = _slider_float_range(parameter)
    changed, value = imgui.slider_float(parameter.name, float(parameter.value or 0.0), lo, hi)
    return changed, float(value)


def widget_delayed_float(imgui: Any, parameter: ParameterData) -> tuple[bool, float]:
    """Enter で確定する float 入力。確定前の編集中は changed=False。"""

    changed, value = imgui.input_float(
        parameter.name,
        float(parameter.value or 0.0),
        flags=imgui.INPUT_TEXT_ENTER_RETURNS_TRUE,
    )
    return changed, float(value) if changed else parameter.value


def widget_delayed_double(imgui: Any, parameter: ParameterData) -> tuple[bool, Any]:
    changed, value = imgui.input_double(
        parameter.name,
        float(parameter.value or 0.0),
        flags=imgui.INPUT_TEXT_ENTER_RETURNS_TRUE,
    )
    return changed, np.float64(value) if changed else parameter.value


def widget_delayed_int(imgui: Any, parameter: ParameterData) -> tuple[bool, int]:
    changed, value = imgui.input_int(
        parameter.name,
        _clamp_int32(int(parameter.value or 0)),
        flags=imgui.INPUT_TEXT_ENTER_RETURNS_TRUE,
    )
    return changed, int(value) if changed else parameter.value


def widget_delayed_text(imgui: Any, parameter: ParameterData) -> tuple[bool, str]:
    changed, value = imgui.input_text(
        parameter.name,
        "" if parameter.value is None else str(parameter.value),
        flags=imgui.INPUT_TEXT_ENTER_RETURNS_TRUE,
    )
    return changed, str(value) if changed else parameter.value


_KIND_TO_WIDGET: dict[WidgetKind, WidgetFn] = {
    WidgetKind.OBJECT_REFERENCE: widget_object_reference,
    WidgetKind.ENUM: widget_enum,
    WidgetKind.ENUM_FLAGS: widget_enum_flags,
    WidgetKind.TEXT_AREA: widget_text_area,
    WidgetKind.INT_SLIDER: widget_int_slider,
    WidgetKind.FLOAT_SLIDER: widget_float_slider,
    WidgetKind.DELAYED_FLOAT: widget_delayed_float,
    WidgetKind.DELAYED_DOUBLE: widget_delayed_double,
    WidgetKind.DELAYED_INT: widget_delayed_int,
    WidgetKind.DELAYED_TEXT: widget_delayed_text,
}


def _render_slot_widget(
    imgui: Any,
    parameter: ParameterData,
    *,
    store: ValueStore,
    command: CommandDescriptor | None,
) -> tuple[bool, Any]:
    """property/array/list を ValueStore のスロット経由で描画する。

    描画直前に parameter.value をスロットへ書き込み、描画直後に読み戻す。
    """

    with store.edit(parameter, command) as key:
        current = store.get(key)
        if parameter.kind is WidgetKind.STRUCTURED_PROPERTY:
            changed, value = render_property_value(imgui, parameter.name, parameter.type_, current)
        elif parameter.kind is WidgetKind.ARRAY:
            changed, value = render_sequence_value(
                imgui, parameter.name, array_element_type(parameter.type_), current, container=tuple
            )
        else:
            changed, value = render_sequence_value(
                imgui, parameter.name, list_element_type(parameter.type_), current, container=list
            )
        if changed:
            store.set(key, value)
    return changed, parameter.value


def render_parameter_widget(
    imgui: Any,
    parameter: ParameterData,
    *,
    store: ValueStore,
    command: CommandDescriptor | None = None,
) -> tuple[bool, Any]:
    """parameter.kind に応じたウィジェットを描画し、(changed, value) を返す。

    Parameters
    ----------
    imgui : Any
        imgui モジュール（テストではダミー）。
    parameter : ParameterData
        描画対象の引数。
    store : ValueStore
        property/array/list の編集スロット。
    command : CommandDescriptor or None
        isolation="parameter" のスロットキー算出に使う。

    Raises
    ------
    ValueError
        UNSUPPORTED など描画できない kind の場合。
    """

    if parameter.kind in SLOT_KINDS:
        return _render_slot_widget(imgui, parameter, store=store, command=command)
    fn = _KIND_TO_WIDGET.get(parameter.kind)
    if fn is None:
        raise ValueError(f"cannot render kind: {parameter.kind.value} ({parameter.name})")
    return fn(imgui, parameter)


def widget_registry() -> dict[WidgetKind, WidgetFn]:
    """kind→widget 関数マップのコピーを返す。"""

    return dict(_KIND_TO_WIDGET)


__all__ = [
    "render_parameter_widget",
    "render_property_value",
    "render_sequence_value",
    "widget_registry",
]
