"""
どこで: `tests/core/test_resolver.py`。
何を: 型注釈 + display_as 指定 → WidgetKind / 初期値 / スライダー範囲の解決規則を検証する。
"""

import enum
import inspect
from typing import Optional

import numpy as np
import pytest

from cmdpanel.core.directives import make_directive
from cmdpanel.core.engine_object import EngineObject
from cmdpanel.core.errors import OverrideDirectiveError
from cmdpanel.core.resolver import ParamResolution, resolve_default, resolve_parameter
from cmdpanel.core.type_support import SUPPORTED_PROPERTY_TYPES
from cmdpanel.core.value_types import Color, Vector3
from cmdpanel.core.widget_kind import Display, WidgetKind


class Mode(enum.Enum):
    OFF = 0
    ON = 1


class Direction(enum.Enum):
    NORTH = 1
    SOUTH = 2


class Layer(enum.Flag):
    GROUND = 1
    WATER = 2
    SKY = 4


class Enemy(EngineObject):
    pass


@pytest.mark.parametrize("type_", SUPPORTED_PROPERTY_TYPES)
def test_allow_listed_types_resolve_to_structured_property(type_) -> None:
    assert resolve_parameter(type_).kind is WidgetKind.STRUCTURED_PROPERTY


def test_structured_property_defaults_are_zero_values() -> None:
    assert resolve_parameter(int) == ParamResolution(WidgetKind.STRUCTURED_PROPERTY, 0)
    assert resolve_parameter(str).default == ""
    assert resolve_parameter(Vector3).default == Vector3(0.0, 0.0, 0.0)
    assert resolve_parameter(Color).default == Color()
    assert resolve_parameter(EngineObject).default is None

    d = resolve_parameter(np.int8).default
    assert type(d) is np.int8
    assert d == 0


def test_engine_object_subclass_resolves_to_object_reference() -> None:
    assert resolve_parameter(Enemy) == ParamResolution(WidgetKind.OBJECT_REFERENCE, None)
    assert resolve_parameter(Optional[Enemy]).kind is WidgetKind.OBJECT_REFERENCE
    assert resolve_parameter(Enemy | None).kind is WidgetKind.OBJECT_REFERENCE


def test_enum_kinds_and_zero_values() -> None:
    assert resolve_parameter(Layer) == ParamResolution(WidgetKind.ENUM_FLAGS, Layer(0))
    assert resolve_parameter(Mode) == ParamResolution(WidgetKind.ENUM, Mode.OFF)
    # 値 0 のメンバーが無い Enum は先頭メンバー。
    assert resolve_parameter(Direction).default is Direction.NORTH


def test_arrays_and_lists_of_allow_listed_types() -> None:
    assert resolve_parameter(tuple[int, ...]) == ParamResolution(WidgetKind.ARRAY, None)
    assert resolve_parameter(tuple[Vector3, ...]).kind is WidgetKind.ARRAY
    assert resolve_parameter(list[str]) == ParamResolution(WidgetKind.LIST, None)
    assert resolve_parameter(list[Color]).kind is WidgetKind.LIST


@pytest.mark.parametrize(
    "type_",
    [
        dict,
        dict[str, int],
        tuple[int, int],
        list[dict],
        list[Enemy],
        tuple[Mode, ...],
        set[int],
        object,
        inspect.Parameter.empty,
    ],
)
def test_other_types_are_unsupported(type_) -> None:
    assert resolve_parameter(type_) == ParamResolution(WidgetKind.UNSUPPORTED, None)


def test_text_area_override_on_str() -> None:
    directive = make_directive("note", Display.TEXT_AREA)
    assert resolve_parameter(str, directive) == ParamResolution(WidgetKind.TEXT_AREA, "")


@pytest.mark.parametrize(
    ("type_", "expected"),
    [
        (float, WidgetKind.DELAYED_FLOAT),
        (np.float64, WidgetKind.DELAYED_DOUBLE),
        (int, WidgetKind.DELAYED_INT),
        (str, WidgetKind.DELAYED_TEXT),
    ],
)
def test_delayed_override(type_, expected: WidgetKind) -> None:
    resolved = resolve_parameter(type_, make_directive("x", Display.DELAYED))
    assert resolved.kind is expected
    assert resolved.default == resolve_default(type_).default


def test_enum_flags_override_on_flag_enum() -> None:
    resolved = resolve_parameter(Layer, make_directive("layers", Display.ENUM_FLAGS))
    assert resolved == ParamResolution(WidgetKind.ENUM_FLAGS, Layer(0))


def test_float_slider_accepts_int_bounds() -> None:
    resolved = resolve_parameter(float, make_directive("speed", 0, 10))
    assert resolved.kind is WidgetKind.FLOAT_SLIDER
    assert resolved.default == 0.0
    assert resolved.slider_range == (0.0, 10.0)
    assert all(isinstance(v, float) for v in resolved.slider_range)


def test_int_slider_with_int_bounds() -> None:
    resolved = resolve_parameter(int, make_directive("count", 1, 5))
    assert resolved == ParamResolution(WidgetKind.INT_SLIDER, 0, (1, 5))


@pytest.mark.parametrize(
    ("type_", "display_or_min", "max_value"),
    [
        (int, Display.TEXT_AREA, None),
        (float, Display.ENUM_FLAGS, None),
        (Mode, Display.ENUM_FLAGS, None),
        (np.float32, Display.DELAYED, None),
        (bool, Display.DELAYED, None),
        (Vector3, Display.DELAYED, None),
        (int, 0.5, 1.0),
        (str, 0, 10),
        (np.float32, 0, 1),
    ],
)
def test_incompatible_override_falls_back_to_default(type_, display_or_min, max_value) -> None:
    directive = make_directive("x", display_or_min, max_value)
    assert resolve_parameter(type_, directive) == resolve_default(type_)


def test_incompatible_override_raises_in_strict_mode() -> None:
    directive = make_directive("x", Display.TEXT_AREA)
    with pytest.raises(OverrideDirectiveError):
        resolve_parameter(int, directive, strict=True, label="demo.x")


def test_compatible_override_is_accepted_in_strict_mode() -> None:
    directive = make_directive("x", 0, 1)
    assert resolve_parameter(float, directive, strict=True).kind is WidgetKind.FLOAT_SLIDER
