# どこで: `src/cmdpanel/core/type_support.py`。
# 何を: 型注釈の分類（対応プロパティ型 / 配列 / リスト / enum / 参照型）とゼロ値生成を提供する。
# なぜ: resolver の判定規則を「型についての純粋関数」に閉じ込め、単体テスト可能に保つため。

from __future__ import annotations

import enum
import types
import typing
from typing import Any

import numpy as np

from .engine_object import EngineObject
from .value_types import VALUE_TYPES

NUMPY_SCALAR_TYPES: tuple[type, ...] = (
    np.bool_,
    np.int8,
    np.uint8,
    np.int16,
    np.uint16,
    np.int32,
    np.uint32,
    np.int64,
    np.uint64,
    np.float32,
    np.float64,
)

PRIMITIVE_TYPES: tuple[type, ...] = (bool, int, float, *NUMPY_SCALAR_TYPES)

SUPPORTED_PROPERTY_TYPES: tuple[type, ...] = (
    *VALUE_TYPES,
    *PRIMITIVE_TYPES,
    str,
    EngineObject,
)
"""STRUCTURED_PROPERTY として編集できる型の許可リスト。"""

_SUPPORTED_PROPERTY_SET = frozenset(SUPPORTED_PROPERTY_TYPES)


def is_supported_property(type_: Any) -> bool:
    """type_ が許可リストに含まれるかを返す（サブクラスは含めない）。"""

    return isinstance(type_, type) and type_ in _SUPPORTED_PROPERTY_SET


def array_element_type(type_: Any) -> type | None:
    """`tuple[T, ...]` の T を返す。配列型でなければ None。"""

    if typing.get_origin(type_) is not tuple:
        return None
    args = typing.get_args(type_)
    if len(args) != 2 or args[1] is not Ellipsis:
        return None
    return args[0]


def list_element_type(type_: Any) -> type | None:
    """`list[T]` の T を返す。リスト型でなければ None。"""

    if typing.get_origin(type_) is not list:
        return None
    args = typing.get_args(type_)
    if len(args) != 1:
        return None
    return args[0]


def is_supported_array(type_: Any) -> bool:
    return is_supported_property(array_element_type(type_))


def is_supported_list(type_: Any) -> bool:
    return is_supported_property(list_element_type(type_))


def is_enum_type(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, enum.Enum)


def is_flag_enum(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, enum.Flag)


def unwrap_optional(type_: Any) -> Any:
    """`X | None` / `Optional[X]` の X を返す。それ以外は type_ をそのまま返す。"""

    origin = typing.get_origin(type_)
    if origin is not typing.Union and origin is not types.UnionType:
        return type_
    args = [a for a in typing.get_args(type_) if a is not type(None)]
    if len(args) != 1:
        return type_
    return args[0]


def is_object_reference_type(type_: Any) -> bool:
    """EngineObject の（真の）サブクラスかどうかを返す。Optional は剥がして判定する。"""

    inner = unwrap_optional(type_)
    return (
        isinstance(inner, type)
        and issubclass(inner, EngineObject)
        and inner is not EngineObject
    )


def enum_zero_value(type_: type[enum.Enum]) -> Any:
    """enum 型のゼロ値を返す。

    Flag は `T(0)`。通常の Enum は値 0 のメンバー、無ければ先頭メンバー、
    メンバーが無ければ None。
    """

    if issubclass(type_, enum.Flag):
        return type_(0)
    try:
        return type_(0)
    except ValueError:
        pass
    members = list(type_)
    return members[0] if members else None


def zero_value(type_: Any) -> Any:
    """許可リスト内の型 / enum 型のゼロ値を返す。対象外の型は None。"""

    if is_enum_type(type_):
        return enum_zero_value(type_)
    if type_ is str:
        return ""
    if type_ is EngineObject:
        return None
    if not is_supported_property(type_):
        return None
    return type_()


__all__ = [
    "NUMPY_SCALAR_TYPES",
    "PRIMITIVE_TYPES",
    "SUPPORTED_PROPERTY_TYPES",
    "array_element_type",
    "enum_zero_value",
    "is_enum_type",
    "is_flag_enum",
    "is_object_reference_type",
    "is_supported_array",
    "is_supported_list",
    "is_supported_property",
    "list_element_type",
    "unwrap_optional",
    "zero_value",
]
