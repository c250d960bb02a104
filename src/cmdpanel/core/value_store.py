# どこで: `src/cmdpanel/core/value_store.py`。
# 何を: 編集中の引数値を一時的に置く「スロット」を、型ごと（既定）または引数ごとに保持する。
# なぜ: 構造体/配列/リストを共通の描画経路で編集するため、書き戻し先を 1 か所に固定するため。

from __future__ import annotations

import contextlib
from collections.abc import Hashable, Iterator
from typing import Any, Literal

from .descriptor import CommandDescriptor, ParameterData
from .widget_kind import WidgetKind

Isolation = Literal["type", "parameter"]
SlotPool = Literal["property", "array", "list"]

ISOLATION_MODES: tuple[str, ...] = ("type", "parameter")

_POOL_BY_KIND: dict[WidgetKind, SlotPool] = {
    WidgetKind.STRUCTURED_PROPERTY: "property",
    WidgetKind.ARRAY: "array",
    WidgetKind.LIST: "list",
}


class ValueStore:
    """編集スロットの保持先。

    Notes
    -----
    isolation="type"（既定）では、同じ型の引数はコマンドをまたいで 1 つのスロットを共有する。
    描画側は「描画直前に書き込み、描画直後に読み戻す」ため、同時に編集されるのは常に 1 引数で、
    共有しても値は混ざらない。複数ウィジェットを同時に編集する描画方式では
    isolation="parameter" を使い、(コマンド, 引数位置) ごとに独立したスロットを持つ。
    """

    def __init__(self, *, isolation: Isolation = "type") -> None:
        if isolation not in ISOLATION_MODES:
            raise ValueError(f"isolation は {ISOLATION_MODES} のいずれか: got={isolation!r}")
        self._isolation: Isolation = isolation
        self._slots: dict[Hashable, Any] = {}

    @property
    def isolation(self) -> Isolation:
        return self._isolation

    def get(self, key: Hashable) -> Any:
        """スロットの値を返す。未使用のスロットは None。"""

        return self._slots.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        self._slots[key] = value

    def __len__(self) -> int:
        return len(self._slots)

    def slot_key(
        self,
        parameter: ParameterData,
        command: CommandDescriptor | None = None,
    ) -> Hashable:
        """parameter のスロットキーを返す。

        isolation="type" では `(pool, type)`、isolation="parameter" では
        `(qualified_name, index)` を返す。後者は command が必須。

        Raises
        ------
        ValueError
            スロットを使わない種別の引数、または command 不足の場合。
        """

        pool = _POOL_BY_KIND.get(parameter.kind)
        if pool is None:
            raise ValueError(f"{parameter.kind.value} はスロットを使いません: {parameter.name}")
        if self._isolation == "type":
            return (pool, parameter.type_)
        if command is None:
            raise ValueError("isolation='parameter' では command が必要です")
        return (command.qualified_name, int(parameter.index))

    @contextlib.contextmanager
    def edit(
        self,
        parameter: ParameterData,
        command: CommandDescriptor | None = None,
    ) -> Iterator[Hashable]:
        """parameter の現在値をスロットへ書き込み、ブロック終了時に読み戻す。

        ブロック内では yield されたキーに対して `get()` / `set()` で編集する。
        例外時も読み戻しは行わない（編集途中の値を parameter に残さない）。
        """

        key = self.slot_key(parameter, command)
        self._slots[key] = parameter.value
        yield key
        parameter.value = self._slots.get(key)


__all__ = ["ISOLATION_MODES", "Isolation", "SlotPool", "ValueStore"]
