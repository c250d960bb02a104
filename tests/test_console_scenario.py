"""
どこで: `tests/test_console_scenario.py`。
何を: 登録 → 探索 → フォーム編集 → Run → 履歴、の一連の流れを公開 API から通しで検証する。
"""

from __future__ import annotations

from typing import Any

import cmdpanel
from cmdpanel.core.command_registry import CommandRegistry
from cmdpanel.core.history import EMPTY_ENTRY, CommandHistory
from cmdpanel.core.invocation import CommandInvoker
from cmdpanel.core.value_store import ValueStore
from cmdpanel.core.widget_kind import WidgetKind
from cmdpanel.interactive.console.commands_panel import ConsoleState
from cmdpanel.interactive.console.gui import render_console


class DummyImGui:
    def __init__(self, *, expanded: set[str], edits: dict[str, Any], run: bool) -> None:
        self._expanded = expanded
        self._edits = edits
        self._run = run

    def push_id(self, _value: str) -> None:
        return None

    def pop_id(self) -> None:
        return None

    def collapsing_header(self, label: str, *_args: Any, **_kwargs: Any) -> tuple[bool, None]:
        return label in self._expanded, None

    def slider_float(self, label: str, value: float, *_args: float) -> tuple[bool, float]:
        if label in self._edits:
            return True, self._edits[label]
        return False, value

    def slider_int(self, label: str, value: int, *_args: int) -> tuple[bool, int]:
        return False, value

    def checkbox(self, label: str, state: bool) -> tuple[bool, bool]:
        return False, state

    def button(self, label: str, *_size: float) -> bool:
        return self._run and label == "Run"

    def text(self, _text: str) -> None:
        return None

    def text_colored(self, _text: str, *_rgba: float) -> None:
        return None

    def text_disabled(self, _text: str) -> None:
        return None

    def same_line(self, *_args: float) -> None:
        return None

    def separator(self) -> None:
        return None

    def begin_child(self, *_args: Any, **_kwargs: Any) -> bool:
        return True

    def end_child(self) -> None:
        return None


def test_set_speed_from_slider_to_history() -> None:
    reg = CommandRegistry()
    received: list[float] = []

    @cmdpanel.command(registry=reg)
    @cmdpanel.display_as("value", 0, 10)
    def set_speed(value: float) -> None:
        received.append(value)

    future = reg.start_discovery()
    (descriptor,) = future.result(timeout=5)

    value = descriptor.parameter("value")
    assert value.kind is WidgetKind.FLOAT_SLIDER
    assert value.slider_range == (0.0, 10.0)
    assert value.value == 0.0

    history = CommandHistory(10)
    invoker = CommandInvoker(history)
    state = ConsoleState()
    store = ValueStore()

    # 1 フレーム目: スライダーを 7.5 へ動かすだけ（Run は押さない）。
    imgui = DummyImGui(expanded={"set_speed"}, edits={"value": 7.5}, run=False)
    assert render_console(imgui, registry=reg, invoker=invoker, store=store, state=state, height=600.0) == []
    assert value.value == 7.5
    assert history.read() == (EMPTY_ENTRY,) * 10

    # 2 フレーム目: 編集値は保持され、Run で実行される。
    imgui = DummyImGui(expanded={"set_speed"}, edits={}, run=True)
    results = render_console(imgui, registry=reg, invoker=invoker, store=store, state=state, height=600.0)

    assert received == [7.5]
    assert [r.name for r in results] == ["set_speed"]
    assert history.latest.name == "set_speed"
    assert history.latest.elapsed_ms >= 0.0
    assert history.read()[1:] == (EMPTY_ENTRY,) * 9
