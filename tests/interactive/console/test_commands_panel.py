from __future__ import annotations

from typing import Any

from cmdpanel.core.command_registry import CommandRegistry, command
from cmdpanel.core.descriptor import build_descriptor
from cmdpanel.core.history import EMPTY_ENTRY, CommandHistory
from cmdpanel.core.invocation import CommandInvoker
from cmdpanel.core.stopwatch import Stopwatch
from cmdpanel.core.value_store import ValueStore
from cmdpanel.interactive.console.commands_panel import (
    ConsoleState,
    render_command_form,
    render_commands_panel,
    run_command,
)
from cmdpanel.interactive.console.gui import render_console


class DummyImGui:
    INPUT_TEXT_ENTER_RETURNS_TRUE = 32

    def __init__(
        self,
        *,
        expanded: set[str] | None = None,
        clicked_ids: set[str] | None = None,
        edits: dict[str, Any] | None = None,
    ) -> None:
        self._expanded = set(expanded or set())
        self._clicked_ids = set(clicked_ids or set())
        self._edits = dict(edits or {})
        self._id_stack: list[str] = []
        self.texts: list[str] = []
        self.buttons: list[str] = []

    def push_id(self, value: str) -> None:
        self._id_stack.append(str(value))

    def pop_id(self) -> None:
        self._id_stack.pop()

    def collapsing_header(self, label: str, *_args: Any, **_kwargs: Any) -> tuple[bool, None]:
        return label in self._expanded, None

    def button(self, label: str, *_size: float) -> bool:
        widget_id = "/".join([*self._id_stack, label])
        self.buttons.append(widget_id)
        return widget_id in self._clicked_ids or label in self._clicked_ids

    def input_int(self, label: str, value: int, *_args: Any, **_kwargs: Any) -> tuple[bool, int]:
        if label in self._edits:
            return True, self._edits[label]
        return False, value

    def slider_int(self, label: str, value: int, *_args: Any) -> tuple[bool, int]:
        return False, value

    def checkbox(self, label: str, state: bool) -> tuple[bool, bool]:
        return False, state

    def text(self, text: str) -> None:
        self.texts.append(str(text))

    def text_colored(self, text: str, *_rgba: float) -> None:
        self.texts.append(str(text))

    def text_disabled(self, text: str) -> None:
        self.texts.append(str(text))

    def same_line(self, *_args: float) -> None:
        return None

    def separator(self) -> None:
        return None

    def begin_child(self, *_args: Any, **_kwargs: Any) -> bool:
        return True

    def end_child(self) -> None:
        return None

    def indent(self, *_args: float) -> None:
        return None

    def unindent(self, *_args: float) -> None:
        return None


calls: list[tuple[int, int]] = []


def add(a: int, b: int) -> None:
    """2 つの整数を足す。

    詳細は表示しない。
    """

    calls.append((a, b))


def store_payload(payload: dict, count: int) -> None:
    calls.append((0, count))


def explode() -> None:
    raise ValueError("bad input")


def _invoker(size: int = 5) -> CommandInvoker:
    return CommandInvoker(CommandHistory(size), stopwatch=Stopwatch())


def test_collapsed_command_renders_nothing() -> None:
    calls.clear()
    d = build_descriptor(add)
    imgui = DummyImGui(clicked_ids={"Run"})
    state = ConsoleState()

    results = render_commands_panel(imgui, [d], state=state, store=ValueStore(), invoker=_invoker())

    assert results == []
    assert calls == []
    assert imgui.texts == []
    assert imgui.buttons == []


def test_run_button_invokes_with_edited_values() -> None:
    calls.clear()
    d = build_descriptor(add)
    invoker = _invoker()
    imgui = DummyImGui(expanded={"add"}, clicked_ids={"Run"}, edits={"a": 3, "b": 4})
    state = ConsoleState()

    results = render_commands_panel(imgui, [d], state=state, store=ValueStore(), invoker=invoker)

    assert calls == [(3, 4)]
    assert [r.name for r in results] == ["add"]
    assert state.last_result is results[0]
    assert invoker.history.latest.name == "add"
    # doc は 1 行目だけを表示する。
    assert "2 つの整数を足す。" in imgui.texts
    assert "詳細は表示しない。" not in imgui.texts
    assert imgui.buttons == [f"{d.qualified_name}#0/Run"]


def test_unsupported_parameter_hides_run_button() -> None:
    calls.clear()
    d = build_descriptor(store_payload)
    imgui = DummyImGui(clicked_ids={"Run"})
    invoker = _invoker()

    assert render_command_form(imgui, d, store=ValueStore()) is False

    assert 'Can\'t display "payload" parameter' in imgui.texts
    assert "Replace all unsupported parameters with supported ones to run" in imgui.texts
    assert imgui.buttons == []
    assert calls == []
    assert invoker.history.read() == (EMPTY_ENTRY,) * 5


def test_failed_command_shows_error_and_keeps_history() -> None:
    d = build_descriptor(explode)
    invoker = _invoker(3)
    state = ConsoleState()

    result = run_command(invoker, d, state=state)

    assert result.ok is False
    assert isinstance(result.error, ValueError)
    assert state.errors[d.qualified_name] == "ValueError: bad input"
    assert invoker.history.read() == (EMPTY_ENTRY,) * 3

    imgui = DummyImGui(expanded={"explode"})
    render_commands_panel(imgui, [d], state=state, store=ValueStore(), invoker=invoker)
    assert "ValueError: bad input" in imgui.texts


def test_successful_run_clears_previous_error() -> None:
    d = build_descriptor(add)
    state = ConsoleState(errors={d.qualified_name: "RuntimeError: old"})
    assert run_command(_invoker(), d, state=state).ok
    assert d.qualified_name not in state.errors


def test_console_shows_initializing_until_discovery_completes() -> None:
    reg = CommandRegistry()

    @command(registry=reg)
    def ping() -> None:
        return None

    state = ConsoleState()
    imgui = DummyImGui(expanded={"ping"})
    invoker = _invoker()

    assert render_console(imgui, registry=reg, invoker=invoker, store=ValueStore(), state=state, height=600.0) == []
    assert imgui.texts == ["Initializing"]

    reg.discover()
    imgui = DummyImGui(expanded={"ping"}, clicked_ids={"Run"})
    results = render_console(imgui, registry=reg, invoker=invoker, store=ValueStore(), state=state, height=600.0)
    assert [r.name for r in results] == ["ping"]
    assert "Command history" in imgui.texts
    assert invoker.history.latest.name == "ping"


def _make_nudge(step: int):
    def nudge() -> None:
        calls.append((step, step))

    return nudge


def test_commands_sharing_a_qualified_name_get_distinct_ids() -> None:
    calls.clear()
    first = build_descriptor(_make_nudge(1))
    second = build_descriptor(_make_nudge(2))
    qn = first.qualified_name
    assert second.qualified_name == qn

    imgui = DummyImGui(expanded={"nudge"}, clicked_ids={f"{qn}#1/Run"})
    results = render_commands_panel(
        imgui, [first, second], state=ConsoleState(), store=ValueStore(), invoker=_invoker()
    )

    assert imgui.buttons == [f"{qn}#0/Run", f"{qn}#1/Run"]
    assert calls == [(2, 2)]
    assert [r.name for r in results] == ["nudge"]
