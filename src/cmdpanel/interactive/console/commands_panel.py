# どこで: `src/cmdpanel/interactive/console/commands_panel.py`。
# 何を: コマンド一覧（折りたたみ + 引数フォーム + Run ボタン）を描画し、Run 押下で実行する。
# なぜ: 「表示できない引数があれば実行させない」判定と、実行失敗の表示を 1 か所に閉じ込めるため。

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from cmdpanel.core.descriptor import CommandDescriptor
from cmdpanel.core.history import HISTORY_SIZE_DEFAULT
from cmdpanel.core.invocation import CommandInvoker, InvocationResult
from cmdpanel.core.value_store import ValueStore

from .widgets import render_parameter_widget

_logger = logging.getLogger(__name__)

ERROR_RGBA = (1.0, 0.3, 0.3, 1.0)


@dataclass(slots=True)
class ConsoleState:
    """フレームをまたいで保持する GUI 状態。"""

    errors: dict[str, str] = field(default_factory=dict)
    history_size: int = HISTORY_SIZE_DEFAULT
    show_full_history: bool = False
    last_result: InvocationResult | None = None


def run_command(
    invoker: CommandInvoker,
    descriptor: CommandDescriptor,
    *,
    state: ConsoleState,
) -> InvocationResult:
    """コマンドを実行し、結果を state に記録して返す。

    コマンド本体の例外はここで受け止めてログと GUI 表示に回す（履歴には積まれない）。
    """

    try:
        result = invoker.invoke(descriptor)
    except Exception as exc:
        _logger.exception("コマンドの実行に失敗しました: %s", descriptor.qualified_name)
        state.errors[descriptor.qualified_name] = f"{type(exc).__name__}: {exc}"
        result = InvocationResult(
            name=descriptor.name,
            elapsed_ms=invoker.stopwatch.elapsed_ms,
            error=exc,
        )
    else:
        state.errors.pop(descriptor.qualified_name, None)
    state.last_result = result
    return result


def render_command_form(
    imgui: Any,
    descriptor: CommandDescriptor,
    *,
    store: ValueStore,
) -> bool:
    """引数フォームを描画し、実行可能なら Run ボタンの押下有無を返す。"""

    can_run = True
    for parameter in descriptor.parameters:
        imgui.push_id(parameter.name)
        try:
            if not parameter.is_supported:
                imgui.text_colored(f'Can\'t display "{parameter.name}" parameter', *ERROR_RGBA)
                can_run = False
                continue
            changed, value = render_parameter_widget(
                imgui, parameter, store=store, command=descriptor
            )
            if changed:
                parameter.value = value
        finally:
            imgui.pop_id()

    if not can_run:
        imgui.text_colored(
            "Replace all unsupported parameters with supported ones to run", *ERROR_RGBA
        )
        return False
    return bool(imgui.button("Run"))


def render_commands_panel(
    imgui: Any,
    commands: Sequence[CommandDescriptor],
    *,
    state: ConsoleState,
    store: ValueStore,
    invoker: CommandInvoker,
) -> list[InvocationResult]:
    """全コマンドを折りたたみ表示で描画し、このフレームで実行した結果を返す。"""

    results: list[InvocationResult] = []
    for index, descriptor in enumerate(commands):
        key = descriptor.qualified_name
        # qualified name は重複し得るため、一覧内の位置も ID に含める。
        imgui.push_id(f"{key}#{index}")
        try:
            expanded, _visible = imgui.collapsing_header(descriptor.name)
            if not expanded:
                continue
            if descriptor.doc:
                imgui.text_disabled(descriptor.doc.splitlines()[0])
            if render_command_form(imgui, descriptor, store=store):
                results.append(run_command(invoker, descriptor, state=state))
            error = state.errors.get(key)
            if error is not None:
                imgui.text_colored(error, *ERROR_RGBA)
        finally:
            imgui.pop_id()
    return results


__all__ = [
    "ConsoleState",
    "render_command_form",
    "render_commands_panel",
    "run_command",
]
