# どこで: `src/cmdpanel/interactive/console/__init__.py`。
# 何を: コマンドコンソール GUI の公開 API を集約する。
# なぜ: 実装を責務ごとに分割しつつ、利用側の import パスを安定させるため。

from __future__ import annotations

from .commands_panel import ConsoleState, render_commands_panel, run_command
from .gui import CommandConsole, render_console
from .history_panel import render_history_panel
from .widgets import render_parameter_widget

__all__ = [
    "CommandConsole",
    "ConsoleState",
    "render_commands_panel",
    "render_console",
    "render_history_panel",
    "render_parameter_widget",
    "run_command",
]
