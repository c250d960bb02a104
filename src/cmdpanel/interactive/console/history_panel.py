# どこで: `src/cmdpanel/interactive/console/history_panel.py`。
# 何を: 実行履歴（最新 1 件 + 展開時は全件）と履歴サイズのスライダーを描画する。
# なぜ: 履歴サイズの丸めとリサイズを GUI 側の 1 か所で行うため。

from __future__ import annotations

from typing import Any

from cmdpanel.core.history import (
    HISTORY_SIZE_MAX,
    HISTORY_SIZE_MIN,
    CommandHistory,
    HistoryEntry,
    clamp_history_size,
)

from .commands_panel import ConsoleState


def format_history_entry(entry: HistoryEntry) -> str:
    return f"{entry.name}: {entry.elapsed_ms:.3f} ms"


def sync_history_size(history: CommandHistory, state: ConsoleState) -> None:
    """state.history_size を丸め、履歴バッファの容量と一致させる。"""

    size = clamp_history_size(state.history_size)
    state.history_size = size
    if history.size != size:
        history.resize(size)


def render_history_panel(imgui: Any, history: CommandHistory, *, state: ConsoleState) -> None:
    imgui.text("Command history")
    imgui.same_line()
    changed, size = imgui.slider_int(
        "History size", int(state.history_size), HISTORY_SIZE_MIN, HISTORY_SIZE_MAX
    )
    if changed:
        state.history_size = int(size)
    sync_history_size(history, state)

    entries = history.read()
    imgui.text(format_history_entry(entries[0]))

    _clicked, show = imgui.checkbox("Show full history", bool(state.show_full_history))
    state.show_full_history = bool(show)
    if not state.show_full_history:
        return

    imgui.begin_child("##history_scroll", 0, 0, border=False)
    try:
        imgui.indent()
        for entry in entries[1:]:
            imgui.text(format_history_entry(entry))
        imgui.unindent()
    finally:
        imgui.end_child()


__all__ = ["format_history_entry", "render_history_panel", "sync_history_size"]
