# どこで: `src/cmdpanel/interactive/runtime/console_system.py`。
# 何を: コマンドコンソールを「1フレーム描画できるサブシステム」として提供する。
# なぜ: `src/cmdpanel/api/runner.py` の `run()` から GUI 初期化/描画/後始末を分離するため。

from __future__ import annotations

from typing import Any

from cmdpanel.core.command_registry import CommandRegistry
from cmdpanel.core.invocation import CommandInvoker
from cmdpanel.core.runtime_config import RuntimeConfig
from cmdpanel.core.value_store import ValueStore
from cmdpanel.interactive.console import CommandConsole


def _open_window(config: RuntimeConfig, *, caption: str = "Commands") -> Any:
    """config の位置/サイズでコンソール用の pyglet ウィンドウを開く（リサイズ可、vsync なし）。"""

    import pyglet

    w, h = config.window_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(w),
        height=int(h),
        caption=caption,
        resizable=True,
        vsync=False,
        config=pyglet.gl.Config(double_buffer=True),  # type: ignore[abstract]
    )
    window.set_location(*config.window_position)
    return window


class ConsoleWindowSystem:
    """コマンドコンソール（pyglet ウィンドウ 1 枚）のサブシステム。"""

    def __init__(
        self,
        *,
        registry: CommandRegistry,
        invoker: CommandInvoker,
        store: ValueStore,
        config: RuntimeConfig,
    ) -> None:
        """ウィンドウと CommandConsole を初期化する。"""

        self.window = _open_window(config)
        self._console = CommandConsole(
            self.window,
            registry=registry,
            invoker=invoker,
            store=store,
        )

    def draw_frame(self) -> None:
        """1 フレーム分の GUI を描画する（`flip()` は呼ばない）。"""

        self._console.draw_frame()

    def close(self) -> None:
        self._console.close()


__all__ = ["ConsoleWindowSystem"]
