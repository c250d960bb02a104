# どこで: `src/cmdpanel/interactive/console/gui.py`。
# 何を: コマンド一覧と実行履歴を pyimgui で描画するコンソール（初期化/1フレーム描画/破棄）を提供する。
# なぜ: 依存の重いライフサイクル管理を 1 箇所に閉じ込め、パネル描画を純粋に保つため。

from __future__ import annotations

import time
from typing import Any

from cmdpanel.core.command_registry import CommandRegistry
from cmdpanel.core.invocation import CommandInvoker, InvocationResult
from cmdpanel.core.value_store import ValueStore

from .commands_panel import ConsoleState, render_commands_panel
from .history_panel import render_history_panel, sync_history_size


# コマンド一覧が使う高さの割合（残りを履歴に使う）。
COMMANDS_HEIGHT_RATIO = 0.7


def render_console(
    imgui: Any,
    *,
    registry: CommandRegistry,
    invoker: CommandInvoker,
    store: ValueStore,
    state: ConsoleState,
    height: float,
) -> list[InvocationResult]:
    """コンソール本体を描画し、このフレームで実行した結果を返す。

    探索完了前は "Initializing" のみを表示し、引数描画も実行も行わない。
    """

    if not registry.ready:
        imgui.text("Initializing")
        return []

    commands_height = float(height) * COMMANDS_HEIGHT_RATIO
    imgui.begin_child("##commands_scroll", 0, commands_height, border=False)
    try:
        results = render_commands_panel(
            imgui,
            registry.commands,
            state=state,
            store=store,
            invoker=invoker,
        )
    finally:
        imgui.end_child()
    imgui.separator()
    render_history_panel(imgui, invoker.history, state=state)
    return results


class CommandConsole:
    """pyimgui でコマンドを編集/実行するためのコンソール。

    `draw_frame()` を呼ぶことで 1 フレーム分の UI を描画する。
    """

    def __init__(
        self,
        window: Any,
        *,
        registry: CommandRegistry,
        invoker: CommandInvoker,
        store: ValueStore,
        title: str = "Commands",
    ) -> None:
        """GUI の初期化（ImGui コンテキスト / renderer 作成）。"""

        import imgui  # type: ignore[import-untyped]

        try:
            from imgui.integrations import pyglet as imgui_pyglet  # type: ignore[import-untyped]
        except Exception as exc:
            raise RuntimeError(f"imgui.integrations.pyglet を import できない: {exc}") from exc

        self._window = window
        self._registry = registry
        self._invoker = invoker
        self._store = store
        self._title = str(title)
        self.state = ConsoleState(history_size=invoker.history.size)
        sync_history_size(invoker.history, self.state)

        # ImGui は「グローバルな current context」を前提にするため、自前コンテキストを作って切り替えながら使う。
        self._imgui = imgui
        self._context = imgui.create_context()
        imgui.set_current_context(self._context)
        imgui.style_colors_dark()
        self._renderer = imgui_pyglet.create_renderer(window)

        self._prev_time = time.monotonic()
        self._closed = False

    def draw_frame(self) -> list[InvocationResult]:
        """1 フレーム分の GUI を描画し、このフレームで実行した結果を返す。

        `flip()` は呼ばない。呼び出し側（pyglet の Window.draw）が担当する。
        """

        if self._closed:
            return []

        now = time.monotonic()
        dt = now - self._prev_time
        self._prev_time = now

        imgui = self._imgui
        imgui.set_current_context(self._context)

        self._sync_io(dt)
        imgui.new_frame()

        # 1 ウィンドウで全面表示する（位置/サイズ固定）。
        imgui.set_next_window_position(0, 0)
        imgui.set_next_window_size(self._window.width, self._window.height)
        imgui.begin(
            self._title,
            flags=imgui.WINDOW_NO_RESIZE
            | imgui.WINDOW_NO_COLLAPSE
            | imgui.WINDOW_NO_TITLE_BAR,
        )
        try:
            results = render_console(
                imgui,
                registry=self._registry,
                invoker=self._invoker,
                store=self._store,
                state=self.state,
                height=float(self._window.height),
            )
        finally:
            imgui.end()

        imgui.render()

        import pyglet

        pyglet.gl.glClearColor(0.12, 0.12, 0.12, 1.0)
        self._window.clear()
        self._renderer.render(imgui.get_draw_data())
        return results

    def _sync_io(self, dt: float) -> None:
        """表示サイズと Retina 倍率、経過時間を ImGui IO へ反映する。"""

        io = self._imgui.get_io()
        io.delta_time = max(float(dt), 1e-4)
        w, h = int(self._window.width), int(self._window.height)
        fb_w, fb_h = self._window.get_framebuffer_size()
        io.display_size = (float(w), float(h))
        io.display_fb_scale = (fb_w / max(1, w), fb_h / max(1, h))

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する。二重 close は無視する。"""

        if self._closed:
            return
        self._closed = True

        shutdown = getattr(self._renderer, "shutdown", None)
        if callable(shutdown):
            shutdown()
        self._imgui.destroy_context(self._context)
        self._window.close()


__all__ = ["CommandConsole", "render_console"]
