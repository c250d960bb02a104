"""
どこで: `src/cmdpanel/api/runner.py`。公開 API のランナー実装。
何を: コマンド探索をバックグラウンドで開始し、pyglet + pyimgui のコンソールウィンドウを開く。
なぜ: 任意のスクリプトから 1 行でコマンドコンソールを起動できる経路を用意するため。
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pyglet

from cmdpanel.core.command_registry import CommandRegistry, command_registry
from cmdpanel.core.history import CommandHistory
from cmdpanel.core.invocation import CommandInvoker
from cmdpanel.core.runtime_config import runtime_config, set_config_path
from cmdpanel.core.value_store import ValueStore
from cmdpanel.interactive.runtime.console_system import ConsoleWindowSystem
from cmdpanel.interactive.runtime.window_loop import WindowLoop


def run(
    modules: Iterable[str] = (),
    *,
    config_path: str | Path | None = None,
    registry: CommandRegistry | None = None,
    fps: float | None = None,
) -> None:
    """コマンドコンソールを起動し、ウィンドウが閉じられるまでブロックする。

    Parameters
    ----------
    modules : Iterable[str]
        探索前に import するモジュール名。config の `discovery.modules` に追加される。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    registry : CommandRegistry | None
        使用するレジストリ。None の場合はグローバルな `command_registry`。
    fps : float | None
        目標フレームレート。None の場合は config の `ui.fps`。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    reg = command_registry if registry is None else registry

    # vsync はウィンドウ作成時に参照されるため、ここで固定しておく。
    pyglet.options["vsync"] = False

    # 探索は描画スレッドと並行に走らせる。完了までは "Initializing" を表示する。
    reg.start_discovery(
        (*cfg.modules, *(str(m) for m in modules)),
        strict_overrides=cfg.strict_overrides,
    )

    history = CommandHistory(cfg.history_size)
    invoker = CommandInvoker(history)
    store = ValueStore(isolation=cfg.value_store_isolation)  # type: ignore[arg-type]

    console = ConsoleWindowSystem(registry=reg, invoker=invoker, store=store, config=cfg)
    loop = WindowLoop(
        console.window,
        console.draw_frame,
        fps=cfg.fps if fps is None else float(fps),
    )
    try:
        loop.run()
    finally:
        console.close()
