# どこで: `src/cmdpanel/interactive/runtime/window_loop.py`。
# 何を: コンソールウィンドウを pyglet の app loop（`pyglet.app.run()`）で回す最小ランナーを提供する。
# なぜ: OS 依存のイベント配送を pyglet に任せ、手動 `dispatch_events()` 由来の入力取りこぼしを避けるため。

from __future__ import annotations

from typing import Any, Callable

import pyglet


class WindowLoop:
    """1 つのウィンドウを目標 fps で描画し続ける。

    `draw_frame()` は back buffer へ描画するだけにし、`flip()` は pyglet（`Window.draw()`）が行う。
    """

    def __init__(
        self,
        window: Any,
        draw_frame: Callable[[], object],
        *,
        fps: float,
    ) -> None:
        """ループを初期化する。

        Parameters
        ----------
        window : Any
            描画対象の pyglet window。
        draw_frame : Callable[[], object]
            1 フレーム分の描画処理（戻り値は使わない）。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._window = window
        self._draw_frame = draw_frame
        self._fps = float(fps)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        window = self._window

        def request_exit(*_: object) -> None:
            # on_close から呼ばれる場合に引数が来ることがあるため *args を受ける。
            pyglet.app.exit()

        def on_draw() -> None:
            self._draw_frame()

        window.push_handlers(on_close=request_exit, on_draw=on_draw)

        def tick(dt: float) -> None:
            # 閉じられたウィンドウへ draw すると例外になり得る。
            if window in pyglet.app.windows:
                window.draw(dt)

        if self._fps <= 0:
            pyglet.clock.schedule(tick)
        else:
            pyglet.clock.schedule_interval(tick, 1.0 / float(self._fps))

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(tick)


__all__ = ["WindowLoop"]
