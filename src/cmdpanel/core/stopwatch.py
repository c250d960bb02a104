"""
どこで: `src/cmdpanel/core/stopwatch.py`。
何を: コマンド実行時間を測るストップウォッチと、コマンド本体から計測区間を絞るための timer 関数を提供する。
なぜ: 前処理を除いた「本当に測りたい区間」だけを履歴に残せるようにするため。
"""

from __future__ import annotations

import time


class Stopwatch:
    """`time.perf_counter_ns()` ベースのストップウォッチ。

    Notes
    -----
    停止中の `stop()` は何もしない。コマンド本体が先に止めた場合、
    呼び出し側の `stop()` で計測区間が延びないようにするため。
    """

    def __init__(self) -> None:
        self._t0_ns: int | None = None
        self._elapsed_ns = 0

    @property
    def running(self) -> bool:
        return self._t0_ns is not None

    def restart(self) -> None:
        """経過時間を 0 に戻して計測を開始する。"""

        self._elapsed_ns = 0
        self._t0_ns = time.perf_counter_ns()

    def stop(self) -> None:
        t0 = self._t0_ns
        if t0 is None:
            return
        self._elapsed_ns += int(time.perf_counter_ns() - t0)
        self._t0_ns = None

    @property
    def elapsed_ns(self) -> int:
        t0 = self._t0_ns
        if t0 is None:
            return int(self._elapsed_ns)
        return int(self._elapsed_ns + (time.perf_counter_ns() - t0))

    @property
    def elapsed_ms(self) -> float:
        return float(self.elapsed_ns) / 1_000_000.0


default_stopwatch = Stopwatch()
"""CommandInvoker が既定で共有するストップウォッチ。"""


def start() -> None:
    """実行中コマンドの計測を今から測り直す。"""

    default_stopwatch.restart()


def stop() -> None:
    """実行中コマンドの計測をここで止める（以降は履歴の時間に含まれない）。"""

    default_stopwatch.stop()


__all__ = ["Stopwatch", "default_stopwatch", "start", "stop"]
