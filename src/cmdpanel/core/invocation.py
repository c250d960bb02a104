# どこで: `src/cmdpanel/core/invocation.py`。
# 何を: CommandDescriptor の現在値で関数を呼び出し、経過時間を計測して履歴へ積む。
# なぜ: 実行/計測/履歴の順序を 1 か所に固定し、失敗時に履歴が汚れないことを保証するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .descriptor import CommandDescriptor
from .history import CommandHistory
from .stopwatch import Stopwatch, default_stopwatch


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """1 回分の実行結果。

    error は GUI 側で失敗を表示するために使う（`invoke()` 自体は例外を送出する）。
    """

    name: str
    elapsed_ms: float
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def gather_arguments(descriptor: CommandDescriptor) -> tuple[list[Any], dict[str, Any]]:
    """引数の現在値を宣言順に集め、(位置引数, キーワード専用引数) を返す。"""

    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for p in descriptor.parameters:
        if p.is_keyword_only:
            kwargs[p.name] = p.value
        else:
            args.append(p.value)
    return args, kwargs


class CommandInvoker:
    """コマンドを 1 回ずつ同期実行する。

    Notes
    -----
    表示できない引数（UNSUPPORTED）の検査は行わない。GUI 側が Run を出さないことで防ぐ。
    """

    def __init__(
        self,
        history: CommandHistory,
        *,
        stopwatch: Stopwatch | None = None,
    ) -> None:
        self.history = history
        self.stopwatch = default_stopwatch if stopwatch is None else stopwatch

    def invoke(self, descriptor: CommandDescriptor) -> InvocationResult:
        """コマンドを実行し、成功時のみ履歴へ (表示名, 経過ms) を積む。

        Returns
        -------
        InvocationResult
            表示名と経過ミリ秒。

        Raises
        ------
        Exception
            コマンド本体が送出した例外をそのまま送出する（履歴は変更しない）。
        """

        args, kwargs = gather_arguments(descriptor)
        sw = self.stopwatch
        sw.restart()
        try:
            descriptor.func(*args, **kwargs)
        finally:
            sw.stop()
        elapsed_ms = sw.elapsed_ms
        self.history.push(descriptor.name, elapsed_ms)
        return InvocationResult(name=descriptor.name, elapsed_ms=elapsed_ms)


__all__ = ["CommandInvoker", "InvocationResult", "gather_arguments"]
