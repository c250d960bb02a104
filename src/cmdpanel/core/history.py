# どこで: `src/cmdpanel/core/history.py`。
# 何を: コマンド実行履歴（名前, 経過ms）を新しい順に保持する固定長リングバッファ。
# なぜ: 直近の実行時間を GUI で比較できるようにしつつ、メモリ使用量を上限で抑えるため。

from __future__ import annotations

from dataclasses import dataclass

HISTORY_SIZE_MIN = 1
HISTORY_SIZE_MAX = 100
HISTORY_SIZE_DEFAULT = 10


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    name: str
    elapsed_ms: float


EMPTY_ENTRY = HistoryEntry(name="None", elapsed_ms=0.0)
"""未使用スロットを表す番兵。"""


def clamp_history_size(size: int) -> int:
    """履歴サイズを [HISTORY_SIZE_MIN, HISTORY_SIZE_MAX] に丸めて返す。"""

    return max(HISTORY_SIZE_MIN, min(HISTORY_SIZE_MAX, int(size)))


class CommandHistory:
    """新しい順（index 0 が最新）の固定長履歴。

    長さは常に size と等しく、未使用スロットは EMPTY_ENTRY で埋まる。
    """

    def __init__(self, size: int = HISTORY_SIZE_DEFAULT) -> None:
        self._entries: list[HistoryEntry] = []
        self.resize(size)

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, name: str, elapsed_ms: float) -> None:
        """先頭に追加し、既存エントリを 1 つ後ろへずらす（末尾は捨てる）。"""

        self._entries.insert(0, HistoryEntry(name=str(name), elapsed_ms=float(elapsed_ms)))
        self._entries.pop()

    def resize(self, size: int) -> None:
        """容量を変更する。

        縮小時は新しい方から size 件を残し、拡大時は末尾を EMPTY_ENTRY で埋める。

        Raises
        ------
        ValueError
            size が 1 未満の場合（上限側の丸めは呼び出し側で行う）。
        """

        n = int(size)
        if n < HISTORY_SIZE_MIN:
            raise ValueError(f"history size は {HISTORY_SIZE_MIN} 以上: got={size!r}")
        old = len(self._entries)
        if n < old:
            del self._entries[n:]
        else:
            self._entries.extend([EMPTY_ENTRY] * (n - old))

    def read(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def latest(self) -> HistoryEntry:
        return self._entries[0]


__all__ = [
    "EMPTY_ENTRY",
    "HISTORY_SIZE_DEFAULT",
    "HISTORY_SIZE_MAX",
    "HISTORY_SIZE_MIN",
    "CommandHistory",
    "HistoryEntry",
    "clamp_history_size",
]
