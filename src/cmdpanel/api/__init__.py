# どこで: `src/cmdpanel/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして command/display_as/timer/run を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from cmdpanel.core import stopwatch as timer
from cmdpanel.core.command_registry import command, command_registry
from cmdpanel.core.directives import display_as
from cmdpanel.core.engine_object import EngineObject
from cmdpanel.core.widget_kind import Display

__all__ = [
    "Display",
    "EngineObject",
    "command",
    "command_registry",
    "display_as",
    "run",
    "timer",
]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
