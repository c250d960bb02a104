# どこで: `src/cmdpanel/core/errors.py`。
# 何を: コマンド定義/登録で使う例外型を定義する。
# なぜ: 呼び出し側が「定義ミス」と「コマンド本体の失敗」を区別して扱えるようにするため。

from __future__ import annotations


class CommandDefinitionError(ValueError):
    """コマンドとして登録できない定義が渡された場合の例外。"""


class OverrideDirectiveError(CommandDefinitionError):
    """display_as の指定が引数の型と両立しない場合の例外（strict モードのみ）。"""


__all__ = ["CommandDefinitionError", "OverrideDirectiveError"]
