# どこで: `src/cmdpanel/core/command_registry.py`。
# 何を: `@command` で登録された関数を収集し、CommandDescriptor の一覧として 1 回だけ公開するレジストリ。
# なぜ: コマンド探索（モジュール import + シグネチャ解析）を描画スレッドから切り離し、
#       「未完成の一覧」を描画側に見せないようにするため。

from __future__ import annotations

import importlib
import inspect
import logging
import sys
import threading
from collections.abc import Iterable, Iterator
from concurrent.futures import Future
from typing import Any, Callable, TypeVar

from .descriptor import CommandDescriptor, build_descriptor, qualified_name_of
from .errors import CommandDefinitionError

F = TypeVar("F", bound=Callable[..., Any])

_logger = logging.getLogger(__name__)


def _resolve_owner(func: Callable[..., Any]) -> Any | None:
    """`Class.method` 形式の qualname から所属クラスを解決する。解決できなければ None。"""

    qualname = str(getattr(func, "__qualname__", ""))
    if "." not in qualname or "<locals>" in qualname:
        return None
    owner: Any = sys.modules.get(str(getattr(func, "__module__", "")))
    for part in qualname.split(".")[:-1]:
        if owner is None:
            return None
        owner = getattr(owner, part, None)
    return owner


def is_zero_receiver(func: Callable[..., Any]) -> bool:
    """レシーバ（self/cls）無しで呼べる関数かどうかを返す。

    クラス内で定義された関数は staticmethod の場合のみ True。
    所属を解決できない場合（ローカル関数など）は True とみなす。
    """

    owner = _resolve_owner(func)
    if not isinstance(owner, type):
        return True
    name = str(func.__qualname__).rsplit(".", 1)[-1]
    return isinstance(inspect.getattr_static(owner, name, None), staticmethod)


class CommandRegistry:
    """コマンド関数の登録と、CommandDescriptor 一覧の公開を担うレジストリ。

    Notes
    -----
    - 登録（`_register`）は import 時に行われ、順序が探索順になる。
    - `discover()` は 1 回だけ一覧を構築し、タプルとして一括で公開する。
      2 回目以降は公開済みのタプルをそのまま返す。
    - 公開後の登録は一覧に反映されない（警告ログのみ）。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._lock = threading.Lock()
        self._discover_lock = threading.Lock()
        # 関数オブジェクト → staticmethod として登録されたか。qualified name は重複し得る。
        self._pending: dict[Callable[..., Any], bool] = {}
        self._commands: tuple[CommandDescriptor, ...] = ()
        self._ready = False
        self._future: Future[tuple[CommandDescriptor, ...]] | None = None

    def _register(self, func: Callable[..., Any], *, static: bool = False) -> None:
        """関数を登録する（内部用、`@command` からのみ呼ぶ）。

        同じ関数オブジェクトの再登録は 1 件にまとめる（順序は初回のまま）。
        qualified name が同じでも別の関数なら別のコマンドとして扱う。
        """

        with self._lock:
            if self._ready:
                _logger.warning(
                    "探索完了後の登録は一覧に反映されません: %s", qualified_name_of(func)
                )
                return
            self._pending[func] = self._pending.get(func, False) or bool(static)

    @property
    def ready(self) -> bool:
        """一覧が公開済みなら True。"""

        return self._ready

    @property
    def commands(self) -> tuple[CommandDescriptor, ...]:
        """公開済みの一覧。未公開の間は空タプル。"""

        return self._commands

    @property
    def discovery_future(self) -> Future[tuple[CommandDescriptor, ...]] | None:
        return self._future

    def registered_names(self) -> tuple[str, ...]:
        """登録済み（未公開を含む）関数の qualified name を登録順で返す。"""

        with self._lock:
            return tuple(qualified_name_of(func) for func in self._pending)

    def get(self, name: str) -> CommandDescriptor:
        """表示名または qualified name から公開済み CommandDescriptor を返す。

        Raises
        ------
        KeyError
            一致するコマンドが無い場合。
        """

        for descriptor in self._commands:
            if descriptor.qualified_name == name:
                return descriptor
        for descriptor in self._commands:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"command {name!r} は見つかりません")

    def __contains__(self, name: object) -> bool:
        try:
            self.get(str(name))
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def discover(
        self,
        modules: Iterable[str] = (),
        *,
        strict_overrides: bool = False,
    ) -> tuple[CommandDescriptor, ...]:
        """モジュールを import して登録を集め、CommandDescriptor 一覧を構築・公開する。

        Parameters
        ----------
        modules : Iterable[str]
            探索前に import するモジュール名。import 時に `@command` が登録される。
        strict_overrides : bool
            True の場合、型と両立しない display_as で例外を送出する。

        Returns
        -------
        tuple[CommandDescriptor, ...]
            登録順のコマンド一覧。2 回目以降は公開済みの一覧を返す。

        Raises
        ------
        ImportError
            モジュールを import できない場合（一覧は公開されない）。
        OverrideDirectiveError
            strict_overrides=True で不正な display_as があった場合。
        """

        with self._discover_lock:
            if self._ready:
                return self._commands

            for module in modules:
                importlib.import_module(str(module))

            with self._lock:
                pending = list(self._pending.items())

            built: list[CommandDescriptor] = []
            for func, static in pending:
                if not static and not is_zero_receiver(func):
                    _logger.warning(
                        "staticmethod ではないため除外します: %s", qualified_name_of(func)
                    )
                    continue
                built.append(build_descriptor(func, strict_overrides=strict_overrides))

            # 一覧はタプルとして一括で差し替える（部分的な一覧は公開しない）。
            with self._lock:
                self._commands = tuple(built)
                self._ready = True
            _logger.info("コマンドを %d 件検出しました", len(built))
            return self._commands

    def start_discovery(
        self,
        modules: Iterable[str] = (),
        *,
        strict_overrides: bool = False,
    ) -> Future[tuple[CommandDescriptor, ...]]:
        """バックグラウンドスレッドで `discover()` を 1 回だけ実行する。

        既に開始済みなら同じ Future を返す。失敗は Future に格納され、
        `ready` は False のまま（キャンセル/タイムアウトは無い）。
        """

        with self._lock:
            if self._future is not None:
                return self._future
            future: Future[tuple[CommandDescriptor, ...]] = Future()
            self._future = future
        module_names = tuple(str(m) for m in modules)

        def worker() -> None:
            future.set_running_or_notify_cancel()
            try:
                result = self.discover(module_names, strict_overrides=strict_overrides)
            except BaseException as exc:
                _logger.exception("コマンド探索に失敗しました")
                future.set_exception(exc)
                return
            future.set_result(result)

        thread = threading.Thread(target=worker, name="cmdpanel-discovery", daemon=True)
        thread.start()
        return future

    def reset(self) -> None:
        """登録と公開済み一覧を破棄する（プロセス終了時/テスト用）。"""

        with self._discover_lock, self._lock:
            self._pending.clear()
            self._commands = ()
            self._ready = False
            self._future = None


command_registry = CommandRegistry()
"""グローバルなコマンドレジストリインスタンス。"""


def command(
    func: Callable[..., Any] | None = None,
    *,
    registry: CommandRegistry | None = None,
):
    """関数をコマンドとして登録するデコレータ。

    関数名がそのまま表示名になる。`@command` / `@command()` のどちらでも使える。

    Parameters
    ----------
    func : Callable or None, optional
        デコレート対象。引数付きデコレータ利用時は None。
    registry : CommandRegistry or None, optional
        登録先。None の場合はグローバルな `command_registry`。

    Raises
    ------
    CommandDefinitionError
        classmethod / 束縛メソッド / 呼び出し不能なオブジェクトが渡された場合。

    Examples
    --------
    @command
    def spawn_enemies(count: int, speed: float) -> None:
        ...
    """

    target_registry = command_registry if registry is None else registry

    def decorator(f: F) -> F:
        if isinstance(f, classmethod):
            raise CommandDefinitionError("classmethod はコマンドにできません（staticmethod を使う）")
        if isinstance(f, staticmethod):
            target_registry._register(f.__func__, static=True)
            return f
        if inspect.ismethod(f):
            raise CommandDefinitionError(f"束縛メソッドはコマンドにできません: {f!r}")
        if not inspect.isfunction(f):
            raise CommandDefinitionError(f"関数以外はコマンドにできません: {f!r}")
        target_registry._register(f)
        return f

    if func is None:
        return decorator
    return decorator(func)  # type: ignore[arg-type]


__all__ = ["CommandRegistry", "command", "command_registry", "is_zero_receiver"]
