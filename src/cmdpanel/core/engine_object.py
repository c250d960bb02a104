# どこで: `src/cmdpanel/core/engine_object.py`。
# 何を: コマンド引数として「参照で渡せる」ホスト側オブジェクトの基底クラスと、生存インスタンスの一覧を提供する。
# なぜ: 参照型引数をフォームで選択させるため、候補となる生存オブジェクトを列挙できる必要があるため。

from __future__ import annotations

import threading
import weakref
from typing import TypeVar

T = TypeVar("T", bound="EngineObject")

_lock = threading.Lock()
_live_objects: "weakref.WeakSet[EngineObject]" = weakref.WeakSet()


class EngineObject:
    """参照ウィジェットで選択できるオブジェクトの基底クラス。

    生成されたインスタンスは弱参照で追跡され、`find_objects()` から列挙できる。
    サブクラスを型注釈に使った引数は OBJECT_REFERENCE として解決される。
    """

    def __init__(self, name: str = "") -> None:
        self.name = str(name) or type(self).__name__
        with _lock:
            _live_objects.add(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def find_objects(type_: type[T]) -> list[T]:
    """生存している type_ のインスタンスを名前順で返す。"""

    with _lock:
        found = [obj for obj in _live_objects if isinstance(obj, type_)]
    found.sort(key=lambda obj: (obj.name, id(obj)))
    return found  # type: ignore[return-value]


__all__ = ["EngineObject", "find_objects"]
