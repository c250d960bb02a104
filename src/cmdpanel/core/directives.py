# どこで: `src/cmdpanel/core/directives.py`。
# 何を: 引数の表示方法を上書きする `display_as` デコレータと、その指定（DisplayAs）を提供する。
# なぜ: 既定の型ベース判定では表せない表示（スライダー/テキストエリア/確定入力）を宣言的に指定できるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from .errors import CommandDefinitionError
from .widget_kind import Display

F = TypeVar("F", bound=Callable[..., Any])

DIRECTIVES_ATTR = "__cmdpanel_display_as__"


@dataclass(frozen=True, slots=True)
class DisplayAs:
    """1 引数分の表示上書き指定。

    display が None の場合はスライダー指定で、slider_min/slider_max を持つ。
    """

    parameter: str
    display: Display | None = None
    slider_min: int | float | None = None
    slider_max: int | float | None = None

    @property
    def is_slider(self) -> bool:
        return self.display is None

    @property
    def is_float_slider(self) -> bool:
        """境界のどちらかが float の場合 True（int 引数には適用できない）。"""

        return self.is_slider and (
            isinstance(self.slider_min, float) or isinstance(self.slider_max, float)
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def make_directive(
    parameter: str,
    display_or_min: Display | int | float,
    max_value: int | float | None = None,
) -> DisplayAs:
    """display_as の引数を検証して DisplayAs を返す。

    Raises
    ------
    CommandDefinitionError
        指定の形が不正な場合（型互換性はここでは見ない）。
    """

    name = str(parameter)
    if not name:
        raise CommandDefinitionError("display_as の parameter 名が空です")

    if isinstance(display_or_min, Display):
        if max_value is not None:
            raise CommandDefinitionError(
                f"display_as({name!r}, {display_or_min}) に範囲は指定できません"
            )
        return DisplayAs(parameter=name, display=display_or_min)

    if not _is_number(display_or_min) or not _is_number(max_value):
        raise CommandDefinitionError(
            f"display_as({name!r}, ...) は Display か (min, max) の数値ペアが必要です: "
            f"got=({display_or_min!r}, {max_value!r})"
        )
    return DisplayAs(parameter=name, slider_min=display_or_min, slider_max=max_value)


def display_as(
    parameter: str,
    display_or_min: Display | int | float,
    max_value: int | float | None = None,
) -> Callable[[F], F]:
    """引数の表示方法を上書きするデコレータ。

    `@command` との順序は問わない。同じ関数に複数回付けられ、
    同一引数への重複指定はソース上で上にあるものが優先される。

    Examples
    --------
    @command
    @display_as("speed", 0.0, 10.0)
    @display_as("note", Display.TEXT_AREA)
    def set_speed(speed: float, note: str) -> None:
        ...
    """

    directive = make_directive(parameter, display_or_min, max_value)

    def decorator(func: F) -> F:
        target = getattr(func, "__func__", func)
        existing: tuple[DisplayAs, ...] = getattr(target, DIRECTIVES_ATTR, ())
        # デコレータは下から適用されるため、先頭へ積むとソース順になる。
        setattr(target, DIRECTIVES_ATTR, (directive, *existing))
        return func

    return decorator


def directives_of(func: Callable[..., Any]) -> tuple[DisplayAs, ...]:
    """関数に付けられた DisplayAs をソース順で返す。"""

    target = getattr(func, "__func__", func)
    return tuple(getattr(target, DIRECTIVES_ATTR, ()))


def first_directive_for(
    directives: tuple[DisplayAs, ...], parameter: str
) -> DisplayAs | None:
    """parameter 名に一致する最初の指定を返す。"""

    for directive in directives:
        if directive.parameter == parameter:
            return directive
    return None


__all__ = [
    "DisplayAs",
    "directives_of",
    "display_as",
    "first_directive_for",
    "make_directive",
]
