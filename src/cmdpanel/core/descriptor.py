# どこで: `src/cmdpanel/core/descriptor.py`。
# 何を: コマンド 1 つ分の描画/実行用モデル（CommandDescriptor / ParameterData）を構築する。
# なぜ: シグネチャ解析と resolver 呼び出しを登録時の 1 回にまとめ、描画側は結果を読むだけにするため。

from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Callable

from .directives import DisplayAs, directives_of, first_directive_for
from .errors import OverrideDirectiveError
from .resolver import resolve_parameter
from .widget_kind import WidgetKind

_logger = logging.getLogger(__name__)

# 値を渡せない引数の種類（常に UNSUPPORTED）。
_VARIADIC_KINDS = frozenset({inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD})


@dataclass(slots=True)
class ParameterData:
    """1 引数分の表示/編集状態。

    `value` はフォームで編集される現在値で、フレームをまたいで保持される。
    """

    name: str
    type_: Any
    kind: WidgetKind
    value: Any
    index: int
    param_kind: inspect._ParameterKind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    slider_range: tuple[Any, Any] | None = None

    @property
    def is_supported(self) -> bool:
        return self.kind is not WidgetKind.UNSUPPORTED

    @property
    def is_keyword_only(self) -> bool:
        return self.param_kind is inspect.Parameter.KEYWORD_ONLY


@dataclass(slots=True)
class CommandDescriptor:
    """コマンド 1 つ分の解決済みモデル。"""

    name: str
    qualified_name: str
    func: Callable[..., Any]
    parameters: tuple[ParameterData, ...] = field(default_factory=tuple)
    doc: str = ""

    @property
    def can_run(self) -> bool:
        """全引数が表示可能な場合 True。"""

        return all(p.is_supported for p in self.parameters)

    def unsupported_parameters(self) -> tuple[ParameterData, ...]:
        return tuple(p for p in self.parameters if not p.is_supported)

    def parameter(self, name: str) -> ParameterData:
        """引数名から ParameterData を返す。

        Raises
        ------
        KeyError
            未知の引数名の場合。
        """

        for p in self.parameters:
            if p.name == name:
                return p
        raise KeyError(f"{self.qualified_name} has no parameter {name!r}")


def qualified_name_of(func: Callable[..., Any]) -> str:
    module = str(getattr(func, "__module__", "") or "")
    qualname = str(getattr(func, "__qualname__", getattr(func, "__name__", "?")))
    return f"{module}.{qualname}" if module else qualname


def _type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    """型注釈を評価して返す。

    まとめて評価できない場合は引数ごとに評価し、評価できなかった注釈だけを
    文字列のまま残す（resolver では UNSUPPORTED になる）。
    """

    try:
        return typing.get_type_hints(func)
    except Exception:
        pass

    raw = dict(getattr(func, "__annotations__", {}) or {})
    globalns = getattr(func, "__globals__", {})
    hints: dict[str, Any] = {}
    for name, annotation in raw.items():
        if not isinstance(annotation, str):
            hints[name] = annotation
            continue
        try:
            hints[name] = eval(annotation, globalns)  # noqa: S307
        except Exception as exc:
            _logger.warning(
                "型注釈を評価できません: %s.%s annotation=%r (%s)",
                qualified_name_of(func),
                name,
                annotation,
                exc,
            )
            hints[name] = annotation
    return hints


def _initial_value(param: inspect.Parameter, type_: Any, default: Any) -> Any:
    """シグネチャの既定値が型に合えばそれを、合わなければ解決済み既定値を返す。"""

    if param.default is inspect.Parameter.empty or param.default is None:
        return default
    origin = typing.get_origin(type_)
    if origin is tuple or origin is list:
        if isinstance(param.default, (tuple, list)):
            return origin(param.default)
        return default
    if isinstance(type_, type) and isinstance(param.default, type_):
        return param.default
    # `x: float = 1` のような数値の昇格は許容する。
    if type_ is float and isinstance(param.default, int) and not isinstance(param.default, bool):
        return float(param.default)
    return default


def build_descriptor(
    func: Callable[..., Any],
    *,
    directives: tuple[DisplayAs, ...] | None = None,
    strict_overrides: bool = False,
) -> CommandDescriptor:
    """関数のシグネチャを解析して CommandDescriptor を構築する。

    Parameters
    ----------
    func : Callable
        コマンド本体。
    directives : tuple[DisplayAs, ...] or None
        表示上書き指定。None の場合は func に付けられた display_as を使う。
    strict_overrides : bool
        True の場合、型と両立しない display_as で OverrideDirectiveError を送出する。
    """

    if directives is None:
        directives = directives_of(func)

    qualified_name = qualified_name_of(func)
    hints = _type_hints(func)
    sig = inspect.signature(func)

    params: list[ParameterData] = []
    for index, param in enumerate(sig.parameters.values()):
        type_ = hints.get(param.name, param.annotation)
        if param.kind in _VARIADIC_KINDS:
            kind, default, slider_range = WidgetKind.UNSUPPORTED, None, None
        else:
            resolved = resolve_parameter(
                type_,
                first_directive_for(directives, param.name),
                strict=strict_overrides,
                label=f"{qualified_name}.{param.name}",
            )
            kind, slider_range = resolved.kind, resolved.slider_range
            default = _initial_value(param, type_, resolved.default)
        params.append(
            ParameterData(
                name=param.name,
                type_=type_,
                kind=kind,
                value=default,
                index=index,
                param_kind=param.kind,
                slider_range=slider_range,
            )
        )

    unknown = sorted({d.parameter for d in directives} - set(sig.parameters))
    if unknown:
        if strict_overrides:
            raise OverrideDirectiveError(
                f"display_as の引数がシグネチャに存在しません: {qualified_name} {unknown}"
            )
        _logger.debug("display_as の未知引数を無視します: %s %s", qualified_name, unknown)

    return CommandDescriptor(
        name=str(getattr(func, "__name__", qualified_name)),
        qualified_name=qualified_name,
        func=func,
        parameters=tuple(params),
        doc=inspect.getdoc(func) or "",
    )


__all__ = ["CommandDescriptor", "ParameterData", "build_descriptor", "qualified_name_of"]
