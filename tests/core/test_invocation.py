"""
どこで: `tests/core/test_invocation.py`。
何を: 引数の受け渡し順、計測、成功時のみ履歴へ積む規則を検証する。
"""

import time

import pytest

from cmdpanel.core import stopwatch as timer
from cmdpanel.core.descriptor import build_descriptor
from cmdpanel.core.history import EMPTY_ENTRY, CommandHistory
from cmdpanel.core.invocation import CommandInvoker, gather_arguments
from cmdpanel.core.stopwatch import Stopwatch

calls: list[tuple] = []


def add(a: int, b: int) -> None:
    calls.append(("add", a, b))


def configure(name: str, *, retries: int = 3) -> None:
    calls.append(("configure", name, retries))


def explode() -> None:
    raise RuntimeError("boom")


def measured_tail() -> None:
    time.sleep(0.05)
    timer.start()


def measured_head() -> None:
    timer.stop()
    time.sleep(0.05)


@pytest.fixture(autouse=True)
def _clear_calls() -> None:
    calls.clear()


def test_arguments_are_passed_in_declaration_order() -> None:
    d = build_descriptor(add)
    d.parameter("a").value = 3
    d.parameter("b").value = 4
    history = CommandHistory(10)

    result = CommandInvoker(history, stopwatch=Stopwatch()).invoke(d)

    assert calls == [("add", 3, 4)]
    assert result.ok
    assert result.name == "add"
    assert result.elapsed_ms >= 0.0
    assert history.latest.name == "add"
    assert history.latest.elapsed_ms == result.elapsed_ms
    assert history.read()[1:] == (EMPTY_ENTRY,) * 9


def test_keyword_only_parameters_are_passed_by_name() -> None:
    d = build_descriptor(configure)
    d.parameter("name").value = "db"
    assert gather_arguments(d) == (["db"], {"retries": 3})

    CommandInvoker(CommandHistory(1)).invoke(d)
    assert calls == [("configure", "db", 3)]


def test_failure_propagates_and_leaves_history_unchanged() -> None:
    history = CommandHistory(3)
    invoker = CommandInvoker(history, stopwatch=Stopwatch())
    invoker.invoke(build_descriptor(add))
    before = history.read()

    with pytest.raises(RuntimeError, match="boom"):
        invoker.invoke(build_descriptor(explode))

    assert history.read() == before
    assert invoker.stopwatch.running is False


def test_command_can_restart_the_timer() -> None:
    history = CommandHistory(1)
    result = CommandInvoker(history).invoke(build_descriptor(measured_tail))
    assert result.elapsed_ms < 40.0
    assert history.latest.name == "measured_tail"


def test_command_can_stop_the_timer_early() -> None:
    history = CommandHistory(1)
    result = CommandInvoker(history).invoke(build_descriptor(measured_head))
    assert result.elapsed_ms < 40.0
