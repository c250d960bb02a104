import pytest

from cmdpanel.core.descriptor import build_descriptor
from cmdpanel.core.directives import display_as
from cmdpanel.core.value_store import ValueStore
from cmdpanel.core.value_types import Vector3


def move(origin: Vector3, target: Vector3, steps: tuple[int, ...], speed: float) -> None:
    return None


def jump(height: Vector3) -> None:
    return None


@display_as("value", 0, 1)
def throttle(value: float) -> None:
    return None


def test_type_isolation_shares_one_slot_per_type() -> None:
    store = ValueStore()
    d = build_descriptor(move)
    other = build_descriptor(jump)

    k_origin = store.slot_key(d.parameter("origin"))
    assert k_origin == ("property", Vector3)
    assert store.slot_key(d.parameter("target")) == k_origin
    assert store.slot_key(other.parameter("height")) == k_origin
    assert store.slot_key(d.parameter("steps")) == ("array", tuple[int, ...])


def test_parameter_isolation_uses_command_and_index() -> None:
    store = ValueStore(isolation="parameter")
    d = build_descriptor(move)

    assert store.slot_key(d.parameter("origin"), d) == (d.qualified_name, 0)
    assert store.slot_key(d.parameter("target"), d) == (d.qualified_name, 1)
    with pytest.raises(ValueError):
        store.slot_key(d.parameter("origin"))


def test_slot_key_rejects_non_slot_kinds() -> None:
    with pytest.raises(ValueError):
        ValueStore().slot_key(build_descriptor(throttle).parameter("value"))


def test_edit_writes_then_reads_back() -> None:
    store = ValueStore()
    d = build_descriptor(move)
    origin = d.parameter("origin")
    origin.value = Vector3(1.0, 2.0, 3.0)

    with store.edit(origin) as key:
        assert store.get(key) == Vector3(1.0, 2.0, 3.0)
        store.set(key, Vector3(4.0, 5.0, 6.0))
    assert origin.value == Vector3(4.0, 5.0, 6.0)


def test_shared_slot_does_not_mix_values_between_parameters() -> None:
    store = ValueStore()
    d = build_descriptor(move)
    origin, target = d.parameter("origin"), d.parameter("target")
    origin.value = Vector3(1.0, 0.0, 0.0)
    target.value = Vector3(0.0, 9.0, 0.0)

    with store.edit(origin):
        pass
    with store.edit(target) as key:
        store.set(key, Vector3(0.0, 8.0, 0.0))

    assert origin.value == Vector3(1.0, 0.0, 0.0)
    assert target.value == Vector3(0.0, 8.0, 0.0)
    assert len(store) == 1


def test_edit_does_not_read_back_on_error() -> None:
    store = ValueStore()
    origin = build_descriptor(move).parameter("origin")
    origin.value = Vector3(1.0, 1.0, 1.0)

    with pytest.raises(RuntimeError):
        with store.edit(origin) as key:
            store.set(key, Vector3(2.0, 2.0, 2.0))
            raise RuntimeError("boom")
    assert origin.value == Vector3(1.0, 1.0, 1.0)


def test_unknown_isolation_is_rejected() -> None:
    with pytest.raises(ValueError):
        ValueStore(isolation="global")  # type: ignore[arg-type]
