from __future__ import annotations

import pytest

from event_emitter import EVERY, InvalidArgument, InvalidListener, ListenerWrapper


def test_once_runs_a_single_time(emitter, recorder) -> None:
    listener = recorder()
    emitter.once("test", listener)

    assert emitter.emit("test", 1, 2, 3) is True
    assert emitter.emit("test", 4, 5, 6) is False

    assert listener.calls == [(1, 2, 3)]


def test_once_requires_a_callable(emitter) -> None:
    with pytest.raises(InvalidListener):
        emitter.once("test")


def test_many_runs_the_requested_number_of_times(emitter, recorder) -> None:
    listener = recorder()
    emitter.many("test", 3, listener)

    for value in range(4):
        emitter.emit("test", value)

    assert listener.calls == [(0,), (1,), (2,)]
    assert emitter.listener_count("test") == 0


@pytest.mark.parametrize("times", [0, -2, 1.5, "2", None, True])
def test_many_rejects_invalid_counts(emitter, recorder, times) -> None:
    with pytest.raises(InvalidArgument):
        emitter.many("test", times, recorder())


def test_many_requires_a_callable(emitter) -> None:
    with pytest.raises(InvalidListener):
        emitter.many("test", 2)


def test_many_can_be_removed_early_by_original_reference(emitter, recorder) -> None:
    listener = recorder()
    emitter.many("test", 5, listener)

    emitter.emit("test", 1)
    emitter.emit("test", 2)
    emitter.emit("test", 3)
    emitter.off("test", listener)
    emitter.emit("test", 4)

    assert listener.count == 3


def test_many_removes_itself_before_final_call(emitter) -> None:
    seen = []

    def listener() -> None:
        seen.append(emitter.listener_count("test"))

    emitter.many("test", 2, listener)
    emitter.emit("test")
    emitter.emit("test")

    assert seen == [1, 0]


def test_many_does_not_run_again_after_reentrant_exhaustion(emitter, recorder) -> None:
    counted = recorder()
    state = {"depth": 0}

    def reenter() -> None:
        if state["depth"] == 0:
            state["depth"] += 1
            emitter.emit("test")

    emitter.on("test", reenter)
    emitter.once("test", counted)

    emitter.emit("test")

    assert counted.count == 1


def test_until_removes_listener_once_it_returns_true(emitter, recorder) -> None:
    calls = recorder()

    def listener(first, second, third):
        calls(first, second, third)
        return third == 6

    emitter.until("test", listener)
    emitter.emit("test", 1, 2, 3)
    emitter.emit("test", 4, 5, 6)
    emitter.emit("test", 7, 8, 9)

    assert calls.calls == [(1, 2, 3), (4, 5, 6)]


def test_until_only_stops_on_literal_true(emitter) -> None:
    results = iter([0, "", None, 1, "yes", True, True])
    calls = []

    def listener() -> object:
        calls.append(1)
        return next(results)

    emitter.until("test", listener)
    for _ in range(7):
        emitter.emit("test")

    assert len(calls) == 6


def test_until_on_every_event_type(emitter) -> None:
    count = {"value": 0}

    def listener(*args) -> bool:
        count["value"] += 1
        return count["value"] == 2

    emitter.until(listener)
    emitter.emit("foo")
    emitter.emit("bar")
    emitter.emit("baz")

    assert count["value"] == 2
    assert emitter.listener_count(EVERY) == 0


def test_until_wrapping_a_wrapper_resolves_one_level(emitter, recorder) -> None:
    original = recorder(result=True)
    outer = ListenerWrapper(original, original)

    emitter.until("test", outer)
    emitter.off("test", original)

    assert emitter.listener_count("test") == 0


def test_first_prepends(emitter) -> None:
    order = []
    emitter.on("test", lambda: order.append("second"))
    emitter.on("test", lambda: order.append("third"))
    emitter.first("test", lambda: order.append("first"))

    emitter.emit("test")

    assert order == ["first", "second", "third"]


def test_first_on_empty_type(emitter, recorder) -> None:
    listener = recorder()
    emitter.first("test", listener)

    assert emitter.listeners("test") == [listener]


def test_at_inserts_at_index(emitter) -> None:
    order = []
    emitter.on("test", lambda: order.append(0))
    emitter.on("test", lambda: order.append(2))
    emitter.at("test", 1, lambda: order.append(1))
    emitter.at("test", 3, lambda: order.append(3))

    emitter.emit("test")

    assert order == [0, 1, 2, 3]


def test_at_promotes_single_listener_respecting_index(emitter) -> None:
    order = []
    emitter.on("test", lambda: order.append("existing"))
    emitter.at("test", 0, lambda: order.append("inserted"))

    emitter.emit("test")

    assert order == ["inserted", "existing"]


def test_at_without_type_targets_every(emitter, recorder) -> None:
    listener = recorder()
    emitter.at(0, listener)

    emitter.emit("anything", 1)

    assert listener.calls == [(1,)]


@pytest.mark.parametrize("index", [-1, 1.0, "0", True])
def test_at_rejects_invalid_index(emitter, recorder, index) -> None:
    with pytest.raises(InvalidArgument):
        emitter.at("test", index, recorder())


def test_at_rejects_out_of_range_index(emitter, recorder) -> None:
    emitter.on("test", recorder())

    with pytest.raises(InvalidArgument):
        emitter.at("test", 5, recorder())
    assert emitter.listener_count("test") == 1


def test_on_with_index(emitter) -> None:
    order = []
    emitter.on("test", lambda: order.append("b"))
    emitter.on("test", lambda: order.append("a"), 0)

    emitter.emit("test")

    assert order == ["a", "b"]


def test_off_removes_most_recent_duplicate_first(emitter, recorder) -> None:
    shared = recorder()
    emitter.on("test", shared)
    emitter.on("test", lambda: None)
    emitter.on("test", shared)

    emitter.off("test", shared)

    listeners = emitter.listeners("test")
    assert listeners[0] is shared
    assert len(listeners) == 2


def test_off_requires_one_call_per_registration(emitter, recorder) -> None:
    shared = recorder()
    emitter.on("test", shared)
    emitter.on("test", shared)

    emitter.off("test", shared)
    assert emitter.listener_count("test") == 1
    emitter.off("test", shared)
    assert emitter.listener_count("test") == 0
