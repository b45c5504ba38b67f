from __future__ import annotations

from typing import Any

import pytest

from pyglr.actions import ROOT_KEY, PatchEntry
from pyglr.exceptions import InvalidPathError, UnwrappedValueError
from pyglr.flatten import commit, flatten, reset
from pyglr.values import DELETE, IGNORE, partial, wrap


def _pairs(entries: list[PatchEntry]) -> dict[str, Any]:
    return {entry.path_key: entry.value for entry in entries}


def test_flatten_nested_payload() -> None:
    entries = flatten({"a": wrap(1), "b": {"c": wrap(2)}}, "msg")

    assert _pairs(entries) == {"a": 1, "b.c": 2}
    assert len(entries) == 2


def test_flatten_keeps_value_identity() -> None:
    user = {"id": "1"}
    (entry,) = flatten({"users": {"1": wrap(user)}}, "msg")
    assert entry.path_key == "users.1"
    assert entry.value is user


def test_flatten_wrapped_payload_is_root_replace() -> None:
    entries = flatten(wrap({"foo": 1}), "msg")
    assert entries == [PatchEntry(path_key=ROOT_KEY, value={"foo": 1})]


def test_flatten_ignored_payload_is_empty() -> None:
    assert flatten(IGNORE, "msg") == []


def test_flatten_skips_ignored_keys() -> None:
    enabled = False
    entries = flatten({"x": wrap("value") if enabled else IGNORE, "y": wrap(2)}, "msg")
    assert _pairs(entries) == {"y": 2}


def test_flatten_none_values_are_holes() -> None:
    entries = flatten({"a": None, "b": {"c": None, "d": wrap(1)}, "e": {}}, "msg")
    assert _pairs(entries) == {"b.d": 1}


@pytest.mark.parametrize("payload", [None, {}, 0, ""])
def test_flatten_falsy_payload_yields_nothing(payload: Any) -> None:
    assert flatten(payload, "msg") == []


def test_flatten_partial_switches_to_must_exist() -> None:
    entries = flatten(
        {"users": partial({"1": {"name": wrap("Jack"), "tags": partial({"x": wrap(True)})}})},
        "msg",
    )
    assert _pairs(entries) == {"users!1!name": "Jack", "users!1!tags!x": True}


def test_flatten_partial_below_regular_path() -> None:
    entries = flatten({"config": {"theme": partial({"dark": wrap(True)})}}, "msg")
    assert _pairs(entries) == {"config.theme!dark": True}


def test_flatten_stringifies_keys() -> None:
    entries = flatten({"users": {2: wrap(DELETE)}}, "msg")
    assert _pairs(entries) == {"users.2": DELETE}


@pytest.mark.parametrize("leaf", [5, 0, False, "text", [1, 2], object()])
def test_flatten_unwrapped_leaf_raises(leaf: Any) -> None:
    payload = {"ok": wrap(1), "a": {"b": leaf}}

    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten(payload, "Set b")

    error = exc_info.value
    assert error.path == "a.b"
    assert error.commit_message == "Set b"
    assert error.payload is payload
    assert error.info["message"] == "Set b"
    assert isinstance(error, TypeError)


def test_flatten_unwrapped_top_level_scalar() -> None:
    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten({"a": 5}, "msg")
    assert exc_info.value.path == "a"


def test_flatten_unwrapped_inside_partial_names_bang_path() -> None:
    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten({"a": partial({"b": 1})}, "msg")
    assert exc_info.value.path == "a!b"


def test_flatten_non_mapping_payload() -> None:
    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten(42, "msg")
    assert exc_info.value.path == ""


def test_flatten_notifies_handler_before_raising() -> None:
    calls: list[tuple[str, dict[str, Any]]] = []

    with pytest.raises(UnwrappedValueError):
        flatten({"a": 5}, "msg", on_error=lambda message, info: calls.append((message, info)))

    assert len(calls) == 1
    message, info = calls[0]
    assert "'a'" in message
    assert info["path"] == "a"
    assert info["payload"] == {"a": 5}


def test_commit_builds_action() -> None:
    action = commit("Switch to dark theme", {"user": {"profile": {"theme": wrap("dark")}}})

    assert action.type == "Switch to dark theme"
    assert action.to_dict() == {"type": "Switch to dark theme", "user.profile.theme": "dark"}


def test_commit_patch_is_verbatim_and_applied_first() -> None:
    raw = [1, 2, 3]
    action = commit("msg", {"a": wrap(1)}, patch={"list": raw, "a": 0})

    assert [entry.path_key for entry in action.entries] == ["list", "a", "a"]
    assert action.entries[0].value is raw
    assert action.to_dict() == {"type": "msg", "list": raw, "a": 1}


def test_reset_builds_root_replace() -> None:
    state = {"initialized": True}
    action = reset("Initial state", state)

    assert action.type == "Initial state"
    assert action.entries == (PatchEntry(path_key=ROOT_KEY, value=state),)
    assert action.entries[0].value is state


@pytest.mark.parametrize("inner", [0, "", False, [1], 5])
def test_flatten_partial_of_non_mapping_raises(inner: Any) -> None:
    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten({"a": partial(inner)}, "msg")
    assert exc_info.value.path == "a"


@pytest.mark.parametrize("inner", [None, {}])
def test_flatten_empty_partial_yields_nothing(inner: Any) -> None:
    assert flatten({"a": partial(inner), "b": wrap(1)}, "msg") == [PatchEntry(path_key="b", value=1)]


def test_flatten_error_message_truncates_payload() -> None:
    with pytest.raises(UnwrappedValueError) as exc_info:
        flatten({"a": 5, "b": "x" * 100}, "msg", log_max_string=10)

    assert "x" * 10 + "…<truncated>" in str(exc_info.value)
    assert "x" * 11 not in str(exc_info.value)
    assert exc_info.value.payload["b"] == "x" * 100


def test_commit_rejects_type_in_patch() -> None:
    calls: list[dict[str, Any]] = []

    with pytest.raises(InvalidPathError) as exc_info:
        commit("msg", {"a": wrap(1)}, patch={"type": 1}, on_error=lambda message, info: calls.append(info))

    assert exc_info.value.key == "type"
    assert calls == [{"key": "type"}]
