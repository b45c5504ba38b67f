from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from pyglr.actions import ROOT_KEY, PatchAction, PatchEntry
from pyglr.exceptions import InvalidPathError
from pyglr.state.apply import apply_action
from pyglr.values import DELETE


def test_entry_keeps_value_by_reference() -> None:
    value = {"nested": [1, 2]}
    entry = PatchEntry(path_key="a.b", value=value)
    assert entry.value is value
    assert not entry.is_root
    assert PatchEntry(path_key=ROOT_KEY, value={}).is_root


def test_entry_rejects_empty_path_key() -> None:
    with pytest.raises(ValidationError):
        PatchEntry(path_key="", value=1)


def test_entry_is_frozen() -> None:
    entry = PatchEntry(path_key="a", value=1)
    with pytest.raises(ValidationError):
        entry.value = 2  # type: ignore[misc]


def test_action_round_trips_redux_shape() -> None:
    action = PatchAction.from_dict({"type": "Update", "a.b": 1, "c!d": DELETE})

    assert action.type == "Update"
    assert [entry.path_key for entry in action.entries] == ["a.b", "c!d"]
    assert action.entries[1].value is DELETE
    assert action.to_dict() == {"type": "Update", "a.b": 1, "c!d": DELETE}
    assert isinstance(action.created_at, datetime)
    assert action.created_at.tzinfo is not None


def test_action_to_dict_later_entries_win() -> None:
    action = PatchAction(
        type="Update",
        entries=(PatchEntry(path_key="a", value=1), PatchEntry(path_key="a", value=2)),
    )
    assert action.to_dict() == {"type": "Update", "a": 2}


@pytest.mark.parametrize("action", [{"a": 1}, {"type": "  ", "a": 1}, {"type": None}])
def test_action_requires_message(action: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        PatchAction.from_dict(action)


def test_action_type_entry_has_no_mapping_shape() -> None:
    action = PatchAction(type="Update", entries=(PatchEntry(path_key="type", value="user"),))

    with pytest.raises(InvalidPathError) as exc_info:
        action.to_dict()

    assert exc_info.value.key == "type"
    assert apply_action({}, action) == {"type": "user"}
