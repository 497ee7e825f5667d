"""Tests for warble.routing.next and outcomes."""

import pytest

from warble.routing.next import Next
from warble.routing.outcome import CONTINUE, STOP, Continue, ExitTo, Stop, is_outcome


class TestNext:
    def test_never_called_is_stop(self) -> None:
        record = Next()
        assert not record.called
        assert record.outcome is STOP

    def test_plain_call_continues(self) -> None:
        record = Next()
        record()
        assert record.called
        assert record.outcome is CONTINUE

    def test_call_with_action_exits(self) -> None:
        record = Next()
        record("done", {"ok": True})
        assert record.outcome == ExitTo("done", {"ok": True})

    def test_exit_data_defaults_to_empty(self) -> None:
        record = Next()
        record("done")
        assert record.outcome == ExitTo("done", {})

    def test_last_call_wins(self) -> None:
        record = Next()
        record("done")
        record()
        assert record.outcome is CONTINUE

    def test_returned_outcome_wins(self) -> None:
        record = Next()
        record()
        assert record.resolve(ExitTo("x")) == ExitTo("x")

    def test_non_outcome_return_is_ignored(self) -> None:
        record = Next()
        assert record.resolve("some string") is STOP


class TestOutcomes:
    def test_singletons(self) -> None:
        assert isinstance(STOP, Stop)
        assert isinstance(CONTINUE, Continue)

    def test_exit_to_is_frozen(self) -> None:
        exit_to = ExitTo("a")
        with pytest.raises(AttributeError):
            exit_to.action = "b"  # type: ignore[misc]

    @pytest.mark.parametrize("value", [STOP, CONTINUE, ExitTo("a")])
    def test_is_outcome(self, value: object) -> None:
        assert is_outcome(value)

    @pytest.mark.parametrize("value", [None, "exit", True, {}])
    def test_is_not_outcome(self, value: object) -> None:
        assert not is_outcome(value)
