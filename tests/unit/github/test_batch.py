"""Tests for the sequential best-effort batch runner."""

from unittest.mock import MagicMock

import pytest

from mcp_github_projects.exceptions import (
    OptionNotFound,
    RemoteNotFound,
    RemoteRequestFailed,
)
from mcp_github_projects.github.batch import (
    BatchOutcome,
    BatchResult,
    run_batch,
    run_secondary,
)


class TestRunBatch:
    def test_middle_failure_does_not_stop_the_batch(self):
        def op(item):
            if item == "b":
                raise RemoteRequestFailed("boom", status=502)
            return item.upper()

        result = run_batch(["a", "b", "c"], op)

        assert [o.success for o in result.outcomes] == [True, False, True]
        assert result.success_count == 2
        assert result.summary() == "2 of 3"
        assert result.outcomes[1].error == "boom"
        assert [o.value for o in result.outcomes] == ["A", None, "C"]

    def test_outcomes_follow_input_order(self):
        calls = []

        def op(item):
            calls.append(item)
            return item

        result = run_batch([3, 1, 2], op)

        assert calls == [3, 1, 2]
        assert [o.key for o in result.outcomes] == [3, 1, 2]

    def test_returned_resolution_error_is_a_failure(self):
        def op(item):
            return OptionNotFound(f"Option '{item}' not found", raw_value=item)

        result = run_batch(["x"], op)

        assert result.success_count == 0
        assert result.outcomes[0].error == "Option 'x' not found"

    @pytest.mark.parametrize(
        "error",
        [RemoteNotFound("gone", status=404), ValueError("bad"), RuntimeError("odd")],
    )
    def test_any_exception_is_recorded(self, error):
        op = MagicMock(side_effect=error)

        result = run_batch([1], op)

        assert result.outcomes[0].success is False
        assert result.outcomes[0].error == str(error)

    def test_empty_batch(self):
        result = run_batch([], MagicMock())

        assert result.total == 0
        assert result.success_count == 0
        assert result.summary() == "0 of 0"

    def test_success_count_matches_outcomes(self):
        def op(n):
            if n % 3 == 0:
                raise ValueError(f"{n} rejected")
            return n

        result = run_batch(range(7), op)

        assert result.success_count == 4
        assert result.success_count == sum(o.success for o in result.outcomes)
        assert result.failure_count == result.total - result.success_count

    def test_custom_key(self):
        result = run_batch([{"field_id": "F1"}], lambda spec: "ok", key=lambda s: s["field_id"])
        assert result.outcomes[0].key == "F1"

    def test_then_runs_only_for_successes(self):
        seen = []

        def op(item):
            if item == 2:
                raise ValueError("no")
            return item

        run_batch([1, 2, 3], op, then=lambda outcome: seen.append(outcome.key))

        assert seen == [1, 3]

    def test_unexpected_secondary_error_does_not_abort(self):
        def missing_key():
            return {}["missing"]

        result = run_batch(
            [1, 2, 3],
            lambda n: n,
            then=lambda outcome: run_secondary(outcome, "status", missing_key),
        )

        assert len(result.outcomes) == 3
        assert result.success_count == 3
        assert all(o.details["status"]["success"] is False for o in result.outcomes)
        assert "missing" in result.outcomes[0].details["status"]["error"]

    def test_failing_follow_up_is_recorded(self):
        def follow_up(outcome):
            raise AttributeError("unexpected response shape")

        result = run_batch(["a", "b"], str.upper, then=follow_up)

        assert [o.success for o in result.outcomes] == [True, True]
        assert result.outcomes[1].details["followUp"] == {
            "success": False,
            "error": "unexpected response shape",
        }

    def test_to_dict(self):
        result = BatchResult(
            outcomes=[
                BatchOutcome(key=1, success=True, value="PVTI_1"),
                BatchOutcome(key=2, success=False, error="not found"),
            ],
            success_count=1,
        )

        assert result.to_dict() == {
            "summary": "1 of 2",
            "successCount": 1,
            "total": 2,
            "outcomes": [
                {"key": 1, "success": True, "value": "PVTI_1"},
                {"key": 2, "success": False, "error": "not found"},
            ],
        }


class TestRunSecondary:
    def test_records_success(self):
        outcome = BatchOutcome(key="PVTI_1", success=True, value={})

        assert run_secondary(outcome, "comment", lambda: {"id": "C1"}) is True
        assert outcome.details["comment"] == {"success": True, "value": {"id": "C1"}}

    def test_failure_keeps_primary_success(self):
        outcome = BatchOutcome(key="PVTI_1", success=True, value={})

        def fail():
            raise RemoteRequestFailed("comments locked", status=403)

        assert run_secondary(outcome, "comment", fail) is False
        assert outcome.success is True
        assert outcome.details["comment"] == {"success": False, "error": "comments locked"}

    def test_unexpected_exception_is_recorded(self):
        outcome = BatchOutcome(key="PVTI_1", success=True, value={})

        def fail():
            raise KeyError("number")

        assert run_secondary(outcome, "comment", fail) is False
        assert outcome.success is True
        assert outcome.details["comment"]["success"] is False

    def test_resolution_error_is_reported(self):
        outcome = BatchOutcome(key=5, success=True, value={})

        run_secondary(outcome, "status", lambda: OptionNotFound("Option 'Blocked' not found"))

        assert outcome.details["status"]["success"] is False
        assert outcome.success is True

    def test_skipped_for_failed_outcome(self):
        outcome = BatchOutcome(key=5, success=False, error="missing")
        action = MagicMock()

        assert run_secondary(outcome, "status", action) is False
        action.assert_not_called()
        assert outcome.details == {}
