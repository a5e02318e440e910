"""Sequential best-effort execution of one operation over many inputs."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..exceptions import GitHubProjectsError, ResolutionError

logger = logging.getLogger("mcp-github-projects.batch")

T = TypeVar("T")
V = TypeVar("V")


@dataclass
class BatchOutcome(Generic[V]):
    """Outcome of one batch input.

    ``details`` holds the results of secondary actions performed after the
    primary action succeeded; a failed secondary action never flips
    ``success``.
    """

    key: Any
    success: bool
    value: V | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"key": self.key, "success": self.success}
        if self.value is not None:
            result["value"] = self.value
        if self.error is not None:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class BatchResult(Generic[V]):
    outcomes: list[BatchOutcome[V]]
    success_count: int

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failure_count(self) -> int:
        return self.total - self.success_count

    def summary(self) -> str:
        return f"{self.success_count} of {self.total}"

    def __str__(self) -> str:
        return self.summary()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "successCount": self.success_count,
            "total": self.total,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


def _describe(error: BaseException) -> str:
    message = getattr(error, "message", None)
    return str(message or error or type(error).__name__)


def run_batch(
    inputs: Iterable[T],
    op: Callable[[T], V | ResolutionError],
    key: Callable[[T], Any] | None = None,
    then: Callable[[BatchOutcome[V]], Any] | None = None,
) -> BatchResult[V]:
    """Apply ``op`` to every input in order, recording one outcome per input.

    A failure on one input (a raised exception or a returned
    ``ResolutionError``) is recorded and the batch moves on; nothing is
    rolled back and nothing aborts the loop.

    Args:
        inputs: The batch inputs.
        op: Operation applied to each input.
        key: Extracts the caller-visible identity of an input (defaults to
            the input itself).
        then: Called with each successful outcome before the next input
            starts, typically to run secondary actions with ``run_secondary``.
            A failure inside ``then`` is stored under ``details["followUp"]``.

    Returns:
        Outcomes in input order and the number of successes.
    """
    outcomes: list[BatchOutcome[V]] = []
    for item in inputs:
        item_key = key(item) if key is not None else item
        try:
            value = op(item)
        except (GitHubProjectsError, ValueError) as e:
            logger.warning(f"Batch item {item_key!r} failed: {_describe(e)}")
            outcomes.append(BatchOutcome(key=item_key, success=False, error=_describe(e)))
            continue
        except Exception as e:  # noqa: BLE001 - one bad item must not stop the batch
            logger.error(f"Unexpected error for batch item {item_key!r}: {e}")
            logger.debug("Full exception details:", exc_info=True)
            outcomes.append(BatchOutcome(key=item_key, success=False, error=_describe(e)))
            continue

        if isinstance(value, ResolutionError):
            logger.info(f"Batch item {item_key!r} not resolved: {value.message}")
            outcomes.append(
                BatchOutcome(key=item_key, success=False, error=value.message)
            )
        else:
            outcome = BatchOutcome(key=item_key, success=True, value=value)
            outcomes.append(outcome)
            if then is not None:
                try:
                    then(outcome)
                except Exception as e:  # noqa: BLE001
                    logger.error(f"Follow-up for batch item {item_key!r} failed: {e}")
                    logger.debug("Full exception details:", exc_info=True)
                    outcome.details.setdefault(
                        "followUp", {"success": False, "error": _describe(e)}
                    )

    success_count = sum(1 for outcome in outcomes if outcome.success)
    logger.info(f"Batch finished: {success_count} of {len(outcomes)} succeeded")
    return BatchResult(outcomes=outcomes, success_count=success_count)


def run_secondary(
    outcome: BatchOutcome[Any], name: str, action: Callable[[], Any]
) -> bool:
    """Run a follow-up action for a successful outcome.

    The result (or the failure) is stored under ``outcome.details[name]``.
    Outcomes that already failed are left untouched.

    Returns:
        True if the action ran and succeeded.
    """
    if not outcome.success:
        return False
    try:
        result = action()
    except (GitHubProjectsError, ValueError) as e:
        logger.warning(f"Secondary action '{name}' failed for {outcome.key!r}: {_describe(e)}")
        outcome.details[name] = {"success": False, "error": _describe(e)}
        return False
    except Exception as e:  # noqa: BLE001
        logger.error(f"Unexpected error in secondary action '{name}' for {outcome.key!r}: {e}")
        logger.debug("Full exception details:", exc_info=True)
        outcome.details[name] = {"success": False, "error": _describe(e)}
        return False

    if isinstance(result, ResolutionError):
        outcome.details[name] = {"success": False, "error": result.message}
        return False
    outcome.details[name] = {"success": True, "value": result}
    return True
