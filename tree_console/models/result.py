"""Models for terminal execution results."""

import traceback
from dataclasses import dataclass
from enum import Enum


class Status(Enum):
    """Terminal status of an executed node."""

    SUCCESSFUL = "SUCCESSFUL"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


@dataclass(frozen=True, kw_only=True)
class FailureDetail:
    """What went wrong, captured from an exception."""

    type_name: str
    message: str | None = None
    stack_trace: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FailureDetail":
        """Capture type, message and formatted traceback of an exception."""
        return cls(
            type_name=type(exc).__qualname__,
            message=str(exc) or None,
            stack_trace="".join(traceback.format_exception(exc)),
        )

    def describe(self) -> str:
        """Return the stack trace, or a one-line summary when there is none."""
        if self.stack_trace:
            return self.stack_trace
        if self.message is None:
            return self.type_name
        return f"{self.type_name}: {self.message}"


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Result of executing a container or test.

    Only carries the outcome; the node it belongs to is known by the caller.
    """

    status: Status
    failure: FailureDetail | None = None

    @classmethod
    def successful(cls) -> "ExecutionResult":
        """Create a successful result."""
        return cls(status=Status.SUCCESSFUL)

    @classmethod
    def aborted(cls, exc: BaseException | None = None) -> "ExecutionResult":
        """Create an aborted result, optionally caused by ``exc``."""
        return cls(status=Status.ABORTED, failure=_detail(exc))

    @classmethod
    def failed(cls, exc: BaseException | None = None) -> "ExecutionResult":
        """Create a failed result, optionally caused by ``exc``."""
        return cls(status=Status.FAILED, failure=_detail(exc))


def _detail(exc: BaseException | None) -> FailureDetail | None:
    return None if exc is None else FailureDetail.from_exception(exc)
