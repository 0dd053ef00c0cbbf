"""Recorded execution events, one JSON object per line."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from tree_console.listener import ExecutionListener
from tree_console.models.identifier import IdentifierKind, TestIdentifier
from tree_console.models.report_entry import ReportEntry, require_not_blank
from tree_console.models.result import ExecutionResult, FailureDetail, Status
from tree_console.tree.builder import UnknownIdentifierError

log = logging.getLogger(__name__)


class EventStreamError(Exception):
    """Raised when a recorded event stream cannot be parsed."""


class IdentifierRecord(BaseModel):
    """Identifier fields announced by registered, started and skipped events."""

    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    kind: IdentifierKind = Field(default=IdentifierKind.TEST)
    parent_id: str | None = Field(default=None, description="Unique id of parent")

    def to_identifier(self) -> TestIdentifier:
        return TestIdentifier(
            unique_id=self.id,
            display_name=self.name,
            kind=self.kind,
            parent_id=self.parent_id,
        )


class ExecutionStartedEvent(BaseModel):
    """The run begins."""

    event: Literal["execution_started"]
    test_count: int = Field(default=0, ge=0)


class RegisteredEvent(IdentifierRecord):
    """A dynamic test was generated."""

    event: Literal["registered"]


class StartedEvent(IdentifierRecord):
    """Execution of an identifier begins."""

    event: Literal["started"]


class SkippedEvent(IdentifierRecord):
    """An identifier was skipped."""

    event: Literal["skipped"]
    reason: str = ""


class ReportedEvent(BaseModel):
    """A running identifier published key/value pairs."""

    event: Literal["reported"]
    id: str
    timestamp: datetime | None = None
    values: Mapping[str, str]

    @field_validator("values")
    @classmethod
    def check_not_blank(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return require_not_blank(value)

    def to_entry(self) -> ReportEntry:
        if self.timestamp is None:
            return ReportEntry(key_value_pairs=self.values)
        return ReportEntry(timestamp=self.timestamp, key_value_pairs=self.values)


class FailureRecord(BaseModel):
    """Serialized failure detail."""

    type_name: str = "Exception"
    message: str | None = None
    stack_trace: str | None = None


class FinishedEvent(BaseModel):
    """Execution of an identifier completed."""

    event: Literal["finished"]
    id: str
    status: Status
    failure: FailureRecord | None = None
    duration_ms: int | None = Field(default=None, ge=0)

    def to_result(self) -> ExecutionResult:
        if self.failure is None:
            return ExecutionResult(status=self.status)
        return ExecutionResult(
            status=self.status,
            failure=FailureDetail(
                type_name=self.failure.type_name,
                message=self.failure.message,
                stack_trace=self.failure.stack_trace,
            ),
        )


class ExecutionFinishedEvent(BaseModel):
    """The run is over."""

    event: Literal["execution_finished"]


Event = Annotated[
    ExecutionStartedEvent
    | RegisteredEvent
    | StartedEvent
    | SkippedEvent
    | ReportedEvent
    | FinishedEvent
    | ExecutionFinishedEvent,
    Field(discriminator="event"),
]

_EVENT_ADAPTER: TypeAdapter[Event] = TypeAdapter(Event)


def parse_events(lines: Iterable[str]) -> Sequence[Event]:
    """Parse JSON lines into events, skipping blank lines.

    Raises:
        EventStreamError: If a line is not a valid event

    """
    events: list[Event] = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            events.append(_EVENT_ADAPTER.validate_json(line))
        except ValidationError as exc:
            raise EventStreamError(f"Invalid event on line {number}: {exc}") from exc
    log.debug("Parsed %d event(s)", len(events))
    return events


def replay(events: Iterable[Event], listener: ExecutionListener) -> None:
    """Drive ``listener`` with recorded events in order.

    Raises:
        UnknownIdentifierError: If a reported or finished event refers to an
            identifier no earlier event announced

    """
    identifiers: dict[str, TestIdentifier] = {}

    def announce(record: IdentifierRecord) -> TestIdentifier:
        identifier = record.to_identifier()
        identifiers[identifier.unique_id] = identifier
        return identifier

    def resolve(unique_id: str) -> TestIdentifier:
        try:
            return identifiers[unique_id]
        except KeyError:
            raise UnknownIdentifierError(
                f"Identifier '{unique_id}' was never announced"
            ) from None

    for event in events:
        match event:
            case ExecutionStartedEvent():
                listener.execution_started(event.test_count)
            case RegisteredEvent():
                listener.on_dynamic_registered(announce(event))
            case StartedEvent():
                listener.on_start(announce(event))
            case SkippedEvent():
                listener.on_skip(announce(event), event.reason)
            case ReportedEvent():
                listener.on_report(resolve(event.id), event.to_entry())
            case FinishedEvent():
                listener.on_finish(
                    resolve(event.id), event.to_result(), event.duration_ms
                )
            case ExecutionFinishedEvent():
                listener.execution_finished()
