"""Receiver interface for execution events."""

from collections.abc import Sequence
from dataclasses import dataclass

from tree_console.models.identifier import TestIdentifier
from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import ExecutionResult


class ExecutionListener:
    """Base for receivers of execution events.

    Every event is ignored by default, so subclasses only override what they
    render. Events for a given identifier arrive in lifecycle order: started,
    then any number of reports, then finished; or skipped alone.
    """

    def execution_started(self, test_count: int) -> None:
        """Called once before any other event.

        Args:
            test_count: Number of statically known tests in the run

        """

    def on_dynamic_registered(self, identifier: TestIdentifier) -> None:
        """Called when a test is generated while the run is in progress."""

    def on_start(self, identifier: TestIdentifier) -> None:
        """Called when execution of an engine, container or test begins."""

    def on_skip(self, identifier: TestIdentifier, reason: str) -> None:
        """Called when an identifier is skipped instead of executed."""

    def on_report(self, identifier: TestIdentifier, entry: ReportEntry) -> None:
        """Called when a running identifier publishes a report entry."""

    def on_finish(
        self,
        identifier: TestIdentifier,
        result: ExecutionResult,
        duration: int | None = None,
    ) -> None:
        """Called when execution of an identifier completes.

        Args:
            identifier: The finished identifier
            result: Terminal result of the execution
            duration: Elapsed milliseconds, when already measured upstream

        """

    def execution_finished(self) -> None:
        """Called once after all other events."""


@dataclass(frozen=True)
class CompositeListener(ExecutionListener):
    """Forwards every event to each of its listeners in order."""

    listeners: Sequence[ExecutionListener]

    def execution_started(self, test_count: int) -> None:
        for listener in self.listeners:
            listener.execution_started(test_count)

    def on_dynamic_registered(self, identifier: TestIdentifier) -> None:
        for listener in self.listeners:
            listener.on_dynamic_registered(identifier)

    def on_start(self, identifier: TestIdentifier) -> None:
        for listener in self.listeners:
            listener.on_start(identifier)

    def on_skip(self, identifier: TestIdentifier, reason: str) -> None:
        for listener in self.listeners:
            listener.on_skip(identifier, reason)

    def on_report(self, identifier: TestIdentifier, entry: ReportEntry) -> None:
        for listener in self.listeners:
            listener.on_report(identifier, entry)

    def on_finish(
        self,
        identifier: TestIdentifier,
        result: ExecutionResult,
        duration: int | None = None,
    ) -> None:
        for listener in self.listeners:
            listener.on_finish(identifier, result, duration)

    def execution_finished(self) -> None:
        for listener in self.listeners:
            listener.execution_finished()
