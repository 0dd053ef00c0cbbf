"""Render execution events as one line each, in arrival order."""

from dataclasses import dataclass, field
from typing import TextIO

from tree_console.listener import ExecutionListener
from tree_console.models.identifier import TestIdentifier
from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import ExecutionResult
from tree_console.rendering.color import Color, Colorizer

INDENTATION = " " * 13


def indented(message: str) -> str:
    """Re-indent continuation lines of ``message`` below the detail column."""
    return message.replace("\n", "\n" + INDENTATION).strip()


@dataclass(frozen=True)
class FlatPrintingListener(ExecutionListener):
    """Prints every event as soon as it arrives."""

    out: TextIO
    colorizer: Colorizer = field(default_factory=Colorizer)

    def execution_started(self, test_count: int) -> None:
        self._println(
            Color.NONE, f"Test execution started. Number of static tests: {test_count}"
        )

    def on_dynamic_registered(self, identifier: TestIdentifier) -> None:
        self._println_identifier(Color.DYNAMIC, "Test registered:", identifier)

    def on_start(self, identifier: TestIdentifier) -> None:
        self._println_identifier(Color.NONE, "Started:", identifier)

    def on_skip(self, identifier: TestIdentifier, reason: str) -> None:
        self._println_identifier(Color.SKIPPED, "Skipped:", identifier)
        self._println_detail(Color.SKIPPED, "Reason", reason)

    def on_report(self, identifier: TestIdentifier, entry: ReportEntry) -> None:
        self._println_identifier(Color.REPORTED, "Reported:", identifier)
        self._println_detail(Color.REPORTED, "Reported values", str(entry))

    def on_finish(
        self,
        identifier: TestIdentifier,
        result: ExecutionResult,
        duration: int | None = None,
    ) -> None:
        color = Color.for_status(result.status)
        self._println_identifier(color, "Finished:", identifier)
        if result.failure is not None:
            self._println_detail(color, "Exception", result.failure.describe())

    def execution_finished(self) -> None:
        self._println(Color.NONE, "Test execution finished.")
        self.out.flush()

    def _println_identifier(
        self, color: Color, label: str, identifier: TestIdentifier
    ) -> None:
        self._println(
            color, f"{label:<10}   {identifier.display_name} ({identifier.unique_id})"
        )

    def _println_detail(self, color: Color, label: str, detail: str) -> None:
        self._println(color, f"{INDENTATION}=> {label}: {indented(detail)}")

    def _println(self, color: Color, line: str) -> None:
        self.out.write(self.colorizer.paint(color, line))
        self.out.write("\n")
