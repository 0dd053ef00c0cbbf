"""CLI entry point rendering a recorded execution event stream."""

import argparse
import logging
import sys
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from tree_console.config import ConsoleConfig, Details
from tree_console.console import create_listener
from tree_console.events import EventStreamError, parse_events, replay
from tree_console.listener import CompositeListener, ExecutionListener
from tree_console.models.identifier import TestIdentifier
from tree_console.models.result import ExecutionResult, Status
from tree_console.rendering.theme import Theme
from tree_console.tree.node import LifecycleError

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_INVALID_INPUT = 2


@dataclass(kw_only=True)
class RunSummary(ExecutionListener):
    """Tallies terminal statuses of tests and containers during replay."""

    tests: Counter[Status] = field(default_factory=Counter)
    containers: Counter[Status] = field(default_factory=Counter)
    completed: bool = False

    def on_finish(
        self,
        identifier: TestIdentifier,
        result: ExecutionResult,
        duration: int | None = None,
    ) -> None:
        counts = self.containers if identifier.is_container else self.tests
        counts[result.status] += 1

    def execution_finished(self) -> None:
        self.completed = True

    @property
    def has_failures(self) -> bool:
        return bool(self.tests[Status.FAILED] or self.containers[Status.FAILED])


def log_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log how many tests and containers ended in each status."""
    for label, counts in (("test", summary.tests), ("container", summary.containers)):
        log.info(
            "Finished %d %s(s): %d successful, %d aborted, %d failed",
            counts.total(),
            label,
            counts[Status.SUCCESSFUL],
            counts[Status.ABORTED],
            counts[Status.FAILED],
        )


def read_lines(events_path: str) -> Sequence[str]:
    """Read the event stream from a file, or from stdin for ``-``.

    Records are separated by ``\\n`` only. JSON strings may hold other line
    separators such as U+2028 unescaped.
    """
    if events_path == "-":
        return sys.stdin.read().split("\n")
    return Path(events_path).read_text(encoding="utf-8").split("\n")


def run(events_path: str, config: ConsoleConfig, out: TextIO) -> int:
    """Render the event stream at ``events_path`` and return exit code."""
    log = logging.getLogger("tree_console")

    log.info("Reading events from %s", events_path)
    summary = RunSummary()
    try:
        events = parse_events(read_lines(events_path))
        replay(events, CompositeListener([create_listener(config, out), summary]))
    except (EventStreamError, LifecycleError) as exc:
        log.error("Cannot render events: %s", exc)
        return EXIT_INVALID_INPUT

    if not summary.completed:
        log.error("Cannot render events: stream ended before execution finished")
        return EXIT_INVALID_INPUT

    log_summary(log, summary)

    return EXIT_FAILURES if summary.has_failures else EXIT_OK


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Render recorded test execution events on the console"
    )
    parser.add_argument(
        "events",
        help="Path to a JSON lines file of execution events ('-' for stdin)",
    )
    parser.add_argument(
        "--details",
        choices=[details.value for details in Details],
        default=Details.TREE.value,
        help="Output mode (default: tree)",
    )
    parser.add_argument(
        "--theme",
        choices=[theme.value for theme in Theme],
        default=None,
        help="Glyph theme (default: derived from the output encoding)",
    )
    parser.add_argument(
        "--disable-ansi-colors",
        action="store_true",
        help="Write plain text without color escape sequences",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log tree construction details",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    options = {
        "details": args.details,
        "disable_ansi_colors": args.disable_ansi_colors,
    }
    if args.theme is not None:
        options["theme"] = args.theme
    config = ConsoleConfig(**options)

    sys.exit(run(args.events, config, sys.stdout))


if __name__ == "__main__":  # pragma: no cover
    main()
