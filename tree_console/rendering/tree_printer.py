"""Render the tree model as tree-drawn console output."""

import re
from dataclasses import dataclass, field
from typing import TextIO

from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import Status
from tree_console.rendering.color import Color, Colorizer
from tree_console.rendering.theme import Theme
from tree_console.tree.builder import TreeBuilder
from tree_console.tree.node import TreeNode

LINE_BREAK = re.compile(r"\r\n|[\n\x0b\x0c\r\x85\u2028\u2029]")

# Leaves slower than this show their duration.
SLOW_THRESHOLD_MS = 10000


def split_lines(message: str) -> list[str]:
    """Split on any line break, dropping trailing empty segments."""
    lines = LINE_BREAK.split(message)
    while len(lines) > 1 and not lines[-1]:
        lines.pop()
    return lines


def is_not_blank(line: str) -> bool:
    """Whether ``line`` holds a character above the space character."""
    return any(ch > " " for ch in line)


@dataclass(frozen=True)
class TreePrinter:
    """Depth-first printer of a finalized tree.

    Writes one primary line per visible node, plus continuation lines for
    multi-line messages and report entries. ``out`` is flushed once, after
    the whole tree has been written.
    """

    out: TextIO
    theme: Theme
    colorizer: Colorizer = field(default_factory=Colorizer)

    def print(self, root: TreeNode) -> None:
        """Print the root glyph followed by every descendant of ``root``."""
        self.out.write(self._paint(Color.CONTAINER, self.theme.root()))
        self.out.write("\n")
        self._print_children(root, "")
        self.out.flush()

    def _print(self, node: TreeNode, indent: str, continuous: bool) -> None:
        if node.visible:
            self._print_visible(node, indent, continuous)
        if not node.children:
            return
        if node.visible:
            indent += self.theme.vertical() if continuous else self.theme.blank()
        self._print_children(node, indent)

    def _print_children(self, node: TreeNode, indent: str) -> None:
        last = len(node.children) - 1
        for index, child in enumerate(node.children):
            self._print(child, indent, index < last)

    def _print_visible(self, node: TreeNode, indent: str, continuous: bool) -> None:
        theme = self.theme
        bullet = theme.entry() if continuous else theme.end()
        column = theme.vertical() if continuous else theme.blank()
        prefix = self._paint(Color.CONTAINER, indent + bullet)
        tabbed = self._paint(Color.CONTAINER, indent + column + theme.blank())

        icon = self._paint(Color.SKIPPED, theme.skipped())
        if (result := node.result) is not None:
            icon = self._paint(
                Color.for_status(result.status), theme.status(result.status)
            )

        write = self.out.write
        write(prefix)
        write(" ")
        write(self._caption(node))
        if node.duration > SLOW_THRESHOLD_MS and not node.children:
            write(" ")
            write(self._paint(Color.CONTAINER, f"{node.duration} ms"))
        write(" ")
        write(icon)
        if result is not None and result.failure is not None:
            if result.failure.message is not None:
                self._print_message(Color.FAILED, tabbed, result.failure.message)
        if node.reason is not None:
            self._print_message(Color.SKIPPED, tabbed, node.reason)
        for entry in node.reports:
            self._print_report_entry(tabbed, entry)
        write("\n")

    def _caption(self, node: TreeNode) -> str:
        result = node.result
        if result is not None and result.status is not Status.SUCCESSFUL:
            return self._paint(Color.for_status(result.status), node.caption)
        if node.reason is not None:
            return self._paint(Color.SKIPPED, node.caption)
        return self._paint(Color.for_kind(node.kind), node.caption)

    def _print_message(self, color: Color, indent: str, message: str) -> None:
        """Print a message that may span several lines."""
        first, *rest = split_lines(message)
        write = self.out.write
        write(" ")
        write(self._paint(color, first))
        for line in rest:
            write("\n")
            write(indent)
            if is_not_blank(line):
                write(self._paint(color, self.theme.blank() + line))

    def _print_report_entry(self, indent: str, entry: ReportEntry) -> None:
        write = self.out.write
        write("\n")
        write(indent)
        write(entry.formatted_timestamp())
        pairs = entry.key_value_pairs
        if len(pairs) == 1:
            ((key, value),) = pairs.items()
            self._print_pair(" ", key, value)
            return
        for key, value in pairs.items():
            write("\n")
            self._print_pair(indent + self.theme.blank(), key, value)

    def _print_pair(self, indent: str, key: str, value: str) -> None:
        write = self.out.write
        write(indent)
        write(self._paint(Color.YELLOW, key))
        write(" = `")
        write(self._paint(Color.GREEN, value))
        write("`")

    def _paint(self, color: Color, text: str) -> str:
        return self.colorizer.paint(color, text)


@dataclass(kw_only=True)
class TreePrintingListener(TreeBuilder):
    """Builds the tree while the run progresses and prints it at the end."""

    printer: TreePrinter

    def execution_finished(self) -> None:
        self.printer.print(self.root)
