"""Tests for the tree printer."""

import io
import re
from datetime import datetime

import pytest

from tree_console.models.identifier import IdentifierKind
from tree_console.models.report_entry import ReportEntry
from tree_console.models.result import ExecutionResult, FailureDetail, Status
from tree_console.rendering.color import Colorizer
from tree_console.rendering.theme import Theme
from tree_console.rendering.tree_printer import (
    TreePrinter,
    is_not_blank,
    split_lines,
)
from tree_console.tree.node import TreeNode

TIMESTAMP = datetime(2017, 6, 21, 13, 7, 42, 123456)


def container(
    caption: str, *children: TreeNode, visible: bool = True, duration: int = 0
) -> TreeNode:
    """Create a successfully finished container with children."""
    node = TreeNode(caption=caption, kind=IdentifierKind.CONTAINER, visible=visible)
    node.children.extend(children)
    node.finish(ExecutionResult.successful(), duration)
    return node


def make_test(
    caption: str,
    result: ExecutionResult | None = None,
    duration: int = 5,
) -> TreeNode:
    """Create a leaf test finished with ``result``."""
    node = TreeNode(caption=caption)
    node.finish(result or ExecutionResult.successful(), duration)
    return node


def failed(message: str) -> ExecutionResult:
    return ExecutionResult(
        status=Status.FAILED,
        failure=FailureDetail(type_name="AssertionError", message=message),
    )


def root(*children: TreeNode) -> TreeNode:
    node = TreeNode.root()
    node.children.extend(children)
    return node


def render(tree: TreeNode, theme: Theme = Theme.ASCII, *, colors: bool = False) -> str:
    out = io.StringIO()
    TreePrinter(out, theme, Colorizer(enabled=colors)).print(tree)
    return out.getvalue()


def jupiter(*tests: TreeNode) -> TreeNode:
    """Engine and container wrapping ``tests`` like a single-class run."""
    engine = TreeNode(caption="JUnit Jupiter", kind=IdentifierKind.ENGINE)
    engine.children.append(container("ConsoleDetailsTests$Container", *tests))
    engine.finish(ExecutionResult.successful(), 0)
    return root(engine)


def test_renders_single_container_with_passing_test() -> None:
    """Renders root glyph, container and test with ASCII glyphs."""
    tree = root(container("container", make_test("t()", duration=5)))

    assert render(tree) == ".\n'-- container [OK]\n  '-- t() [OK]\n"


def test_last_sibling_uses_end_glyph() -> None:
    """Earlier siblings use the entry glyph, the last one the end glyph."""
    tree = root(container("c", make_test("a"), make_test("b"), make_test("c")))

    assert render(tree).splitlines() == [
        ".",
        "'-- c [OK]",
        "  +-- a [OK]",
        "  +-- b [OK]",
        "  '-- c [OK]",
    ]


def test_continuing_sibling_draws_vertical_column_for_descendants() -> None:
    """Children of a non-last node see a vertical column, others a blank one."""
    tree = root(container("c1", make_test("t1")), container("c2", make_test("t2")))

    assert render(tree, Theme.UNICODE).splitlines() == [
        "╷",
        "├─ c1 ✔",
        "│  └─ t1 ✔",
        "└─ c2 ✔",
        "   └─ t2 ✔",
    ]


def test_invisible_node_keeps_children_at_its_depth() -> None:
    """Invisible containers print no line and add no indentation."""
    hidden = container("hidden", make_test("a"), make_test("b"), visible=False)
    tree = root(container("outer", hidden))

    assert render(tree).splitlines() == [
        ".",
        "'-- outer [OK]",
        "  +-- a [OK]",
        "  '-- b [OK]",
    ]


def test_invisible_node_children_inherit_continuation_of_their_position() -> None:
    """Children of an invisible node are bulleted by their own sibling position."""
    hidden = container("hidden", make_test("a"), visible=False)
    tree = root(container("outer", hidden, make_test("z")))

    assert render(tree).splitlines() == [
        ".",
        "'-- outer [OK]",
        "  '-- a [OK]",
        "  '-- z [OK]",
    ]


def test_primary_line_count_equals_visible_node_count() -> None:
    """Emits one line per visible node, counting the root glyph line."""
    tree = root(
        container(
            "engine",
            container("c1", make_test("a"), make_test("b")),
            container("c2", make_test("c"), visible=False),
            make_test("d"),
        ),
        container("other", make_test("e")),
    )

    assert len(render(tree).splitlines()) == tree.count_visible() == 9


def test_skipped_leaf_shows_reason_inline() -> None:
    """Skip reason follows the skip icon on the same line."""
    leaf = TreeNode(caption="t()")
    leaf.skip("slow")
    tree = root(container("c", leaf))

    assert render(tree).splitlines() == [".", "'-- c [OK]", "  '-- t() [S] slow"]


def test_skipped_leaf_is_painted_with_skipped_color() -> None:
    """Caption, icon and reason of a skipped node use the skipped color."""
    leaf = TreeNode(caption="t()")
    leaf.skip("slow")

    output = render(root(leaf), colors=True)

    assert output.splitlines()[1] == (
        "\x1b[36m'--\x1b[0m \x1b[35mt()\x1b[0m \x1b[35m[S]\x1b[0m \x1b[35mslow\x1b[0m"
    )


def test_running_node_shows_skipped_glyph() -> None:
    """Nodes without result or reason render the generic skip glyph."""
    tree = root(TreeNode(caption="pending()"))

    assert render(tree, Theme.UNICODE).splitlines()[1] == "└─ pending() ↷"


def test_slow_leaf_shows_duration() -> None:
    """Leaves slower than ten seconds show their duration before the icon."""
    tree = root(make_test("slow()", duration=15000))

    assert render(tree).splitlines()[1] == "'-- slow() 15000 ms [OK]"


def test_slow_container_hides_duration() -> None:
    """Containers never show their duration."""
    tree = root(container("slow", make_test("fast()"), duration=15000))

    assert render(tree).splitlines()[1] == "'-- slow [OK]"


def test_duration_at_threshold_is_hidden() -> None:
    """Exactly ten seconds is not slow."""
    tree = root(make_test("edge()", duration=10000))

    assert render(tree).splitlines()[1] == "'-- edge() [OK]"


def test_skip_reason_unicode_golden() -> None:
    """Matches launcher output for a skipped test."""
    leaf = TreeNode(caption="skipWithSingleLineReason()")
    leaf.skip("single line skip reason")

    assert render(jupiter(leaf), Theme.UNICODE).splitlines() == [
        "╷",
        "└─ JUnit Jupiter ✔",
        "   └─ ConsoleDetailsTests$Container ✔",
        "      └─ skipWithSingleLineReason() ↷ single line skip reason",
    ]


@pytest.mark.parametrize(
    ("theme", "expected"),
    [
        (
            Theme.UNICODE,
            [
                "╷",
                "└─ JUnit Jupiter ✔",
                "   └─ ConsoleDetailsTests$Container ✔",
                "      └─ failWithMultiLineMessage() ✘ multi",
                "               line",
                "               fail",
                "               message",
            ],
        ),
        (
            Theme.ASCII,
            [
                ".",
                "'-- JUnit Jupiter [OK]",
                "  '-- ConsoleDetailsTests$Container [OK]",
                "    '-- failWithMultiLineMessage() [X] multi",
                "          line",
                "          fail",
                "          message",
            ],
        ),
    ],
)
def test_multi_line_failure_message_golden(theme: Theme, expected: list[str]) -> None:
    """Continuation lines of a failure message are indented past the tabbed column."""
    leaf = make_test("failWithMultiLineMessage()", failed("multi\nline\nfail\nmessage"))

    assert render(jupiter(leaf), theme).splitlines() == expected


def test_blank_message_line_keeps_only_indent() -> None:
    """Blank segments produce an indent-only line."""
    tree = root(make_test("t()", failed("first\n\nthird")))

    assert render(tree) == ".\n'-- t() [X] first\n    \n      third\n"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("\x1f", ".\n'-- t() [X] a\n    \n"),
        ("\u00a0", ".\n'-- t() [X] a\n      \u00a0\n"),
    ],
)
def test_blankness_counts_only_control_and_space_characters(
    line: str, expected: str
) -> None:
    """Characters up to the space are blank, anything above is printed."""
    assert render(root(make_test("t()", failed(f"a\n{line}")))) == expected


def test_continuing_sibling_message_keeps_vertical_column() -> None:
    """Message lines of a non-last node continue the vertical glyph."""
    tree = root(make_test("a", failed("x\ny")), make_test("b"))

    assert render(tree) == ".\n+-- a [X] x\n|     y\n'-- b [OK]\n"


def test_continuing_sibling_report_entries_keep_vertical_column() -> None:
    """Report entries of a non-last node continue the vertical glyph."""
    leaf = make_test("a")
    leaf.reports.append(ReportEntry.from_pair("foo", "bar", timestamp=TIMESTAMP))
    leaf.reports.append(
        ReportEntry(timestamp=TIMESTAMP, key_value_pairs={"k1": "v1", "k2": "v2"})
    )
    tree = root(leaf, make_test("b"))

    assert render(tree).splitlines() == [
        ".",
        "+-- a [OK]",
        "|   2017-06-21T13:07:42.123 foo = `bar`",
        "|   2017-06-21T13:07:42.123",
        "|     k1 = `v1`",
        "|     k2 = `v2`",
        "'-- b [OK]",
    ]


def test_failure_without_message_prints_icon_only() -> None:
    """A failure detail without message adds nothing after the icon."""
    result = ExecutionResult(
        status=Status.FAILED, failure=FailureDetail(type_name="AssertionError")
    )

    assert render(root(make_test("t()", result))).splitlines()[1] == "'-- t() [X]"


def test_aborted_caption_and_icon_use_aborted_color() -> None:
    """Non-successful captions take the status color."""
    tree = root(make_test("t()", ExecutionResult.aborted()))

    assert render(tree, Theme.UNICODE, colors=True).splitlines()[1] == (
        "\x1b[36m└─\x1b[0m \x1b[33mt()\x1b[0m \x1b[33m■\x1b[0m"
    )


def test_successful_caption_uses_kind_color() -> None:
    """Successful captions keep the color of their kind."""
    tree = root(container("c", make_test("t()")))

    assert render(tree, colors=True).splitlines() == [
        "\x1b[36m.\x1b[0m",
        "\x1b[36m'--\x1b[0m \x1b[36mc\x1b[0m \x1b[32m[OK]\x1b[0m",
        "\x1b[36m  '--\x1b[0m \x1b[34mt()\x1b[0m \x1b[32m[OK]\x1b[0m",
    ]


def test_single_mapping_report_entry_golden() -> None:
    """An entry with one pair prints it after the timestamp."""
    leaf = make_test("reportSingleEntryWithSingleMapping(TestReporter)")
    leaf.reports.append(ReportEntry.from_pair("foo", "bar", timestamp=TIMESTAMP))

    assert render(jupiter(leaf), Theme.UNICODE).splitlines()[3:] == [
        "      └─ reportSingleEntryWithSingleMapping(TestReporter) ✔",
        "            2017-06-21T13:07:42.123 foo = `bar`",
    ]


def test_multi_mapping_report_entries_golden() -> None:
    """Entries with several pairs print one pair per line."""
    leaf = TreeNode(caption="reportMultiEntriesWithMultiMappings(TestReporter)")
    leaf.add_report(
        ReportEntry(
            timestamp=TIMESTAMP,
            key_value_pairs={"user name": "dk38", "award year": "1974"},
        )
    )
    leaf.add_report(ReportEntry.from_pair("single", "mapping", timestamp=TIMESTAMP))
    leaf.add_report(
        ReportEntry(
            timestamp=TIMESTAMP,
            key_value_pairs={
                "user name": "st77",
                "award year": "1977",
                "last seen": "2001",
            },
        )
    )
    leaf.finish(ExecutionResult.successful(), 3)

    assert render(jupiter(leaf), Theme.UNICODE).splitlines()[3:] == [
        "      └─ reportMultiEntriesWithMultiMappings(TestReporter) ✔",
        "            2017-06-21T13:07:42.123",
        "               user name = `dk38`",
        "               award year = `1974`",
        "            2017-06-21T13:07:42.123 single = `mapping`",
        "            2017-06-21T13:07:42.123",
        "               user name = `st77`",
        "               award year = `1977`",
        "               last seen = `2001`",
    ]


def test_report_entry_is_painted() -> None:
    """Keys use the key color, values the value color, timestamps stay plain."""
    leaf = make_test("t()")
    leaf.reports.append(ReportEntry.from_pair("foo", "bar", timestamp=TIMESTAMP))

    output = render(root(leaf), colors=True)

    assert output.splitlines()[2] == (
        "\x1b[36m    \x1b[0m2017-06-21T13:07:42.123 "
        "\x1b[33mfoo\x1b[0m = `\x1b[32mbar\x1b[0m`"
    )


def test_report_timestamp_matches_pattern() -> None:
    """Report timestamps follow uuuu-MM-dd'T'HH:mm:ss.SSS."""
    leaf = make_test("t()")
    leaf.reports.append(ReportEntry.from_pair("k", "v"))

    line = render(root(leaf)).splitlines()[2]

    assert re.fullmatch(r"    \d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3} k = `v`", line)


def test_flushes_once_after_rendering() -> None:
    """Output is flushed exactly once, at the end."""

    class RecordingStream(io.StringIO):
        flushes: list[int]

        def flush(self) -> None:
            self.flushes.append(len(self.getvalue()))
            super().flush()

    out = RecordingStream()
    out.flushes = []
    TreePrinter(out, Theme.ASCII, Colorizer(enabled=False)).print(
        root(make_test("a"), make_test("b"))
    )

    assert out.flushes == [len(out.getvalue())]


def test_write_errors_propagate() -> None:
    """I/O failures of the output stream reach the caller."""
    out = io.StringIO()
    out.close()

    with pytest.raises(ValueError, match="closed file"):
        TreePrinter(out, Theme.ASCII).print(root(make_test("a")))


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("single", ["single"]),
        ("a\nb", ["a", "b"]),
        ("a\r\nb\rc", ["a", "b", "c"]),
        ("a\u2028b", ["a", "b"]),
        ("a\n\nb", ["a", "", "b"]),
        ("a\n\n", ["a"]),
        ("", [""]),
        ("\n", [""]),
    ],
)
def test_split_lines(message: str, expected: list[str]) -> None:
    """Splits on any line break and drops trailing empty segments."""
    assert split_lines(message) == expected


@pytest.mark.parametrize(
    ("line", "expected"),
    [("", False), (" \t", False), ("\x1f", False), ("\u00a0", True), ("x", True)],
)
def test_is_not_blank(line: str, expected: bool) -> None:
    """Only characters above the space character make a line non-blank."""
    assert is_not_blank(line) is expected
