"""Wiring of configured listeners to an output stream."""

from typing import TextIO

from tree_console.config import ConsoleConfig, Details
from tree_console.listener import ExecutionListener
from tree_console.rendering.color import Colorizer
from tree_console.rendering.flat_printer import FlatPrintingListener
from tree_console.rendering.tree_printer import TreePrinter, TreePrintingListener


def create_listener(config: ConsoleConfig, out: TextIO) -> ExecutionListener:
    """Create the listener rendering the configured level of detail to ``out``."""
    colorizer = Colorizer.from_flag(config.disable_ansi_colors)
    match config.details:
        case Details.NONE:
            return ExecutionListener()
        case Details.FLAT:
            return FlatPrintingListener(out, colorizer)
        case Details.TREE:
            return TreePrintingListener(
                printer=TreePrinter(out, config.theme, colorizer)
            )
