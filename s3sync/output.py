"""Console output formatting for s3sync."""

import json
import sys
from typing import Any, Optional

from rich.console import Console


class OutputFormatter:
    """Writes user-facing status lines and results.

    Informational output goes to stdout, warnings and errors to stderr.
    ``quiet`` suppresses everything except errors and, unless
    ``show_warnings`` says otherwise, warnings; ``json_output`` switches
    structured results to JSON.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        show_warnings: Optional[bool] = None,
    ):
        self.json_output = json_output
        self.quiet = quiet
        self.show_warnings = not quiet if show_warnings is None else show_warnings
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def print(self, message: str = "") -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        if not self.show_warnings:
            return
        self.err_console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        self.err_console.print(message, style="bold red", markup=False)

    def print_summary(self, title: str, items: list[tuple[str, Any]]) -> None:
        """Print a titled list of key/value rows.

        Args:
            title: Heading of the summary
            items: (label, value) pairs
        """
        if self.quiet or self.json_output:
            return
        self.console.print(title, style="bold", markup=False)
        width = max((len(label) for label, _ in items), default=0)
        for label, value in items:
            self.console.print(f"  {label.ljust(width)}  {value}", markup=False)

    def output_json(self, data: Any) -> None:
        """Write data as JSON to stdout."""
        sys.stdout.write(json.dumps(data, indent=2, default=str) + "\n")
        sys.stdout.flush()
