"""Console rendering and progress helpers for the uploader."""
from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

log = logging.getLogger(__name__)

ERASE_LINE = "\x1b[2K"
CURSOR_HOME = "\r"


def render_configuration_summary(config: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Render startup configuration summary."""
    console = console or Console()
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]esdoc-uploader[/bold green]",
        subtitle="[dim]doc.esdoc.org[/dim]",
        border_style="blue",
    )
    console.print(panel)


class ConsoleReporter:
    """
    Prints timestamped diagnostics, red for errors and green for success.

    Implements IReporter protocol.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(highlight=False)

    def error(self, message: str) -> None:
        log.debug("error: %s", message)
        self._print(message, "red")

    def success(self, message: str) -> None:
        log.debug("success: %s", message)
        self._print(message, "green")

    def _print(self, message: str, color: str) -> None:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self._console.print(f"[dim]\\[{stamp}][/dim] [{color}]{escape(message)}[/{color}]")


class ProgressIndicator:
    """
    Animated "Uploading..." line shown while an upload is outstanding.

    Each tick rewrites the current terminal line; the dot count bounces
    between 0 and `limit`.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        text: str = "Uploading",
        interval: float = 0.5,
        limit: int = 3,
    ):
        self._stream = stream or sys.stdout
        self._text = text
        self._interval = interval
        self._limit = limit
        self._counter = -1
        self._increase = True
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        self._counter = -1
        self._increase = True
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._restart_line()

    def tick(self) -> str:
        """Advance the animation one step and redraw; returns the text written."""
        if self._increase:
            self._counter += 1
            if self._counter == self._limit:
                self._increase = False
        else:
            self._counter -= 1
            if self._counter == 0:
                self._increase = True

        text = self._text + "." * self._counter
        self._restart_line()
        self._write(text)
        return text

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.tick()

    def _restart_line(self) -> None:
        self._write(ERASE_LINE + CURSOR_HOME)

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()
