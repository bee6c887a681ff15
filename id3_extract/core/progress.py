"""
Scan progress display for the id3x command, built on Rich.

Drawn on stderr so stdout only carries the JSON result. When stderr is
not a terminal (pipes, CI, tests) the bar is not drawn at all, while the
counters keep working.

Usage:
    from id3_extract.core.progress import ScanProgressBar

    with ScanProgressBar(total=len(paths)) as progress:
        for path in paths:
            tags = process(path)
            progress.update(found=tags is not None)
"""

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn
from rich.theme import Theme


SCAN_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class ScanProgressBar:
    """
    One-line progress display for a tag scan.

        Reading tags    ✓ 45  ∅ 2  ✗ 1    ━━━━━━━━━━━━━━━━━  47%

    ✓ counts files with a decoded tag, ∅ files without one and ✗ files
    that could not be read.

    Attributes:
        total: Number of files in the scan.
        found: Files with a decoded tag.
        missing: Files without a readable tag.
        failed: Files that could not be read.
    """

    def __init__(self, total: int, description: str = "Reading tags") -> None:
        self.total = total
        self.description = description
        self.found = 0
        self.missing = 0
        self.failed = 0

        console = Console(stderr=True, theme=SCAN_THEME)
        self._progress = Progress(
            TextColumn("[white]{task.description}"),
            TextColumn("{task.fields[status]}"),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=console,
            disable=not console.is_terminal,
        )
        self._task: TaskID | None = None

    @property
    def scanned(self) -> int:
        """Number of files recorded so far."""
        return self.found + self.missing + self.failed

    def __enter__(self) -> "ScanProgressBar":
        self._progress.start()
        self._task = self._progress.add_task(
            self.description, total=self.total, status=self._status()
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._progress.stop()
        self._task = None

    def _status(self) -> str:
        status = f"[green]✓ {self.found}[/green]  [yellow]∅ {self.missing}[/yellow]"
        if self.failed:
            status += f"  [red]✗ {self.failed}[/red]"
        return status

    def update(self, found: bool, failed: bool = False) -> None:
        """
        Record one scanned file.

        Args:
            found: Whether a tag was decoded from the file.
            failed: Whether the file could not be read at all.
        """
        if failed:
            self.failed += 1
        elif found:
            self.found += 1
        else:
            self.missing += 1

        if self._task is not None:
            self._progress.update(self._task, completed=self.scanned, status=self._status())
