# anime_renamer/ui_utils.py
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import FilePair, TaggedFile

log = logging.getLogger(__name__)

LineReader = Callable[[], str] # returns '' at end of input, like TextIO.readline


class RenameReporter:
    """
    Receives per-file progress while a batch executes.

    The base class only logs; ConsoleReporter prints for the user.
    """
    def no_change(self, path: Path, dry_run: bool) -> None:
        log.debug(f"No change{' (dry run)' if dry_run else ''}: {path}")

    def planned(self, source: Path, target: Path) -> None:
        log.debug(f"Would rename: {source} -> {target}")

    def completed(self, source: Path, target: Path) -> None:
        log.debug(f"Renamed: {source} -> {target}")

    def nothing_to_do(self) -> None:
        log.debug("No files need renaming.")


class ConsoleReporter(RenameReporter):
    def __init__(self, console: Console):
        self.console = console

    def no_change(self, path: Path, dry_run: bool) -> None:
        super().no_change(path, dry_run)
        prefix = "[dry-run] " if dry_run else ""
        self.console.print(Text(f"{prefix}No change: {path}", style="dim"))

    def planned(self, source: Path, target: Path) -> None:
        super().planned(source, target)
        self.console.print(Text(f"[dry-run] {source} -> {target}", style="yellow"))

    def completed(self, source: Path, target: Path) -> None:
        super().completed(source, target)
        self.console.print(Text(f"Renamed: {source} -> {target}", style="green"))

    def nothing_to_do(self) -> None:
        super().nothing_to_do()
        self.console.print("No files need renaming.")


def make_console(quiet: bool = False, file: Optional[TextIO] = None) -> Console:
    return Console(file=file, quiet=quiet, highlight=False)


def make_stdin_reader(stream: Optional[TextIO] = None) -> LineReader:
    source = stream if stream is not None else sys.stdin
    return source.readline


def display_pairs_and_unmatched(console: Console, pairs: Sequence[FilePair], unmatched: Sequence[TaggedFile]) -> None:
    table = Table(title="Matched pairs", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Video", style="cyan")
    table.add_column("Subtitle", style="green")
    for i, pair in enumerate(pairs, start=1):
        table.add_row(str(i), Text(pair.media.path.name), Text(pair.companion.path.name))
    console.print(table)

    if unmatched:
        console.print("\n[bold yellow]Unmatched files:[/bold yellow]")
        for i, tagged in enumerate(unmatched, start=1):
            console.print(Text(f"{i}. {tagged.path.name}"))


def prompt_line(reader: LineReader, console: Console, prompt: str) -> str:
    """Shows ``prompt`` and returns the next stripped line. Raises EOFError on exhausted input."""
    console.print(prompt, end="")
    line = reader()
    if not line:
        raise EOFError(f"no input for prompt: {prompt.strip()}")
    return line.strip()


def confirm_rename(reader: LineReader, console: Console) -> bool:
    while True:
        response = prompt_line(reader, console, "\nDo you want to proceed with renaming? (yes/no): ").lower()
        if response in ("yes", "y"):
            return True
        if response in ("no", "n"):
            return False
        console.print("Please answer with yes/y or no/n.")
