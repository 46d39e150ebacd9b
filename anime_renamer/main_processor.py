# anime_renamer/main_processor.py
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.text import Text

from .config_manager import ConfigHelper
from .exceptions import RenamerError
from .file_system_ops import execute_rename_instructions, TEMP_PREFIX, MAX_TEMP_PATH_ATTEMPTS
from .pairing import create_file_pairs
from .planner import build_rename_instructions
from .preflight import preflight_rename_instructions
from .ui_utils import (
    ConsoleReporter, LineReader, confirm_rename, display_pairs_and_unmatched,
    make_stdin_reader, prompt_line
)
from .utils import find_files, validate_folder_path, validate_title

log = logging.getLogger(__name__)

FOLDER_PROMPT = "Enter the path to the folder containing the videos and subtitles: "
TITLE_PROMPT = "Enter the name of the anime: "


class MainProcessor:
    """
    Runs one rename session: discover, pair, plan, check, then rename.

    Interactive input comes from ``reader`` so callers and tests can supply
    answers without touching stdin.
    """
    def __init__(self, args, cfg_helper: ConfigHelper, console: Console, reader: Optional[LineReader] = None):
        self.args = args
        self.cfg = cfg_helper
        self.console = console
        self.reader = reader or make_stdin_reader()

    def _ask(self, prompt: str, what: str) -> str:
        try:
            return prompt_line(self.reader, self.console, prompt)
        except EOFError as e:
            raise RenamerError(f"reading {what}: end of input") from e

    def _resolve_folder(self) -> Path:
        folder = getattr(self.args, 'directory', None)
        if folder is None:
            folder = self._ask(FOLDER_PROMPT, "folder path")
        return validate_folder_path(folder)

    def _resolve_title(self) -> str:
        title = getattr(self.args, 'title', None)
        if title is None:
            title = self._ask(TITLE_PROMPT, "anime name")
        return validate_title(title.strip())

    def _confirm_live_run(self) -> bool:
        if getattr(self.args, 'yes', False) or not self.cfg('confirm_live_run', True):
            log.debug("Live run confirmation skipped.")
            return True
        try:
            return confirm_rename(self.reader, self.console)
        except EOFError as e:
            raise RenamerError("reading confirmation: end of input") from e

    def run_processing(self) -> Dict[str, Any]:
        results: Dict[str, Any] = {'pairs': 0, 'unmatched': 0, 'renamed': 0, 'dry_run': False, 'cancelled': False}

        folder = self._resolve_folder()
        title = self._resolve_title()
        recursive = bool(self.cfg('recursive', True))
        ignore_patterns = self.cfg.get_list('ignore_patterns')
        log.info(f"Processing '{folder}' as '{title}' (recursive={recursive})")

        video_files = find_files(folder, self.cfg.get_list('video_extensions'), recursive, ignore_patterns)
        subtitle_files = find_files(folder, self.cfg.get_list('subtitle_extensions'), recursive, ignore_patterns)

        if not video_files and not subtitle_files:
            raise RenamerError("no video or subtitle files found")

        if len(video_files) != len(subtitle_files):
            log.warning(f"Found {len(video_files)} video files and {len(subtitle_files)} subtitle files.")
            self.console.print(f"[yellow]Warning:[/yellow] found {len(video_files)} video files and {len(subtitle_files)} subtitle files.")

        pairs, unmatched = create_file_pairs(video_files, subtitle_files)
        results['pairs'] = len(pairs)
        results['unmatched'] = len(unmatched)
        display_pairs_and_unmatched(self.console, pairs, unmatched)

        instructions = build_rename_instructions(pairs, title)
        preflight_rename_instructions(instructions)

        reporter = ConsoleReporter(self.console)
        temp_prefix = self.cfg('temp_file_prefix', TEMP_PREFIX)
        temp_attempts = int(self.cfg('temp_path_attempts', MAX_TEMP_PATH_ATTEMPTS))

        if getattr(self.args, 'dry_run', False):
            results['dry_run'] = True
            self.console.print("\nDry-run mode enabled. No files will be changed.")
            execute_rename_instructions(instructions, True, reporter)
            self.console.print("Dry-run complete.")
            return results

        if not self._confirm_live_run():
            log.info("User declined the rename.")
            self.console.print("Renaming cancelled.")
            results['cancelled'] = True
            return results

        results['renamed'] = execute_rename_instructions(
            instructions, False, reporter,
            temp_prefix=temp_prefix, max_temp_attempts=temp_attempts
        )
        self.console.print(Text("All done :)", style="bold green"))
        return results
