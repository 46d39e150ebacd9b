# anime_renamer/utils.py

import os
import sys
import logging
from pathlib import Path
from typing import Iterable, List, Set, Union

from tqdm import tqdm

from .models import TaggedFile
from .extractor import extract_season_and_episode, has_numeric_cue
from .exceptions import FileOperationError, RenamerError

log = logging.getLogger(__name__)

INVALID_TITLE_CHARS = '<>:"/\\|?*'


def validate_folder_path(folder_path: Union[str, Path]) -> Path:
    if not str(folder_path).strip():
        raise RenamerError("folder path is empty")

    path = Path(folder_path)
    try:
        path.stat()
    except OSError as e:
        raise RenamerError(f"checking folder path: {e}") from e

    if not path.is_dir():
        raise RenamerError(f"folder path is not a directory: {folder_path}")
    return path


def validate_title(title: str) -> str:
    if not title or not title.strip():
        raise RenamerError("anime name is empty")
    if any(c in title for c in INVALID_TITLE_CHARS):
        raise RenamerError(f"anime name contains invalid filename characters: {title}")
    return title


def _is_ignored(item_path: Path, ignore_patterns: Iterable[str]) -> bool:
    for pattern in ignore_patterns:
        try:
            if item_path.match(pattern):
                log.debug(f"  -> Ignoring '{item_path}' (matches ignore pattern: '{pattern}')")
                return True
        except ValueError as e_match:
            log.error(f"  -> Error matching pattern '{pattern}' against '{item_path}': {e_match}")
            return True
    return False


def _iter_candidate_paths(base_path: Path, recursive: bool) -> Iterable[Path]:
    if not recursive:
        yield from sorted(p for p in base_path.iterdir() if p.is_file())
        return

    def _raise_walk_error(err: OSError):
        raise err

    for root, dirs, files in os.walk(base_path, onerror=_raise_walk_error):
        dirs.sort()
        for filename in sorted(files):
            yield Path(root) / filename


def find_files(
    folder_path: Path,
    extensions: Iterable[str],
    recursive: bool = True,
    ignore_patterns: Iterable[str] = ()
) -> List[TaggedFile]:
    """
    Lists files under ``folder_path`` with one of ``extensions`` that carry an episode number.

    Discovery order is sorted by directory then name. Files whose name has no
    digits, or no recognisable episode, are left out.
    """
    extension_set: Set[str] = {ext.lower() for ext in extensions}
    patterns = list(ignore_patterns)
    found: List[TaggedFile] = []

    try:
        candidates = _iter_candidate_paths(Path(folder_path), recursive)
        for path in tqdm(candidates, desc="Scanning", unit="file", disable=not sys.stderr.isatty(), leave=False):
            ext = path.suffix.lower()
            if ext not in extension_set:
                continue
            if _is_ignored(path, patterns):
                continue
            if not has_numeric_cue(path.name):
                log.debug(f"  -> Skipping '{path.name}': no digits in name")
                continue

            season, episode = extract_season_and_episode(path.name)
            tagged = TaggedFile(path=path, season=season, episode=episode, extension=ext)
            if not tagged.has_identity:
                log.debug(f"  -> Skipping '{path.name}': no episode number found")
                continue

            found.append(tagged)
    except OSError as e:
        raise FileOperationError(f"walking folder {folder_path}: {e}") from e

    log.info(f"Found {len(found)} files with extensions {sorted(extension_set)} in '{folder_path}'.")
    return found
