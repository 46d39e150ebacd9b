# anime_renamer/preflight.py
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Union

from .models import RenameInstruction
from .exceptions import PreflightError

log = logging.getLogger(__name__)


def _is_blank(path: Optional[Union[str, Path]]) -> bool:
    # Path("") normalises to "."; a batch never renames the working directory itself.
    if path is None:
        return True
    text = str(path).strip()
    return text in ("", ".")


def validate_rename_instructions(instructions: Sequence[RenameInstruction]) -> List[str]:
    """
    Checks a planned batch without touching the filesystem.

    Every problem is collected, so one report lists all of them. An empty
    return value means the batch is safe to execute.
    """
    issues: List[str] = []

    if not instructions:
        issues.append("no matched file pairs were found")

    source_paths: Set[Path] = set()
    target_paths: Dict[Path, None] = {} # insertion ordered set

    for instruction in instructions:
        if _is_blank(instruction.source_path):
            issues.append("operation contains empty source path")
            continue

        if _is_blank(instruction.target_path):
            issues.append(f"operation for {instruction.source_path} contains empty target path")
            continue

        source_paths.add(instruction.source_path)

        try:
            os.stat(instruction.source_path)
        except OSError as e:
            log.debug(f"Preflight: cannot stat source '{instruction.source_path}': {e}")
            issues.append(f"source file does not exist or is not readable: {instruction.source_path}")

        if instruction.is_noop:
            continue

        if instruction.target_path in target_paths:
            issues.append(f"duplicate target path detected: {instruction.target_path}")
            continue

        target_paths[instruction.target_path] = None

    for target_path in target_paths:
        if target_path in source_paths:
            # Freed by the batch itself before phase two writes to it.
            continue

        try:
            os.stat(target_path)
        except FileNotFoundError:
            continue
        except OSError as e:
            issues.append(f"unable to validate target path {target_path}: {e}")
            continue

        issues.append(f"target path already exists: {target_path}")

    if issues:
        log.warning(f"Preflight found {len(issues)} issue(s) in {len(instructions)} planned renames.")
    else:
        log.debug(f"Preflight passed for {len(instructions)} planned renames.")
    return issues


def preflight_rename_instructions(instructions: Sequence[RenameInstruction]) -> None:
    """Raises PreflightError listing every issue found by validate_rename_instructions."""
    issues = validate_rename_instructions(instructions)
    if issues:
        raise PreflightError(issues)
