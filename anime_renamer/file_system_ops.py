# anime_renamer/file_system_ops.py
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .models import RenameInstruction, RenameProgress
from .enums import ExecutionPhase
from .exceptions import (
    FileOperationError, RenameExecutionError, RollbackError, TempPathAllocationError
)
from .ui_utils import RenameReporter

log = logging.getLogger(__name__)

RenameFunc = Callable[[Path, Path], None]

TEMP_PREFIX = ".anime-renamer-tmp-"
MAX_TEMP_PATH_ATTEMPTS = 1000


def build_temp_path(
    source_path: Path,
    index: int,
    temp_prefix: str = TEMP_PREFIX,
    max_attempts: int = MAX_TEMP_PATH_ATTEMPTS
) -> Path:
    """
    Finds an unused name next to ``source_path`` for phase one.

    Candidates look like ``<prefix><pid>-<index*1000+attempt>-<name>``.
    """
    directory = source_path.parent
    for attempt in range(max_attempts):
        candidate = directory / f"{temp_prefix}{os.getpid()}-{index * 1000 + attempt}-{source_path.name}"
        try:
            os.stat(candidate)
        except FileNotFoundError:
            return candidate
        except OSError as e:
            raise FileOperationError(f"checking temp path {candidate}: {e}") from e
        log.debug(f"Temp candidate '{candidate.name}' is taken, trying next.")

    raise TempPathAllocationError(source_path, max_attempts)


def _move_back(state: RenameProgress, destination: Path, rename_fn: RenameFunc, failures: List[str]) -> bool:
    try:
        os.stat(state.current_path)
    except FileNotFoundError:
        log.error(f"  Rollback: '{state.current_path}' disappeared, cannot restore '{state.source_path}'.")
        failures.append(f"rollback source disappeared: {state.current_path}")
        return False
    except OSError as e:
        log.error(f"  Rollback: cannot stat '{state.current_path}': {e}")
        failures.append(f"rollback stat failed for {state.current_path}: {e}")
        return False

    # Rollback never overwrites.
    if os.path.lexists(destination):
        log.error(f"  Rollback: '{destination}' is occupied, leaving '{state.current_path}' in place.")
        failures.append(f"rollback destination already exists: {destination}")
        return False

    try:
        log.debug(f"  Rollback: '{state.current_path}' -> '{destination}'")
        rename_fn(state.current_path, destination)
    except Exception as e:
        log.error(f"  Rollback failed ('{state.current_path}' -> '{destination}'): {e}")
        failures.append(f"rollback failed ({state.current_path} -> {destination}): {e}")
        return False

    state.current_path = destination
    return True


def rollback_rename_progress(progress: Sequence[RenameProgress], rename_fn: Optional[RenameFunc] = None) -> None:
    """
    Moves every file of a batch back to its original path.

    Runs in two passes, newest first in each: files that reached their target
    go back to their temporary name, then every file leaves its temporary
    name for its source. A target can be another file's source, so the first
    pass frees all sources before the second writes to them. Nothing is
    overwritten; an occupied destination is a failure.

    Each move gets exactly one attempt. Failures do not stop the walk; they
    are collected and raised together as a RollbackError at the end.
    """
    rename_fn = rename_fn or os.rename
    failures: List[str] = []

    for state in reversed(progress):
        if state.current_path == state.target_path and not state.is_at_source:
            _move_back(state, state.temp_path, rename_fn, failures)

    restored = 0
    for state in reversed(progress):
        if state.is_at_source:
            continue
        if state.current_path == state.target_path:
            continue # failed in the first pass, already recorded
        if _move_back(state, state.source_path, rename_fn, failures):
            restored += 1

    log.warning(f"Rollback summary: {restored} files restored, {len(failures)} restore failures.")
    if failures:
        raise RollbackError(failures)


def _fail_and_roll_back(
    progress: List[RenameProgress],
    rename_fn: RenameFunc,
    phase: ExecutionPhase,
    source: Path,
    target: Path,
    cause: Exception
) -> RenameExecutionError:
    log.error(f"{phase} error moving '{source}' -> '{target}': {cause}. Rolling back batch...")
    rollback_error: Optional[RollbackError] = None
    try:
        rollback_rename_progress(progress, rename_fn)
    except RollbackError as e_rb:
        rollback_error = e_rb
        log.critical(f"Rollback incomplete after {phase} failure. Files may remain under temporary names: {e_rb}")
    return RenameExecutionError(phase, source, target, cause, rollback_error)


def _run_phase(
    progress: List[RenameProgress],
    rename_fn: RenameFunc,
    phase: ExecutionPhase
) -> None:
    log.debug(f"Starting {phase}: {len(progress)} files")
    for state in progress:
        destination = state.temp_path if phase is ExecutionPhase.PHASE_ONE else state.target_path
        source = state.current_path
        try:
            rename_fn(source, destination)
        except Exception as e:
            raise _fail_and_roll_back(progress, rename_fn, phase, source, destination, e) from e
        state.current_path = destination
        log.debug(f"  {phase}: '{source.name}' -> '{destination.name}'")


def execute_rename_instructions(
    instructions: Sequence[RenameInstruction],
    dry_run: bool,
    reporter: Optional[RenameReporter] = None,
    rename_fn: Optional[RenameFunc] = None,
    temp_prefix: str = TEMP_PREFIX,
    max_temp_attempts: int = MAX_TEMP_PATH_ATTEMPTS
) -> int:
    """
    Applies a batch of renames and returns how many files were renamed.

    Live runs move every file to a temporary name first and only then to its
    target, so a target may equal another file's original name. Any failed
    move rolls the whole batch back and raises RenameExecutionError; so does
    failing to find a free temporary name, before anything has moved.
    Dry runs only report.
    """
    reporter = reporter or RenameReporter()
    rename_fn = rename_fn or os.rename

    if dry_run:
        for instruction in instructions:
            if instruction.is_noop:
                reporter.no_change(instruction.source_path, dry_run=True)
            else:
                reporter.planned(instruction.source_path, instruction.target_path)
        return 0

    progress: List[RenameProgress] = []
    for index, instruction in enumerate(instructions):
        if instruction.is_noop:
            reporter.no_change(instruction.source_path, dry_run=False)
            continue
        try:
            temp_path = build_temp_path(instruction.source_path, index, temp_prefix, max_temp_attempts)
        except FileOperationError as e:
            # Allocation precedes every move.
            log.error(f"{ExecutionPhase.PHASE_ONE} error preparing '{instruction.source_path}': {e}")
            raise RenameExecutionError(
                ExecutionPhase.PHASE_ONE, instruction.source_path, instruction.target_path, e
            ) from e
        progress.append(RenameProgress(
            instruction=instruction,
            temp_path=temp_path,
            current_path=instruction.source_path
        ))

    if not progress:
        reporter.nothing_to_do()
        return 0

    log.info(f"--- LIVE RUN: renaming {len(progress)} files ---")
    _run_phase(progress, rename_fn, ExecutionPhase.PHASE_ONE)
    _run_phase(progress, rename_fn, ExecutionPhase.PHASE_TWO)

    for state in progress:
        reporter.completed(state.source_path, state.target_path)
    log.info(f"Live run complete: {len(progress)} files renamed.")
    return len(progress)
