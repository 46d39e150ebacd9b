from typing import List, Optional
from pathlib import Path

from .enums import ExecutionPhase


class RenamerError(Exception):
    """Base class for application-specific errors."""
    pass

class ConfigError(RenamerError):
    """Errors related to configuration loading or validation."""
    pass

class FileOperationError(RenamerError):
    """Errors during file system operations."""
    pass

class PreflightError(RenamerError):
    """A planned batch failed its safety checks. Carries every issue found."""
    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__(str(self))

    def __str__(self):
        return "preflight checks failed:\n - " + "\n - ".join(self.issues)

class TempPathAllocationError(FileOperationError):
    """No free temporary name could be found next to a file."""
    def __init__(self, path: Path, attempts: int):
        self.path = path
        self.attempts = attempts
        super().__init__(f"failed to allocate temp path for {path} after {attempts} attempts")

class RollbackError(FileOperationError):
    """One or more files could not be moved back to their original path."""
    def __init__(self, failures: List[str]):
        self.failures = list(failures)
        super().__init__("; ".join(self.failures))

class RenameExecutionError(FileOperationError):
    """A rename step failed during a live batch.

    The batch has already been rolled back when this is raised. If the rollback
    itself failed, ``rollback_error`` is set and files may still sit under
    temporary or target names.
    """
    def __init__(self, phase: ExecutionPhase, source: Path, target: Path,
                 cause: BaseException, rollback_error: Optional[RollbackError] = None):
        self.phase = phase
        self.source = source
        self.target = target
        self.cause = cause
        self.rollback_error = rollback_error
        super().__init__(str(self))

    @property
    def rolled_back_cleanly(self) -> bool:
        return self.rollback_error is None

    def __str__(self):
        msg = f"rename failed during {self.phase.value} ({self.source} -> {self.target}): {self.cause}"
        if self.rollback_error is not None:
            msg += f"\nrollback failed: {self.rollback_error}"
        return msg
