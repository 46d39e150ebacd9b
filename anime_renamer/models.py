# models.py
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

MatchKey = Tuple[int, int] # (season, episode)

@dataclass(frozen=True)
class TaggedFile:
    """A discovered media or subtitle file with the identity parsed from its name."""
    path: Path
    season: int = 1
    episode: int = 0 # 0 means no episode number was found
    extension: str = ""

    @property
    def match_key(self) -> MatchKey:
        return (self.season, self.episode)

    @property
    def has_identity(self) -> bool:
        return self.episode > 0

@dataclass(frozen=True)
class FilePair:
    """A media file and the subtitle that shares its (season, episode)."""
    media: TaggedFile
    companion: TaggedFile

@dataclass(frozen=True)
class RenameInstruction:
    """Represents a single planned rename."""
    source_path: Path
    target_path: Path

    @property
    def is_noop(self) -> bool:
        return self.source_path == self.target_path

@dataclass
class RenameProgress:
    """Tracks where a file lives while its batch is executing."""
    instruction: RenameInstruction
    temp_path: Path
    current_path: Path

    @property
    def source_path(self) -> Path:
        return self.instruction.source_path

    @property
    def target_path(self) -> Path:
        return self.instruction.target_path

    @property
    def is_at_source(self) -> bool:
        return self.current_path == self.instruction.source_path
