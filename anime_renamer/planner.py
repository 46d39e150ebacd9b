# anime_renamer/planner.py
import logging
from typing import Iterable, List

from .models import FilePair, RenameInstruction, TaggedFile

log = logging.getLogger(__name__)

TARGET_NAME_FORMAT = "{title} - S{season:02d}E{episode:02d}{extension}"


def format_target_name(title: str, season: int, episode: int, extension: str) -> str:
    return TARGET_NAME_FORMAT.format(title=title, season=season, episode=episode, extension=extension)


def _instruction_for(tagged: TaggedFile, title: str) -> RenameInstruction:
    new_name = format_target_name(title, tagged.season, tagged.episode, tagged.extension)
    return RenameInstruction(source_path=tagged.path, target_path=tagged.path.parent / new_name)


def build_rename_instructions(pairs: Iterable[FilePair], title: str) -> List[RenameInstruction]:
    """Two instructions per pair, media first, each file keeping its own directory and identity."""
    instructions: List[RenameInstruction] = []
    for pair in pairs:
        instructions.append(_instruction_for(pair.media, title))
        instructions.append(_instruction_for(pair.companion, title))

    log.debug(f"Planned {len(instructions)} rename instructions for title '{title}'")
    return instructions
