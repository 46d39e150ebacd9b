# anime_renamer/pairing.py
import logging
from typing import Dict, List, Sequence, Tuple

from .models import FilePair, MatchKey, TaggedFile

log = logging.getLogger(__name__)


def create_file_pairs(
    media_files: Sequence[TaggedFile],
    companion_files: Sequence[TaggedFile]
) -> Tuple[List[FilePair], List[TaggedFile]]:
    """
    Matches media files to companion files by (season, episode).

    Pairs come out in media discovery order. Unmatched media files follow
    the same order; leftover companions are appended after them. If two
    companions share a key, the later one wins.
    """
    pairs: List[FilePair] = []
    unmatched: List[TaggedFile] = []
    companions_by_key: Dict[MatchKey, TaggedFile] = {}

    for companion in companion_files:
        previous = companions_by_key.get(companion.match_key)
        if previous is not None:
            log.warning(f"Companions '{previous.path.name}' and '{companion.path.name}' share "
                        f"S{companion.season:02d}E{companion.episode:02d}; keeping '{companion.path.name}'.")
        companions_by_key[companion.match_key] = companion

    for media in media_files:
        companion = companions_by_key.pop(media.match_key, None)
        if companion is None:
            log.debug(f"No companion for '{media.path.name}'")
            unmatched.append(media)
            continue
        log.debug(f"Paired '{media.path.name}' <-> '{companion.path.name}'")
        pairs.append(FilePair(media=media, companion=companion))

    unmatched.extend(companions_by_key.values())

    log.info(f"Pairing complete: {len(pairs)} pairs, {len(unmatched)} unmatched files.")
    return pairs, unmatched
