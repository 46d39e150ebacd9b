# anime_renamer/extractor.py
import logging
import os
import re
from typing import NamedTuple, Pattern, Tuple

log = logging.getLogger(__name__)

DEFAULT_SEASON = 1
NO_EPISODE = 0

class EpisodePattern(NamedTuple):
    regex: Pattern[str]
    season_group: int # 0 when the pattern carries no season
    episode_group: int

# Order matters: the first pattern yielding a positive episode wins.
# Digits and whitespace are ASCII only.
EPISODE_PATTERNS: Tuple[EpisodePattern, ...] = (
    EpisodePattern(re.compile(r'S(\d+)\s*-\s*(\d+)', re.IGNORECASE | re.ASCII), 1, 2), # S1 - 01
    EpisodePattern(re.compile(r'S(\d+)(?:\s|E)(\d+)', re.IGNORECASE | re.ASCII), 1, 2), # S1E01, S1 01
    EpisodePattern(re.compile(r'E(\d+)', re.IGNORECASE | re.ASCII), 0, 1),              # E01
    EpisodePattern(re.compile(r'\s-\s\(?(\d+)\)?', re.ASCII), 0, 1),                   # - 01, - (01)
    EpisodePattern(re.compile(r'\s(\d{2,3})(?:\s|$)', re.ASCII), 0, 1),                # 01 / 001 at end or before space
)

NUMERIC_CUE_PATTERN = re.compile(r'\d+', re.ASCII)


def has_numeric_cue(filename: str) -> bool:
    return NUMERIC_CUE_PATTERN.search(filename) is not None


def _parse_positive(value: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


def extract_season_and_episode(filename: str) -> Tuple[int, int]:
    """
    Returns (season, episode) parsed from a file name.

    The extension is stripped first. Patterns are tried in priority order and
    the first one with a positive episode number is used; a season that is
    missing or not positive falls back to 1. ``(1, 0)`` means no episode was
    found. Never raises.
    """
    stem = os.path.splitext(filename)[0]

    for pattern in EPISODE_PATTERNS:
        match = pattern.regex.search(stem)
        if not match:
            continue

        episode = _parse_positive(match.group(pattern.episode_group))
        if not episode:
            continue

        season = DEFAULT_SEASON
        if pattern.season_group:
            season = _parse_positive(match.group(pattern.season_group)) or DEFAULT_SEASON

        log.debug(f"Extracted S{season:02d}E{episode:02d} from '{filename}' using '{pattern.regex.pattern}'")
        return season, episode

    log.debug(f"No episode number found in '{filename}'")
    return DEFAULT_SEASON, NO_EPISODE
