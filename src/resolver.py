"""
Episode Resolver - Extracts season and episode numbers from filenames.

Rules are tried in a fixed order and the first one that matches wins:

1. S01E02 / s1e2        -> season 1, episode 2
2. 0102 - Title         -> season 1, episode 2 (first four-digit run)
3. 1x02 - Title         -> season 1, episode 2
4. 02 - Title           -> unknown season, episode 2
5. Show.102-Title       -> season 1, episode 2

Files matching none of the rules are not episodes and are left out.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Episode:
    """A file with its episode identifier. season=None means unknown."""
    path: Path
    season: Optional[int] = None
    episode: Optional[int] = None

    @property
    def episode_id(self) -> str:
        if self.episode is None:
            return "movie"
        season = f"{self.season:02d}" if self.season is not None else "??"
        return f"S{season}E{self.episode:02d}"


@dataclass(frozen=True)
class PatternRule:
    """A single filename pattern yielding (season, episode)."""
    name: str
    pattern: re.Pattern
    has_season: bool = True

    def try_match(self, filename: str) -> Optional[Tuple[Optional[int], int]]:
        match = self.pattern.search(filename)
        if not match:
            return None

        if self.has_season:
            return int(match.group(1)), int(match.group(2))
        return None, int(match.group(1))


EPISODE_RULES: Tuple[PatternRule, ...] = (
    PatternRule("SxxExx", re.compile(r'[sS](\d{1,2})[eE](\d{1,2})')),
    PatternRule("four-digit", re.compile(r'(\d{2})(\d{2})')),
    PatternRule("NxNN", re.compile(r'(\d{1,2})x(\d{1,2})')),
    PatternRule("NN-dash", re.compile(r'(\d{2}) -'), has_season=False),
    PatternRule("dot-NNN-dash", re.compile(r'\.(\d{1})(\d{2})\-')),
)


def resolve(file_path: Path) -> Optional[Tuple[Optional[int], int]]:
    """
    Resolve the (season, episode) identifier of a file.

    Only the file name is inspected, never the parent directories.

    Args:
        file_path: Path to a video or subtitle file

    Returns:
        Tuple of (season, episode), season may be None. None if no rule matches.
    """
    filename = Path(file_path).name
    for rule in EPISODE_RULES:
        info = rule.try_match(filename)
        if info is not None:
            logger.debug(f"{filename}: matched rule '{rule.name}' -> {info}")
            return info
    return None


def _sort_key(episode: Episode):
    # Unknown season sorts before every known season
    season = -1 if episode.season is None else episode.season
    number = -1 if episode.episode is None else episode.episode
    return season, number, str(episode.path)


def sort_episodes(episodes: Iterable[Episode]) -> List[Episode]:
    """
    Sort episodes by season, then episode.

    Unknown seasons come first. The unknown season is kept as-is, it is
    not filled in from neighbouring entries.
    """
    return sorted(episodes, key=_sort_key)


def resolve_episodes(files: Iterable[Path]) -> List[Episode]:
    """
    Resolve a list of files into a sorted list of episodes.

    Files without a recognizable identifier are skipped.
    """
    episodes = []

    for path in files:
        info = resolve(path)
        if info is None:
            logger.debug(f"Not an episode file: {Path(path).name}")
            continue
        season, number = info
        episodes.append(Episode(path=Path(path), season=season, episode=number))

    return sort_episodes(episodes)


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) > 1:
        for arg in sys.argv[1:]:
            info = resolve(Path(arg))
            if info is None:
                print(f"{arg}: no episode information")
            else:
                print(f"{arg}: {Episode(Path(arg), *info).episode_id}")
    else:
        print("Usage: python resolver.py <file> [<file> ...]")
