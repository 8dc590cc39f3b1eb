"""
Episode Matcher - Pairs video files with their subtitle files.

A video and a subtitle match when their episode numbers are equal and their
seasons agree. An unknown season on either side agrees with any season.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence
import logging

from resolver import Episode

logger = logging.getLogger(__name__)


def seasons_agree(video: Episode, subtitle: Episode) -> bool:
    """Check if two seasons are compatible (unknown matches anything)."""
    if video.season is None or subtitle.season is None:
        return True
    return video.season == subtitle.season


def match_episodes(
    videos: Sequence[Episode],
    subtitles: Sequence[Episode]
) -> Dict[Path, Episode]:
    """
    Map each video to a subtitle with the same episode identifier.

    Every video is compared with every subtitle. When several subtitles match
    the same video, the last one in subtitle order wins.

    Args:
        videos: Resolved video episodes
        subtitles: Resolved subtitle episodes

    Returns:
        Dict of video path -> subtitle episode. Unmatched videos are absent.
    """
    mapping: Dict[Path, Episode] = {}

    for video in videos:
        for subtitle in subtitles:
            if video.episode != subtitle.episode:
                continue
            if not seasons_agree(video, subtitle):
                continue
            previous = mapping.get(video.path)
            if previous is not None:
                logger.debug(
                    f"{video.path.name}: replacing {previous.path.name} with {subtitle.path.name}"
                )
            mapping[video.path] = subtitle

    return mapping


def match_single_files(
    video_files: List[Path],
    subtitle_files: List[Path]
) -> Optional[Dict[Path, Episode]]:
    """
    Pair a lone video with a lone subtitle (typically a movie).

    Returns:
        A one-entry mapping if both lists hold exactly one file, None otherwise
    """
    if len(video_files) != 1 or len(subtitle_files) != 1:
        return None
    return {Path(video_files[0]): Episode(path=Path(subtitle_files[0]))}
