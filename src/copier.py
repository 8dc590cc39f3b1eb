"""
Copier - Places subtitle files next to their video files.

The copy is named after the video, keeping the subtitle's extension:
"Show.S01E01.1080p.mkv" + "show-101.srt" -> "Show.S01E01.1080p.srt".
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional
import logging

from resolver import Episode

logger = logging.getLogger(__name__)


OVERWRITE_HINT = "Failed to copy subtitle, permission denied?"
KEEP_HINT = "Failed to copy subtitle, file already exists?"


@dataclass
class CopyResult:
    """Result of copying a single subtitle."""
    success: bool
    video_file: Path
    subtitle_file: Path
    output_file: Optional[Path] = None
    error_message: Optional[str] = None
    skipped: bool = False


def destination_for(video_path: Path, subtitle_path: Path) -> Path:
    """Build the subtitle path that sits beside a video."""
    video_path = Path(video_path)
    return video_path.parent / f"{video_path.stem}{Path(subtitle_path).suffix}"


def failure_hint(overwrite: bool) -> str:
    return OVERWRITE_HINT if overwrite else KEEP_HINT


def _same_file(source: Path, destination: Path) -> bool:
    try:
        return destination.exists() and os.path.samefile(source, destination)
    except OSError:
        return False


def copy_subtitle(
    video_path: Path,
    subtitle: Episode,
    overwrite: bool = False
) -> CopyResult:
    """
    Copy one subtitle next to its video.

    Args:
        video_path: Path to the video file
        subtitle: Subtitle episode to copy
        overwrite: Replace an existing destination file

    Returns:
        CopyResult. Errors are reported in the result, never raised.
    """
    source = Path(subtitle.path)
    destination = destination_for(video_path, source)

    if _same_file(source, destination):
        logger.debug(f"Subtitle already in place: {destination}")
        return CopyResult(
            success=True,
            video_file=Path(video_path),
            subtitle_file=source,
            output_file=destination,
            skipped=True
        )

    try:
        if overwrite:
            destination.unlink(missing_ok=True)
        with open(source, 'rb') as src, open(destination, 'xb') as dst:
            shutil.copyfileobj(src, dst)
    except OSError as e:
        return CopyResult(
            success=False,
            video_file=Path(video_path),
            subtitle_file=source,
            output_file=destination,
            error_message=f"{failure_hint(overwrite)} ({e.strerror or e})"
        )

    # Permission bits are best effort once the bytes are written
    try:
        shutil.copymode(source, destination)
    except OSError as e:
        logger.warning(f"Could not copy permissions to {destination}: {e}")

    return CopyResult(
        success=True,
        video_file=Path(video_path),
        subtitle_file=source,
        output_file=destination
    )


def copy_subtitles(
    mapping: Dict[Path, Episode],
    overwrite: bool = False,
    on_result: Optional[Callable[[CopyResult, int, int], None]] = None
) -> List[CopyResult]:
    """
    Copy every mapped subtitle, in video path order.

    A failed copy does not stop the remaining ones.

    Args:
        mapping: Video path -> subtitle episode
        overwrite: Replace existing destination files
        on_result: Called with (result, current, total) after each copy

    Returns:
        One CopyResult per mapped video
    """
    results = []
    total = len(mapping)

    for i, video_path in enumerate(sorted(mapping)):
        result = copy_subtitle(video_path, mapping[video_path], overwrite)
        if result.success:
            logger.debug(f"Copied {result.subtitle_file.name} -> {result.output_file}")
        else:
            logger.debug(f"{result.subtitle_file.name}: {result.error_message}")
        results.append(result)
        if on_result:
            on_result(result, i + 1, total)

    return results
