"""
Finder - Lists subtitle and video files in a directory.

Only the immediate entries of the directory are considered; sub-directories
are never entered. Extensions are compared case-sensitively against the
file suffix (".srt" matches "Show.srt" but not "Show.SRT").
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


# Default extension sets
SUBTITLE_FORMATS = (".srt",)
VIDEO_FORMATS = (".mkv", ".mp4", ".avi")


@dataclass
class ScanResult:
    """Result of listing a single directory."""
    directory: Path
    files: List[Path] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_message is None


def normalize_extensions(extensions: Iterable[str]) -> tuple:
    """Ensure every extension carries a leading dot."""
    if isinstance(extensions, str):
        extensions = [extensions]
    normalized = []
    for ext in extensions:
        ext = str(ext).strip()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        normalized.append(ext)
    return tuple(normalized)


def find_files(directory: Path, extensions: Iterable[str]) -> ScanResult:
    """
    List the files directly inside a directory matching an extension set.

    Args:
        directory: Directory to scan
        extensions: Accepted suffixes, e.g. (".mkv", ".mp4")

    Returns:
        ScanResult with files in enumeration order. If the directory cannot
        be opened the result carries an error message and no files.
    """
    directory = Path(directory)
    accepted = set(normalize_extensions(extensions))
    result = ScanResult(directory=directory)

    try:
        for entry in directory.iterdir():
            if entry.suffix in accepted and entry.is_file():
                logger.debug(f"Matched {entry.name} ({entry.suffix})")
                result.files.append(entry)
    except OSError as e:
        result.files = []
        result.error_message = f"Failed to open directory '{directory}': {e.strerror or e}"

    return result


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) > 1:
        folder = Path(sys.argv[1])
        for label, formats in (("subtitle", SUBTITLE_FORMATS), ("video", VIDEO_FORMATS)):
            scan = find_files(folder, formats)
            if not scan.success:
                print(scan.error_message)
                sys.exit(1)
            for path in scan.files:
                print(f"{label}: {path.name}")
    else:
        print("Usage: python finder.py <folder>")
