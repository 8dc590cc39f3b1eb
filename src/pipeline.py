"""
Pipeline - Copies subtitles next to the matching video files.

Runs four stages in sequence:
- Scan: list subtitle and video files
- Resolve: extract season/episode from each filename
- Match: pair videos with subtitles (single file pairs are treated as movies)
- Copy: place each subtitle beside its video, named after the video
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from finder import find_files, ScanResult, SUBTITLE_FORMATS, VIDEO_FORMATS
from resolver import Episode, resolve_episodes
from matcher import match_episodes, match_single_files
from copier import copy_subtitles, CopyResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution."""
    # Accepted extensions
    subtitle_formats: Tuple[str, ...] = SUBTITLE_FORMATS
    video_formats: Tuple[str, ...] = VIDEO_FORMATS

    # Copy options
    overwrite: bool = False


@dataclass
class PipelineResult:
    """Everything a single run produced."""
    subtitle_scan: ScanResult
    video_scan: ScanResult
    subtitles: List[Episode] = field(default_factory=list)
    videos: List[Episode] = field(default_factory=list)
    mapping: Dict[Path, Episode] = field(default_factory=dict)
    used_singleton_fallback: bool = False
    copies: List[CopyResult] = field(default_factory=list)

    @property
    def copied_count(self) -> int:
        return sum(1 for r in self.copies if r.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.copies if not r.success)


class Pipeline:
    """
    Subtitle copy pipeline.

    Every stage produces a best-effort result: unreadable directories count
    as empty and failed copies are reported without stopping the run.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
        log_callback: Optional[Callable[[str, str], None]] = None
    ):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline configuration
            progress_callback: Called with (message, current, total) for each copy
            log_callback: Called with (message, level) for log messages
        """
        self.config = config or PipelineConfig()
        self.progress_callback = progress_callback
        self.log_callback = log_callback

    def _log(self, message: str, level: str = "info"):
        """Log a message."""
        logger.log(getattr(logging, level.upper(), logging.INFO), message)
        if self.log_callback:
            self.log_callback(message, level)

    def _progress(self, message: str, current: int, total: int):
        """Report progress."""
        if self.progress_callback:
            self.progress_callback(message, current, total)

    def scan(self, directory: Path, formats: Tuple[str, ...]) -> ScanResult:
        """List files in a directory, logging each one found."""
        result = find_files(directory, formats)
        if not result.success:
            self._log(f"Failed to open directory '{directory}'!", "error")
            logger.debug(result.error_message)
            return result

        for path in result.files:
            self._log(f"Found file: {path}")
        return result

    def resolve(self, files: List[Path]) -> List[Episode]:
        """Resolve files into sorted episodes, logging each identifier."""
        episodes = resolve_episodes(files)
        for episode in episodes:
            season = "?" if episode.season is None else episode.season
            self._log(f"Found season {season} episode {episode.episode}")
        return episodes

    def map(self, result: PipelineResult) -> Dict[Path, Episode]:
        """Pair videos with subtitles, falling back to a single file pair."""
        mapping = None
        if not result.subtitles and not result.videos:
            mapping = match_single_files(result.video_scan.files, result.subtitle_scan.files)

        if mapping is not None:
            result.used_singleton_fallback = True
            self._log("Only found one subtitle and one video file, mapping them together")
        else:
            self._log("Mapping videos <-> subtitles...")
            mapping = match_episodes(result.videos, result.subtitles)

        for video_path in sorted(mapping):
            subtitle = mapping[video_path]
            self._log(f"{subtitle.episode_id}: {video_path.name} <-> {subtitle.path.name}")

        if not mapping:
            self._log("No matching episodes found", "warning")
        return mapping

    def copy(self, mapping: Dict[Path, Episode], overwrite: bool) -> List[CopyResult]:
        """Copy each mapped subtitle beside its video."""
        def report(result: CopyResult, current: int, total: int):
            self._progress(f"Copying {result.subtitle_file.name}", current, total)
            self._log(f"Video file: {result.video_file}")
            self._log(f"Subtitle file: {result.subtitle_file}")
            if not result.success:
                self._log(result.error_message, "error")
            elif result.skipped:
                self._log(f"Subtitle already in place: {result.output_file}", "info")
            else:
                self._log(f"Copied subtitle {result.subtitle_file} to {result.output_file}", "success")

        results = copy_subtitles(mapping, overwrite, on_result=report)
        copied = sum(1 for r in results if r.success)
        self._log(f"Copied {copied} subtitle(s)", "success" if copied else "info")
        return results

    def run(
        self,
        subtitle_dir: Path,
        video_dir: Path,
        overwrite: Optional[bool] = None
    ) -> PipelineResult:
        """
        Run all stages.

        Args:
            subtitle_dir: Folder holding the subtitle files
            video_dir: Folder holding the video files
            overwrite: Replace existing subtitles (default: config.overwrite)

        Returns:
            PipelineResult with the outcome of each stage
        """
        if overwrite is None:
            overwrite = self.config.overwrite

        self._log("Finding subtitle files...")
        subtitle_scan = self.scan(Path(subtitle_dir), self.config.subtitle_formats)
        self._log("Finding video files...")
        video_scan = self.scan(Path(video_dir), self.config.video_formats)

        result = PipelineResult(subtitle_scan=subtitle_scan, video_scan=video_scan)

        self._log("Resolving subtitle files...")
        result.subtitles = self.resolve(subtitle_scan.files)
        self._log("Resolving video files...")
        result.videos = self.resolve(video_scan.files)

        result.mapping = self.map(result)

        self._log("Copying subtitles...")
        result.copies = self.copy(result.mapping, overwrite)
        return result
