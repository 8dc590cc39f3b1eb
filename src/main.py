"""
Subtitle Copier - CLI Entry Point

Copies subtitle files next to the matching video files:
1. Find subtitle and video files in two folders
2. Work out season/episode numbers from the filenames
3. Copy each subtitle beside its video, named after the video

Usage:
  subcopy <subdir> <videodir> [overwrite]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from colorama import init, Fore, Style

from finder import normalize_extensions, SUBTITLE_FORMATS, VIDEO_FORMATS
from pipeline import Pipeline, PipelineConfig

init()

logger = logging.getLogger(__name__)

OVERWRITE_KEYWORD = "overwrite"


class ConfigError(Exception):
    """Raised when the config file cannot be read."""
    pass


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def load_config(config_path: Path) -> Dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}")
    if not isinstance(config, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    return config


def find_config(explicit: Optional[str]) -> Path:
    """Locate config.yaml: explicit path, project root, then script folder."""
    if explicit:
        return Path(explicit)
    script_dir = Path(__file__).parent
    config_path = script_dir.parent / "config.yaml"
    if not config_path.exists():
        config_path = script_dir / "config.yaml"
    return config_path


def print_status(message: str, level: str = "info"):
    """Print colored status message."""
    colors = {
        "info": "",
        "success": Fore.GREEN,
        "error": Fore.RED,
        "warning": Fore.YELLOW,
    }
    color = colors.get(level, "")
    print(f"{color}{message}{Style.RESET_ALL}")


def _config_formats(formats: Dict, key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Read one extension list from the formats section (empty value = default)."""
    value = formats.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"formats.{key} must be a list of extensions, got {value!r}")
    extensions = normalize_extensions(value)
    if not extensions:
        raise ConfigError(f"formats.{key} must not be empty")
    return extensions


def create_pipeline_config(config: Dict, overwrite: bool = False) -> PipelineConfig:
    """
    Create PipelineConfig from loaded YAML config.

    Raises:
        ConfigError: If the formats section has the wrong shape
    """
    formats = config.get('formats')
    if formats is None:
        formats = {}
    if not isinstance(formats, dict):
        raise ConfigError(f"formats must be a mapping, got {formats!r}")

    return PipelineConfig(
        subtitle_formats=_config_formats(formats, 'subtitles', SUBTITLE_FORMATS),
        video_formats=_config_formats(formats, 'videos', VIDEO_FORMATS),
        overwrite=overwrite,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog="subcopy",
        usage="%(prog)s <subdir> <videodir> [overwrite] [--config PATH] [--verbose]",
        description="Copy subtitles next to the matching video files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Subtitles are matched to videos by season/episode numbers found in the
filenames (S01E02, 0102, 1x02, "02 -", ".102-"). A single subtitle and a
single video without numbers are paired as a movie.

A third argument equal to "overwrite" replaces existing subtitles; any
other value keeps them. Further arguments are ignored.

Examples:
  subcopy ~/Downloads/subs "/media/Show/Season 1"
  subcopy ~/Downloads/subs "/media/Show/Season 1" overwrite
        """
    )
    parser.add_argument("subdir", help="Folder containing the subtitle files")
    parser.add_argument("videodir", help="Folder containing the video files")
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args, extra = build_parser().parse_known_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    overwrite = bool(extra) and extra[0] == OVERWRITE_KEYWORD
    if extra[1:]:
        logger.debug(f"Ignoring extra arguments: {extra[1:]}")

    config_path = find_config(args.config)
    try:
        config = load_config(config_path)
        pipeline_config = create_pipeline_config(config, overwrite)
    except ConfigError as e:
        print_status(str(e), "error")
        return 1
    if config:
        logger.debug(f"Loaded config: {config_path}")

    pipeline = Pipeline(
        config=pipeline_config,
        progress_callback=lambda msg, cur, tot: print_status(f"[{cur}/{tot}] {msg}"),
        log_callback=lambda msg, lvl: print_status(msg, lvl)
    )

    print_status(f"Mode: {'overwrite' if overwrite else 'keep existing'}", "info")
    print()

    result = pipeline.run(Path(args.subdir), Path(args.videodir))

    # Print summary
    print()
    print("=" * 50)
    print_status(f"Copied: {result.copied_count}", "success")
    print_status(f"Failed: {result.failed_count}", "error" if result.failed_count > 0 else "info")
    print("=" * 50)

    if result.failed_count > 0:
        print()
        print_status("Failed files:", "error")
        for r in result.copies:
            if not r.success:
                print_status(f"  {r.subtitle_file.name}: {r.error_message}", "error")

    return 0


if __name__ == "__main__":
    sys.exit(main())
