"""Shared fixtures for subtitle copier tests."""

from pathlib import Path

import pytest


def make_files(folder: Path, names, content: str = "") -> list:
    """Create files in a folder and return their paths."""
    folder.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in names:
        path = folder / name
        path.write_text(content or name, encoding="utf-8")
        paths.append(path)
    return paths


@pytest.fixture
def subs_dir(tmp_path):
    folder = tmp_path / "subs"
    folder.mkdir()
    return folder


@pytest.fixture
def videos_dir(tmp_path):
    folder = tmp_path / "videos"
    folder.mkdir()
    return folder
