"""Unit tests for copying subtitles beside their videos."""

import os
import sys
from pathlib import Path

import pytest

import copier
from copier import (
    KEEP_HINT,
    OVERWRITE_HINT,
    copy_subtitle,
    copy_subtitles,
    destination_for,
)
from resolver import Episode

from conftest import make_files


class TestDestination:

    def test_video_name_with_subtitle_extension(self):
        dest = destination_for(Path("/tv/Show.S01E01.1080p.mkv"), Path("/subs/show-101.srt"))
        assert dest == Path("/tv/Show.S01E01.1080p.srt")


class TestCopySubtitle:

    def test_creates_copy(self, subs_dir, videos_dir):
        srt = make_files(subs_dir, ["show-101.srt"], content="hello")[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]

        result = copy_subtitle(mkv, Episode(srt, 1, 1))

        assert result.success
        assert result.output_file == videos_dir / "Show.S01E01.srt"
        assert result.output_file.read_text(encoding="utf-8") == "hello"

    def test_keep_mode_leaves_existing_file(self, subs_dir, videos_dir):
        srt = make_files(subs_dir, ["show-101.srt"], content="new")[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]
        existing = make_files(videos_dir, ["Show.S01E01.srt"], content="old")[0]

        result = copy_subtitle(mkv, Episode(srt, 1, 1), overwrite=False)

        assert not result.success
        assert result.error_message.startswith(KEEP_HINT)
        assert existing.read_text(encoding="utf-8") == "old"

    def test_overwrite_replaces_existing_file(self, subs_dir, videos_dir):
        srt = make_files(subs_dir, ["show-101.srt"], content="new")[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]
        existing = make_files(videos_dir, ["Show.S01E01.srt"], content="old")[0]

        result = copy_subtitle(mkv, Episode(srt, 1, 1), overwrite=True)

        assert result.success
        assert existing.read_text(encoding="utf-8") == "new"

    def test_overwrite_twice_is_idempotent(self, subs_dir, videos_dir):
        srt = make_files(subs_dir, ["show-101.srt"], content="final")[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]

        for _ in range(2):
            assert copy_subtitle(mkv, Episode(srt, 1, 1), overwrite=True).success

        copies = [p for p in videos_dir.iterdir() if p.suffix == ".srt"]
        assert copies == [videos_dir / "Show.S01E01.srt"]
        assert copies[0].read_text(encoding="utf-8") == "final"

    def test_missing_source(self, subs_dir, videos_dir):
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]

        result = copy_subtitle(mkv, Episode(subs_dir / "gone.srt", 1, 1), overwrite=True)

        assert not result.success
        assert result.error_message.startswith(OVERWRITE_HINT)
        assert not (videos_dir / "Show.S01E01.srt").exists()

    def test_same_file_is_left_in_place(self, tmp_path):
        mkv, srt = make_files(tmp_path, ["Show.S01E01.mkv", "Show.S01E01.srt"])
        srt.write_text("keep me", encoding="utf-8")

        result = copy_subtitle(mkv, Episode(srt, 1, 1), overwrite=True)

        assert result.success
        assert result.skipped
        assert srt.read_text(encoding="utf-8") == "keep me"

    def test_mode_copy_failure_keeps_copy(self, subs_dir, videos_dir, monkeypatch, caplog):
        srt = make_files(subs_dir, ["show-101.srt"], content="hello")[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]

        def refuse_chmod(src, dst, **kwargs):
            raise PermissionError(1, "Operation not permitted")

        monkeypatch.setattr(copier.shutil, "copymode", refuse_chmod)
        with caplog.at_level("WARNING", logger="copier"):
            result = copy_subtitle(mkv, Episode(srt, 1, 1))

        assert result.success
        assert result.output_file.read_text(encoding="utf-8") == "hello"
        assert "Could not copy permissions" in caplog.text

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="needs POSIX permissions as a regular user")
    def test_read_only_destination_folder(self, subs_dir, videos_dir):
        srt = make_files(subs_dir, ["show-101.srt"])[0]
        mkv = make_files(videos_dir, ["Show.S01E01.mkv"])[0]
        videos_dir.chmod(0o555)
        try:
            result = copy_subtitle(mkv, Episode(srt, 1, 1), overwrite=True)
        finally:
            videos_dir.chmod(0o755)

        assert not result.success
        assert result.error_message.startswith(OVERWRITE_HINT)


class TestCopySubtitles:

    def test_failure_does_not_stop_other_copies(self, subs_dir, videos_dir):
        srt1, srt2 = make_files(subs_dir, ["a-101.srt", "a-102.srt"], content="new")
        mkv1, mkv2 = make_files(videos_dir, ["Show.S01E01.mkv", "Show.S01E02.mkv"])
        make_files(videos_dir, ["Show.S01E01.srt"], content="old")

        results = copy_subtitles({mkv1: Episode(srt1, 1, 1), mkv2: Episode(srt2, 1, 2)})

        assert [r.success for r in results] == [False, True]
        assert results[0].error_message.startswith(KEEP_HINT)
        assert (videos_dir / "Show.S01E02.srt").read_text(encoding="utf-8") == "new"

    def test_reports_each_result(self, subs_dir, videos_dir):
        srt1, srt2 = make_files(subs_dir, ["a-101.srt", "a-102.srt"])
        mkv1, mkv2 = make_files(videos_dir, ["Show.S01E01.mkv", "Show.S01E02.mkv"])
        reported = []

        results = copy_subtitles(
            {mkv2: Episode(srt2, 1, 2), mkv1: Episode(srt1, 1, 1)},
            on_result=lambda result, cur, tot: reported.append((result, cur, tot)),
        )

        assert reported == [(results[0], 1, 2), (results[1], 2, 2)]
        assert results[0].video_file == mkv1

    def test_copies_in_video_path_order(self, subs_dir, videos_dir):
        srt1, srt2 = make_files(subs_dir, ["b.srt", "a.srt"])
        mkv_b, mkv_a = make_files(videos_dir, ["B.S01E02.mkv", "A.S01E01.mkv"])

        results = copy_subtitles({mkv_b: Episode(srt1, 1, 2), mkv_a: Episode(srt2, 1, 1)})

        assert [r.video_file.name for r in results] == ["A.S01E01.mkv", "B.S01E02.mkv"]

    def test_empty_mapping(self):
        assert copy_subtitles({}) == []
