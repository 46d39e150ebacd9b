# tests/test_planner.py
from pathlib import Path

from anime_renamer.models import TaggedFile, FilePair, RenameInstruction
from anime_renamer.planner import build_rename_instructions, format_target_name


def test_format_target_name():
    assert format_target_name("Frieren", 1, 7, ".mkv") == "Frieren - S01E07.mkv"
    assert format_target_name("Frieren", 2, 112, ".ass") == "Frieren - S02E112.ass"


def test_two_instructions_per_pair_media_first():
    pairs = [
        FilePair(
            media=TaggedFile(Path("/a/videos/ep1.mkv"), 1, 1, ".mkv"),
            companion=TaggedFile(Path("/a/subs/ep1.srt"), 1, 1, ".srt"),
        ),
        FilePair(
            media=TaggedFile(Path("/a/videos/ep2.mp4"), 1, 2, ".mp4"),
            companion=TaggedFile(Path("/a/subs/ep2.ass"), 1, 2, ".ass"),
        ),
    ]

    instructions = build_rename_instructions(pairs, "Show")

    assert instructions == [
        RenameInstruction(Path("/a/videos/ep1.mkv"), Path("/a/videos/Show - S01E01.mkv")),
        RenameInstruction(Path("/a/subs/ep1.srt"), Path("/a/subs/Show - S01E01.srt")),
        RenameInstruction(Path("/a/videos/ep2.mp4"), Path("/a/videos/Show - S01E02.mp4")),
        RenameInstruction(Path("/a/subs/ep2.ass"), Path("/a/subs/Show - S01E02.ass")),
    ]


def test_already_named_pair_yields_noop_instructions():
    pair = FilePair(
        media=TaggedFile(Path("/a/Show - S01E03.mkv"), 1, 3, ".mkv"),
        companion=TaggedFile(Path("/a/Show - S01E03.srt"), 1, 3, ".srt"),
    )

    instructions = build_rename_instructions([pair], "Show")

    assert all(i.is_noop for i in instructions)


def test_no_pairs_no_instructions():
    assert build_rename_instructions([], "Show") == []
