# tests/test_main_processor.py

import io
import argparse
import pytest
from rich.console import Console

from anime_renamer.main_processor import MainProcessor
from anime_renamer.exceptions import RenamerError, PreflightError


RENAMED = [
    "Show - S01E01.mkv", "Show - S01E01.ass",
    "Show - S01E02.mkv", "Show - S01E02.ass",
]
UNMATCHED = ["[Grp] Show - 03 [1080p].mkv", "Show S01E07.ass"]


def _names(directory):
    return sorted(p.name for p in directory.iterdir())


@pytest.fixture
def console_buffer():
    return io.StringIO()


@pytest.fixture
def test_console(console_buffer):
    return Console(file=console_buffer, width=1000, highlight=False, color_system=None)


@pytest.fixture
def make_processor(mock_cfg_helper, test_console):
    def _make(directory=None, title=None, dry_run=False, yes=False, answers=""):
        args = argparse.Namespace(
            profile='default', directory=directory, title=title, dry_run=dry_run, yes=yes,
            recursive=None, video_extensions=None, subtitle_extensions=None
        )
        mock_cfg_helper.args = args
        reader = io.StringIO(answers).readline
        return MainProcessor(args, mock_cfg_helper, test_console, reader)
    return _make


def test_dry_run_changes_nothing(episode_dir, make_processor, console_buffer):
    before = _names(episode_dir)
    processor = make_processor(directory=episode_dir, title="Show", dry_run=True)

    results = processor.run_processing()

    assert results == {'pairs': 2, 'unmatched': 2, 'renamed': 0, 'dry_run': True, 'cancelled': False}
    assert _names(episode_dir) == before
    output = console_buffer.getvalue()
    assert "Dry-run mode enabled. No files will be changed." in output
    assert f"[dry-run] {episode_dir / '[Grp] Show - 01 [1080p].mkv'} -> {episode_dir / 'Show - S01E01.mkv'}" in output
    assert "Dry-run complete." in output


def test_live_run_with_yes(episode_dir, make_processor, console_buffer):
    processor = make_processor(directory=episode_dir, title="Show", yes=True)

    results = processor.run_processing()

    assert results['renamed'] == 4
    assert _names(episode_dir) == sorted(RENAMED + UNMATCHED + ["notes.txt"])
    assert (episode_dir / "Show - S01E02.ass").read_text() == "subtitle 2"
    assert (episode_dir / "Show - S01E01.mkv").read_text() == "video 1"
    assert "All done :)" in console_buffer.getvalue()


def test_prompts_for_folder_title_and_confirmation(episode_dir, make_processor, console_buffer):
    processor = make_processor(answers=f"{episode_dir}\n  Show  \nmaybe\ny\n")

    results = processor.run_processing()

    assert results['renamed'] == 4
    assert (episode_dir / "Show - S01E01.mkv").exists()
    output = console_buffer.getvalue()
    assert "Enter the path to the folder" in output
    assert "Enter the name of the anime" in output
    assert "Please answer with yes/y or no/n." in output


def test_declined_confirmation_is_not_an_error(episode_dir, make_processor, console_buffer):
    before = _names(episode_dir)
    processor = make_processor(directory=episode_dir, title="Show", answers="no\n")

    results = processor.run_processing()

    assert results['cancelled'] is True
    assert results['renamed'] == 0
    assert _names(episode_dir) == before
    assert "Renaming cancelled." in console_buffer.getvalue()


def test_confirm_live_run_disabled_in_config(episode_dir, make_processor, mock_cfg_helper):
    mock_cfg_helper.manager._mock_values['confirm_live_run'] = False
    processor = make_processor(directory=episode_dir, title="Show")

    assert processor.run_processing()['renamed'] == 4


def test_end_of_input_at_confirmation(episode_dir, make_processor):
    before = _names(episode_dir)
    processor = make_processor(directory=episode_dir, title="Show", answers="")

    with pytest.raises(RenamerError, match="reading confirmation: end of input"):
        processor.run_processing()
    assert _names(episode_dir) == before


def test_end_of_input_at_folder_prompt(make_processor):
    with pytest.raises(RenamerError, match="reading folder path"):
        make_processor(answers="").run_processing()


def test_invalid_title(episode_dir, make_processor):
    with pytest.raises(RenamerError, match="invalid filename characters"):
        make_processor(directory=episode_dir, title="Re:Zero").run_processing()


def test_no_media_found(tmp_path, make_processor):
    (tmp_path / "readme.txt").write_text("nothing here")
    with pytest.raises(RenamerError, match="no video or subtitle files found"):
        make_processor(directory=tmp_path, title="Show", yes=True).run_processing()


def test_count_mismatch_warns(episode_dir, make_processor, console_buffer):
    (episode_dir / "Show S01E07.ass").unlink()
    results = make_processor(directory=episode_dir, title="Show", dry_run=True).run_processing()

    assert results['pairs'] == 2
    assert "found 3 video files and 2 subtitle files" in console_buffer.getvalue()


def test_preflight_failure_stops_before_renaming(episode_dir, make_processor, mock_cfg_helper):
    # An existing file that discovery skips still blocks its target name.
    mock_cfg_helper.manager._mock_values['ignore_patterns'] = ['Show - *']
    (episode_dir / "Show - S01E02.mkv").write_text("already here")
    processor = make_processor(directory=episode_dir, title="Show", yes=True)

    with pytest.raises(PreflightError) as exc_info:
        processor.run_processing()

    assert exc_info.value.issues == [f"target path already exists: {episode_dir / 'Show - S01E02.mkv'}"]
    assert (episode_dir / "[Grp] Show - 01 [1080p].mkv").exists()
    assert (episode_dir / "Show - S01E02.mkv").read_text() == "already here"


def test_second_run_renames_nothing(episode_dir, make_processor, console_buffer, mocker):
    make_processor(directory=episode_dir, title="Show", yes=True).run_processing()
    after_first_run = _names(episode_dir)
    mock_rename = mocker.patch('anime_renamer.file_system_ops.os.rename')

    results = make_processor(directory=episode_dir, title="Show", yes=True).run_processing()

    mock_rename.assert_not_called()
    assert results['pairs'] == 2
    assert results['renamed'] == 0
    assert _names(episode_dir) == after_first_run
    assert "No files need renaming." in console_buffer.getvalue()
