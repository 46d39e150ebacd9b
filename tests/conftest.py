# tests/conftest.py
import pytest
from pathlib import Path
import sys
import argparse

# Ensure the app package is findable by pytest by adding the project root to the path
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))


# --- Mock Config Fixture ---
@pytest.fixture
def mock_cfg_helper(mocker):
    mock_args = argparse.Namespace(profile='default')
    mock_config_manager = mocker.MagicMock()
    class MockConfigHelper:
        def __init__(self, manager, args): self.manager = manager; self.args = args; self.profile = 'default'
        def __call__(self, key, default_value=None, arg_value=None):
            if arg_value is not None: return arg_value
            if getattr(self.args, key, None) is not None: return getattr(self.args, key)
            if key in self.manager._mock_values: return self.manager._mock_values[key]
            return default_value
        def get_list(self, key, default_value=None):
            val = self(key, default_value)
            if isinstance(val, str): return [i.strip() for i in val.split(',') if i.strip()]
            if isinstance(val, list): return val
            return default_value if isinstance(default_value, list) else []
    mock_config_manager._mock_values = {
        'video_extensions': ['.mkv', '.mp4', '.avi'],
        'subtitle_extensions': ['.srt', '.ass'],
        'ignore_patterns': [],
        'recursive': True,
    }
    return MockConfigHelper(mock_config_manager, mock_args)


# --- Test Files Fixture ---
@pytest.fixture
def episode_dir(tmp_path: Path):
    """A folder with three videos, two matching subtitles and a stray subtitle."""
    (tmp_path / "[Grp] Show - 01 [1080p].mkv").write_text("video 1")
    (tmp_path / "[Grp] Show - 02 [1080p].mkv").write_text("video 2")
    (tmp_path / "[Grp] Show - 03 [1080p].mkv").write_text("video 3")
    (tmp_path / "Show S01E01.ass").write_text("subtitle 1")
    (tmp_path / "Show S01E02.ass").write_text("subtitle 2")
    (tmp_path / "Show S01E07.ass").write_text("subtitle 7")
    (tmp_path / "notes.txt").write_text("not media")
    return tmp_path
