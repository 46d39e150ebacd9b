# anime_renamer/config_manager.py

import os
import logging
import argparse
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

import platformdirs
import pytomlpp
from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

log = logging.getLogger(__name__)
APP_NAME = "anime_renamer"
DEFAULT_CONFIG_FILENAME = "config.toml"
ENV_PREFIX = "ANIME_RENAMER_"
# Settings that may be overridden from the environment / .env file.
ENV_OVERRIDABLE_KEYS = ('profile', 'log_level', 'log_file')

class BaseProfileSettings(BaseModel):
    # Discovery
    recursive: Optional[bool] = Field(default=True, description="Scan subdirectories.")
    video_extensions: Optional[List[str]] = Field(default_factory=lambda: [".mkv", ".mp4", ".avi"], description="List of video file extensions.")
    subtitle_extensions: Optional[List[str]] = Field(default_factory=lambda: [".srt", ".ass"], description="List of subtitle file extensions.")
    ignore_patterns: Optional[List[str]] = Field(
        default_factory=lambda: ['.anime-renamer-tmp-*', '*.partial'],
        description="List of glob patterns (e.g., '*.tmp') to ignore."
    )

    # Renaming
    temp_file_prefix: Optional[str] = Field(default=".anime-renamer-tmp-", description="Prefix for temporary filenames during the two-phase rename.")
    temp_path_attempts: Optional[int] = Field(default=1000, ge=1, description="Candidate temporary names tried per file before giving up.")
    confirm_live_run: Optional[bool] = Field(default=True, description="Ask for confirmation before renaming files.")

    # Logging Options
    log_file: Optional[str] = Field(default=None, description="Path to log file (e.g., anime_renamer.log).")
    log_level: Optional[str] = Field(default='INFO', description="Logging level: DEBUG, INFO, WARNING, ERROR.")

    @field_validator('video_extensions', 'subtitle_extensions', mode='before')
    @classmethod
    def normalize_extensions(cls, v: Any) -> Optional[List[str]]:
        if v is None: return v
        if isinstance(v, str):
            v = [item for item in v.split(',')]
        if not isinstance(v, list):
            raise ValueError("extensions must be a list or comma-separated string")
        normalized = []
        for item in v:
            ext = str(item).strip().lower()
            if not ext: continue
            normalized.append(ext if ext.startswith('.') else f".{ext}")
        if not normalized:
            raise ValueError("at least one extension is required")
        return normalized

    @field_validator('log_level', mode='before')
    @classmethod
    def check_log_level(cls, v: Any) -> Optional[str]:
        if v is not None and isinstance(v, str) and v.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR")
        return v.upper() if isinstance(v, str) else None

    @field_validator('temp_file_prefix', mode='before')
    @classmethod
    def check_temp_file_prefix(cls, v: Any) -> Optional[str]:
        if v is not None:
            if not isinstance(v, str):
                raise ValueError("temp_file_prefix must be a string.")
            if not v:
                raise ValueError("temp_file_prefix cannot be empty.")
            if any(char in v for char in ['/', '\\']):
                raise ValueError("temp_file_prefix cannot contain path separators.")
        return v


class DefaultSettings(BaseProfileSettings):
    pass

class RootConfigModel(BaseModel):
    default: DefaultSettings = Field(default_factory=DefaultSettings)
    model_config = {'extra': 'allow'}


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, str):
        escaped = value.replace('\\', '\\\\').replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, list):
        return "[" + ", ".join(_toml_value(item) for item in value) + "]"
    return str(value)


def generate_default_toml_content() -> str:
    default_settings = DefaultSettings()
    content_lines = ["# anime-renamer Default Configuration File\n"]

    sections: Dict[str, List[str]] = {
        "Discovery": ['recursive', 'video_extensions', 'subtitle_extensions', 'ignore_patterns'],
        "Renaming": ['temp_file_prefix', 'temp_path_attempts', 'confirm_live_run'],
        "Logging Options": ['log_file', 'log_level'],
    }

    content_lines.append("[default]")
    for section_name, keys in sections.items():
        content_lines.append(f"\n  # --- {section_name} ---")
        for key in keys:
            field_info = BaseProfileSettings.model_fields[key]
            if field_info.description:
                content_lines.append(f"  # {field_info.description}")
            default_value = getattr(default_settings, key)
            if default_value is None:
                content_lines.append(f"  # {key} = (not set)")
                continue
            content_lines.append(f"  {key} = {_toml_value(default_value)}")

    content_lines.append("\n# You can create other profiles, e.g.:")
    content_lines.append("# [strict]")
    content_lines.append("# confirm_live_run = true")
    content_lines.append("# recursive = false")
    return "\n".join(content_lines) + "\n"


def default_user_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME, appauthor=False)) / DEFAULT_CONFIG_FILENAME


class ConfigManager:
    def __init__(self, config_path_override: Optional[Path] = None):
        self.config_path = self._resolve_config_path(config_path_override)
        self._raw_toml_content_str: Optional[str] = None
        self._config = self._load_config()
        self._env_overrides = self._load_env_overrides()
        log.debug(f"Config path used: {self.config_path}")

    def _resolve_config_path(self, config_path_override: Optional[Path]) -> Path:
        if config_path_override:
            explicit = Path(config_path_override).resolve()
            log.debug(f"Config path given on the command line: {explicit}")
            return explicit

        cwd_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        candidates = [
            ("current directory", cwd_path),
            ("user config directory", default_user_config_path()),
            ("project directory", Path(__file__).parent.parent / DEFAULT_CONFIG_FILENAME),
        ]
        for location, candidate in candidates:
            if candidate.is_file():
                log.debug(f"Config file found in {location}: {candidate}")
                return candidate.resolve()

        log.debug(f"No config file in {len(candidates)} locations; '{cwd_path}' is where one would be created.")
        return cwd_path.resolve()

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path.is_file():
            log.info(f"Config file not found at '{self.config_path}'. Using internal defaults.")
            self._raw_toml_content_str = "# Config file not found.\n"
            return RootConfigModel().model_dump()

        try:
            self._raw_toml_content_str = self.config_path.read_text(encoding='utf-8')
        except OSError as e_os:
            raise ConfigError(f"Failed to read config file '{self.config_path}': {e_os}") from e_os

        if not self._raw_toml_content_str.strip():
            log.warning(f"Config file '{self.config_path}' is empty. Using internal defaults.")
            return RootConfigModel().model_dump()

        try:
            cfg_dict = pytomlpp.loads(self._raw_toml_content_str)
        except pytomlpp.DecodeError as e_toml:
            raise ConfigError(f"Failed to parse TOML config '{self.config_path}': {e_toml}") from e_toml
        log.info(f"Loaded configuration from '{self.config_path}'")
        return validate_config_dict(cfg_dict, source=str(self.config_path))

    def _load_env_overrides(self) -> Dict[str, str]:
        env_path: Union[str, Path, None] = find_dotenv(usecwd=True)
        if env_path:
            log.debug(f"Loading environment variables from: {env_path}")
            load_dotenv(dotenv_path=env_path)

        overrides: Dict[str, str] = {}
        for key in ENV_OVERRIDABLE_KEYS:
            value = os.getenv(f"{ENV_PREFIX}{key.upper()}")
            if value:
                overrides[key] = value
        if overrides:
            log.debug(f"Environment overrides: {sorted(overrides)}")
        return overrides

    def get_raw_toml_content(self) -> Optional[str]:
        return self._raw_toml_content_str

    def get_env_override(self, key: str) -> Optional[str]:
        return self._env_overrides.get(key)

    def get_value(self, key: str, profile: str = 'default', command_line_value: Any = None, default_value: Any = None) -> Any:
        if command_line_value is not None:
            return command_line_value

        if key in self._env_overrides:
            return self._env_overrides[key]

        for section in (profile, 'default'):
            section_settings = self._config.get(section, {})
            if isinstance(section_settings, dict) and section_settings.get(key) is not None:
                return section_settings[key]

        # Fallback to the model default if not found above
        if default_value is None and key in BaseProfileSettings.model_fields:
            field_info = BaseProfileSettings.model_fields[key]
            if field_info.default_factory is not None:
                return field_info.default_factory()
            return field_info.default

        return default_value

    def get_profile_settings(self, profile: str = 'default') -> Dict[str, Any]:
        final_settings = DefaultSettings().model_dump()
        for section in ('default', profile):
            section_settings = self._config.get(section, {})
            if not isinstance(section_settings, dict):
                log.warning(f"Profile '{section}' in config is not a table. Skipping merge for this profile.")
                continue
            for k, v in section_settings.items():
                if v is not None:
                    final_settings[k] = v
        return final_settings


def validate_config_dict(cfg_dict: Dict[str, Any], source: str = "<config>") -> Dict[str, Any]:
    """Validates the [default] table and every profile table. Raises ConfigError listing each bad field."""
    try:
        validated = RootConfigModel.model_validate(cfg_dict).model_dump()
        for profile_name, profile_data in cfg_dict.items():
            if profile_name == 'default':
                continue
            if not isinstance(profile_data, dict):
                raise ConfigError(f"Config file '{source}': profile '{profile_name}' must be a table.")
            # Only keep the keys the profile actually set, so it layers over [default].
            checked = BaseProfileSettings.model_validate(profile_data)
            validated[profile_name] = {k: getattr(checked, k) for k in profile_data if k in BaseProfileSettings.model_fields}
    except ValidationError as e_val:
        error_msgs = [f"  - Field `{' -> '.join(map(str, err['loc']))}`: {err['msg']}" for err in e_val.errors()]
        error_summary = f"Config file '{source}' validation failed:\n" + "\n".join(error_msgs)
        log.error(error_summary)
        raise ConfigError(error_summary) from e_val
    log.debug("Config validation successful.")
    return validated


class ConfigHelper:
    def __init__(self, config_manager: ConfigManager, args_ns: argparse.Namespace):
        self.manager = config_manager
        self.args = args_ns
        self.profile = (getattr(args_ns, 'profile', None)
                        or config_manager.get_env_override('profile')
                        or 'default')

    def __call__(self, key: str, default_value: Any = None, arg_value: Any = None) -> Any:
        cmd_line_val = arg_value if arg_value is not None else getattr(self.args, key, None)
        return self.manager.get_value(key, self.profile, cmd_line_val, default_value)

    def get_list(self, key: str, default_value: Optional[List[Any]] = None) -> List[Any]:
        val = self(key, default_value)
        if isinstance(val, list):
            return val
        if isinstance(val, str):
            return [item.strip() for item in val.split(',') if item.strip()]
        return default_value if isinstance(default_value, list) else []
