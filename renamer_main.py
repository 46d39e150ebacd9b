#!/usr/bin/env python3
import sys
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pytomlpp
from rich.console import Console
from rich.text import Text

from anime_renamer.cli import parse_arguments
from anime_renamer.config_manager import (
    ConfigManager, ConfigHelper, BaseProfileSettings,
    generate_default_toml_content, validate_config_dict, DEFAULT_CONFIG_FILENAME
)
from anime_renamer.log_setup import setup_logging, parse_log_level
from anime_renamer.main_processor import MainProcessor
from anime_renamer.ui_utils import make_console, LineReader
from anime_renamer.exceptions import RenamerError, ConfigError

log = logging.getLogger("anime_renamer")


def print_stderr_message(message: Any) -> None:
    Console(file=sys.stderr, highlight=False).print(message)


def _generate_config(args, console: Console) -> int:
    target_path = (args.output or Path.cwd() / DEFAULT_CONFIG_FILENAME).resolve()
    if target_path.exists() and not args.force:
        print_stderr_message(f"Config file {target_path} exists. Use --force to overwrite.")
        return 1
    try:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(generate_default_toml_content(), encoding="utf-8")
    except OSError as e:
        print_stderr_message(f"Error: Could not write configuration file to {target_path}: {e}")
        log.error(f"Failed to write generated config to {target_path}: {e}")
        return 1
    console.print(f"[green]Default configuration file generated at: {target_path}[/green]")
    log.info(f"Default config.toml generated at {target_path}")
    return 0


def _show_config(args, manager: ConfigManager, cfg: ConfigHelper, console: Console) -> int:
    console.print(f"--- Configuration Effective for Profile: '{cfg.profile}' ---")
    if manager.config_path.is_file():
        console.print(f"Config file loaded: [cyan]{manager.config_path}[/cyan]")
    else:
        console.print(f"Config file [yellow]{manager.config_path}[/yellow] not found. Using internal defaults.")
    if args.raw:
        console.print(Text(manager.get_raw_toml_content() or "# No config file loaded."))
        return 0
    effective_settings: Dict[str, Any] = {key: cfg(key) for key in BaseProfileSettings.model_fields}
    console.print(Text(json.dumps(effective_settings, indent=2, default=str)))
    return 0


def _validate_config(manager: ConfigManager, console: Console) -> int:
    console.print(f"--- Validating Configuration File: {manager.config_path} ---")
    if not manager.config_path.is_file():
        console.print(f"Config file '[yellow]{manager.config_path}[/yellow]' not found. Nothing to validate.")
        return 0
    # Already validated on load; checked again for an explicit report.
    validate_config_dict(pytomlpp.loads(manager.config_path.read_text(encoding='utf-8')), source=str(manager.config_path))
    console.print("[green]Configuration file syntax is valid and conforms to the schema.[/green]")
    return 0


def main(argv=None, reader: Optional[LineReader] = None) -> int:
    args = parse_arguments(argv)
    console = make_console(quiet=args.quiet)

    try:
        if args.command == 'config' and args.config_command == 'generate':
            setup_logging(log_level_console=parse_log_level(args.log_level))
            return _generate_config(args, console)

        manager = ConfigManager(config_path_override=args.config)
        cfg = ConfigHelper(manager, args)

        setup_logging(
            log_level_console=parse_log_level(cfg('log_level', 'INFO')),
            log_file=cfg('log_file', None)
        )
        log.debug(f"Full logging configured. Parsed args: {args}")
        log.debug(f"Using profile: {cfg.profile}")

        if args.command == 'config':
            if args.config_command == 'show':
                return _show_config(args, manager, cfg, console)
            return _validate_config(manager, console)

        processor = MainProcessor(args, cfg, console, reader)
        processor.run_processing()
        return 0

    except ConfigError as e_cfg:
        print_stderr_message(Text(f"FATAL CONFIGURATION ERROR: {e_cfg}", style="bold red"))
        if log.handlers: log.critical(f"Config Error: {e_cfg}")
        return 2
    except RenamerError as e_app:
        if log.handlers: log.error(f"Application Error: {e_app}", exc_info=log.isEnabledFor(logging.DEBUG))
        print_stderr_message(Text(f"Error: {e_app}", style="bold red"))
        return 1
    except KeyboardInterrupt:
        if log.handlers: log.warning("Operation interrupted by user.")
        print_stderr_message("\nCancelled by user.")
        return 130


def cli_entry():
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
