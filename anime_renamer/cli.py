import argparse
from pathlib import Path
from . import __version__

def create_parser():
    parser = argparse.ArgumentParser(
        description=f"Rename anime videos and subtitles so players auto-load the subtitles (v{__version__}).",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', type=Path, help='Path to TOML config file (overrides default search).')
    parser.add_argument('--profile', type=str, default=None, help='Configuration profile to use (default: "default").')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default=None, help='Console logging level (overrides config).')
    parser.add_argument('--quiet', '-q', action='store_true', default=False, help='Suppress non-essential console output. Errors still shown.')

    subparsers = parser.add_subparsers(dest='command', required=True, help='Action to perform')

    # --- Rename Subparser ---
    parser_rename = subparsers.add_parser('rename', help='Pair videos with subtitles and rename both.', formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser_rename.add_argument("directory", type=Path, nargs='?', default=None, help="Folder containing the videos and subtitles (prompted for if omitted).")
    parser_rename.add_argument("--title", "-t", type=str, default=None, help="Anime name used for the new file names (prompted for if omitted).")
    parser_rename.add_argument("--dry-run", action="store_true", default=False, help="Print planned renames without changing files.")
    parser_rename.add_argument("--yes", "-y", action="store_true", default=False, help="Do not ask for confirmation before renaming.")
    parser_rename.add_argument("-r", "--recursive", action=argparse.BooleanOptionalAction, default=None, help="Scan subdirectories (overrides config).")
    parser_rename.add_argument("--video-extensions", type=str, default=None, help="Comma-separated video extensions (overrides config).")
    parser_rename.add_argument("--subtitle-extensions", type=str, default=None, help="Comma-separated subtitle extensions (overrides config).")
    parser_rename.add_argument("--log-file", type=str, default=None, help="Log file path (overrides config).")

    # --- Config Subparser ---
    parser_config = subparsers.add_parser('config', help='Manage application configuration.')
    config_subparsers = parser_config.add_subparsers(dest='config_command', required=True, help='Configuration action to perform')

    parser_config_show = config_subparsers.add_parser('show', help='Show the effective configuration.')
    parser_config_show.add_argument('--raw', action="store_true", help="Show the raw TOML content of the loaded config file.")

    config_subparsers.add_parser('validate', help='Validate the configuration file against the schema.')

    parser_config_generate = config_subparsers.add_parser('generate', help='Generate a default config.toml file.')
    parser_config_generate.add_argument('--output', type=Path, default=None, help='Where to write config.toml. Defaults to the current directory.')
    parser_config_generate.add_argument('--force', '-f', action='store_true', help='Overwrite the config file if it already exists.')

    return parser

def _split_extensions(raw: str):
    exts = [e.strip().lower() for e in raw.split(',') if e.strip()]
    return [e if e.startswith('.') else f".{e}" for e in exts]

def parse_arguments(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    for key in ('video_extensions', 'subtitle_extensions'):
        raw = getattr(args, key, None)
        if raw is not None:
            setattr(args, key, _split_extensions(raw))
    return args
