#!/usr/bin/env python3
"""Steam Library Sync - Command Line Entry Point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from steamlibsync.config import Config
from steamlibsync.core.logging import logger, setup_logging
from steamlibsync.core.steam_account_scanner import get_most_recent_user
from steamlibsync.services.library_sync_service import LibrarySyncService
from steamlibsync.utils.i18n import init_i18n, t
from steamlibsync.version import __app_name__, __version__

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Command line options of a single reconciliation run."""
    parser = argparse.ArgumentParser(prog="steamlibsync", description=__app_name__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--settings", type=Path, help="settings.json to load instead of the per-user file")
    parser.add_argument("--steam-path", type=Path, help="Steam installation directory")
    parser.add_argument("--user-id", help="SteamID64 of the account to import")
    parser.add_argument("--private", action="store_true", help="use the Web API key instead of the public profile")
    parser.add_argument("--connect", action="store_true", help="import the owned library of the account")
    parser.add_argument("--uninstalled", action="store_true", help="also import owned games that are not installed")
    parser.add_argument("--family", action="store_true", help="also import family shared games")
    parser.add_argument("--save", action="store_true", help="write the effective settings back to the settings file")
    parser.add_argument("--output", type=Path, help="write the JSON result to this file instead of stdout")
    parser.add_argument("--log-file", type=Path, help="write a DEBUG log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output on the console")
    return parser


def _apply_arguments(config: Config, args: argparse.Namespace) -> None:
    if args.steam_path:
        config.STEAM_PATH = args.steam_path
    if args.user_id:
        config.STEAM_USER_ID = args.user_id
    if args.private:
        config.IS_PRIVATE_ACCOUNT = True
    if args.connect:
        config.CONNECT_ACCOUNT = True
    if args.uninstalled:
        config.IMPORT_UNINSTALLED_GAMES = True
    if args.family:
        config.IMPORT_FAMILY_SHARED_GAMES = True


def main(argv: list[str] | None = None) -> int:
    """Runs one reconciliation and prints the games as JSON.

    Args:
        argv: Arguments without the program name, ``sys.argv`` when omitted.

    Returns:
        Exit code, 1 when any stage of the run failed.
    """
    args = build_parser().parse_args(argv)

    # 1. Settings, then command line overrides
    config = Config.load(args.settings)
    _apply_arguments(config, args)

    # 2. Language before the first translated log line
    init_i18n(config.UI_LANGUAGE)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    logger.info(t("logs.main.starting", app=__app_name__, version=__version__))

    if args.save:
        config.save()
        logger.info(t("logs.main.settings_saved", path=config.SETTINGS_FILE))

    if config.STEAM_PATH:
        logger.info(t("logs.main.steam_found", path=config.STEAM_PATH))
        # Fall back to whoever logged in last on this machine
        if config.CONNECT_ACCOUNT and not config.STEAM_USER_ID:
            user = get_most_recent_user(config.STEAM_PATH)
            if user is not None:
                config.STEAM_USER_ID = str(user.steam_id)
                logger.info(t("logs.main.using_local_user", user=user))
    else:
        logger.warning(t("logs.main.steam_not_found"))

    result = LibrarySyncService(config).get_games()

    payload = {
        "games": [game.to_dict() for game in result.games],
        "error": str(result.error) if result.error else None,
    }
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)

    return 1 if result.error else 0


if __name__ == "__main__":
    sys.exit(main())
