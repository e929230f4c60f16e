"""
Rocket Handler CLI - posts one monitoring event to a Rocket.Chat channel.

Reads the event as JSON from stdin (or --event-file), sends it, and exits
0 on success or 1 on any fatal error. Every option also has a
ROCKETCHAT_* environment variable; credentials are best passed that way.
"""

import argparse
import sys
from pathlib import Path

from rockethandler import __version__
from rockethandler.config import DEFAULT_ALIAS, DEFAULT_AVATAR, DEFAULT_TEMPLATE, DEFAULT_URL, load_config
from rockethandler.dispatcher import Dispatcher
from rockethandler.errors import HandlerError
from rockethandler.event import load_event
from rockethandler.logging_config import get_logger, mask_secrets, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rocket-handler",
        description="Handler to send monitoring events to a Rocket.Chat channel"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        default=None,
        help="Used for testing, do not communicate with RocketChat API, report only (implies --verbose)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Verbose output"
    )
    parser.add_argument(
        "-u", "--url",
        help=f"RocketChat service URL (env: ROCKETCHAT_URL, default: {DEFAULT_URL})"
    )
    parser.add_argument(
        "-c", "--channel",
        help="RocketChat channel to send messages to. Required (env: ROCKETCHAT_CHANNEL)"
    )
    parser.add_argument(
        "-t", "--description-template",
        help=f"Notification description template, Jinja2 syntax (default: {DEFAULT_TEMPLATE})"
    )
    parser.add_argument(
        "-U", "--user",
        help="RocketChat user, used with --password. Prefer ROCKETCHAT_USER"
    )
    parser.add_argument(
        "-P", "--password",
        help="RocketChat user password, used with --user. Prefer ROCKETCHAT_PASSWORD"
    )
    parser.add_argument(
        "-T", "--token",
        help="RocketChat auth token, used with --userID. Prefer ROCKETCHAT_TOKEN"
    )
    parser.add_argument(
        "-I", "--userID",
        dest="user_id",
        help="RocketChat auth user ID, used with --token. Prefer ROCKETCHAT_USERID"
    )
    parser.add_argument(
        "--alias",
        help=f"Name to use in the message, user must have the bot role (default: {DEFAULT_ALIAS})"
    )
    parser.add_argument(
        "--avatar-url",
        dest="avatar",
        help=f"Avatar image URL, user must have the bot role (default: {DEFAULT_AVATAR})"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (default: 10)"
    )
    parser.add_argument(
        "--config-file",
        help="YAML file with option values (lowest precedence)"
    )
    parser.add_argument(
        "--event-file",
        help="Read the event JSON from this file instead of stdin"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file (rotated)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    overrides = {
        "dry_run": args.dry_run,
        "verbose": args.verbose,
        "url": args.url,
        "channel": args.channel,
        "description_template": args.description_template,
        "user": args.user,
        "password": args.password,
        "token": args.token,
        "user_id": args.user_id,
        "alias": args.alias,
        "avatar": args.avatar,
        "timeout": args.timeout,
    }

    try:
        config = load_config(args.config_file, overrides=overrides)
        mask_secrets(config.password, config.token)
        event = load_event(Path(args.event_file) if args.event_file else None)
        Dispatcher(config).dispatch(event)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except HandlerError as e:
        logger.error("Error executing handler: %s", e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
