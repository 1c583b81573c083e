"""
Argument parsing for the ebs_backup CLI.

Handles command-line argument definition, parsing, and conversion into a RunConfig.
"""

from __future__ import annotations

import argparse

from .config import (
    DEFAULT_API_DELAY_SECONDS,
    VERSION,
    ConfigurationError,
    RunConfig,
    resolve_region,
)


def add_action_arguments(parser: argparse.ArgumentParser) -> None:
    """Add backup and purge toggles."""
    parser.add_argument("-b", "--backup", action="store_true", help="Perform backup.")
    parser.add_argument(
        "-t",
        "--tagged",
        action="store_true",
        help="Backup only volumes tagged with the Backup=true tag.",
    )
    parser.add_argument("-p", "--purge", action="store_true", help="Purge old backups.")
    parser.add_argument(
        "-a",
        "--purgeauto",
        action="store_true",
        help="Purge automated backups only. Will ignore manual backups.",
    )
    parser.add_argument(
        "-x",
        "--nonexistingvolumes",
        action="store_true",
        help="Purge snapshots of no longer existing volumes.",
    )
    parser.add_argument(
        "-n",
        "--notusedvolumes",
        action="store_true",
        help="Purge snapshots of volumes no longer attached to instances.",
    )
    parser.add_argument(
        "-d",
        "--dryrun",
        action="store_true",
        help="Simulates creation and deletion of snapshots.",
    )


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add AWS connection and pacing arguments."""
    parser.add_argument(
        "--api-delay",
        type=float,
        default=DEFAULT_API_DELAY_SECONDS,
        metavar="SECONDS",
        help=f"Delay before each EC2 call (default: {DEFAULT_API_DELAY_SECONDS}).",
    )
    parser.add_argument(
        "--env-file",
        help="Load AWS credentials from this .env file (default: $AWS_ENV_FILE, "
        "else the standard boto3 credential chain).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the ArgumentParser for the ebs_backup CLI."""
    parser = argparse.ArgumentParser(
        prog="ebs-backup",
        description="Create EBS snapshots of attached volumes and purge old ones.",
    )
    parser.add_argument(
        "region",
        nargs="?",
        help="AWS region (default: $AWS_DEFAULT_REGION or $AWS_REGION).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose mode.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    add_action_arguments(parser)
    add_connection_arguments(parser)
    return parser


def build_run_config(args: argparse.Namespace) -> RunConfig:
    """Translate parsed arguments into a RunConfig."""
    return RunConfig(
        region=args.region,
        backup_enabled=args.backup,
        tagged_only=args.tagged,
        purge_attached=args.purge,
        purge_automated_only=args.purgeauto,
        purge_orphaned=args.nonexistingvolumes,
        purge_unattached=args.notusedvolumes,
        dry_run=args.dryrun,
        api_delay=args.api_delay,
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and validate command-line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.api_delay < 0:
        parser.error("--api-delay must be >= 0.")
    try:
        args.region = resolve_region(args.region)
    except ConfigurationError as exc:
        parser.error(str(exc))
    return args
