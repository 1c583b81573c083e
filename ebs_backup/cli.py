"""
Command-line interface and main entry point for ebs_backup.

Wires the EC2 client, throttle and gateway together, runs the lifecycle
stages, and maps any unrecovered error to a non-zero exit code.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from .args_parser import build_run_config, parse_args
from .aws_client_factory import create_ec2_client
from .exceptions import SnapshotLifecycleError
from .gateway import Ec2Gateway
from .orchestrator import SnapshotLifecycle
from .reporting import print_run_settings, print_run_summary
from .throttle import Throttle


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ebs_backup CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    config = build_run_config(args)
    print_run_settings(config, datetime.now(timezone.utc))

    try:
        ec2_client = create_ec2_client(config.region, env_path=args.env_file)
        gateway = Ec2Gateway(ec2_client, Throttle(config.api_delay))
        summary = SnapshotLifecycle(gateway, config).run()
    except SnapshotLifecycleError as exc:
        logging.error("Run aborted: %s", exc)
        return 1

    print_run_summary(summary, dry_run=config.dry_run)
    return 0
