"""
EBS Snapshot Lifecycle Reporting Module
Handles operator-facing output for run settings and the final summary.
"""

from __future__ import annotations

from datetime import datetime

from .config import RunConfig
from .models import RunSummary

RETENTION_POLICY_TEXT = (
    "default policy (current month, 1st day of each month and 1st day of each year)"
)


def _print_purge_setting(enabled: bool, label: str, automated_only: bool) -> None:
    if enabled:
        print(f"Purging old backups of {label} with {RETENTION_POLICY_TEXT}")
        if automated_only:
            print("Purging automated backups only")
    else:
        print(f"Won't purge backups of {label}")


def print_run_settings(config: RunConfig, now: datetime) -> None:
    """
    Print what this run is going to do.

    Args:
        config: Resolved run configuration
        now: Current date and time
    """
    print(f"Selected region: {config.region}")
    print(f"Current date and time: {now}")
    if config.backup_enabled:
        print("Will perform backups")
        if config.tagged_only:
            print("Only volumes tagged with Backup=true will be backed up")
    else:
        print("Will NOT perform backups")

    _print_purge_setting(config.purge_attached, "attached volumes", config.purge_automated_only)
    _print_purge_setting(
        config.purge_orphaned, "no longer existing volumes", config.purge_automated_only
    )
    _print_purge_setting(
        config.purge_unattached, "no longer attached volumes", config.purge_automated_only
    )
    if config.purge_automated_only and not config.any_purge:
        print("Automated-only purging ignored: no purge option selected")

    if config.dry_run:
        print("Dry run. We will simulate creation and deletion of snapshots")
    print()


def print_run_summary(summary: RunSummary, dry_run: bool = False) -> None:
    """Print the counters collected over the run."""
    print()
    if dry_run:
        print("SIMULATED RUN - no snapshot was created or deleted")
    print(f"{summary.snapshots_deleted} snapshots deleted.")
    print(f"{summary.volumes_snapshotted} volumes snapshots created.")
