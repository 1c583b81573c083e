"""
Snapshot lifecycle orchestration.

Runs the enabled stages in a fixed order:

1. walk every instance's EBS volumes, purging each volume's old snapshots and
   then creating a fresh tagged snapshot (backup),
2. purge snapshots whose source volume no longer exists,
3. purge snapshots of volumes not attached to any instance.

Each stage returns its own RunSummary; the run total is their sum. Volume
state is read separately by each stage, so a volume whose attachment changes
mid-run can be seen by two populations or by none. Re-running the tool is safe.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from .classifier import automated_only
from .config import (
    BACKUP_TAG_ENABLED_VALUE,
    BACKUP_TAG_KEY,
    CREATED_BY_TAG_KEY,
    CREATED_BY_TAG_VALUE,
    NAME_TAG_KEY,
    RunConfig,
)
from .exceptions import SnapshotCreationError, SnapshotInUseError, TaggingError
from .gateway import Ec2Gateway
from .models import Instance, RunSummary, Snapshot, Volume
from .retention import should_keep

SIMULATION_MARKER = "!!!SIMULATION ONLY!!!"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def backup_requested(volume: Volume, tagged_only: bool) -> bool:
    """Return True if the volume should be snapshotted under the current mode."""
    if not tagged_only:
        return True
    return volume.tags.get(BACKUP_TAG_KEY) == BACKUP_TAG_ENABLED_VALUE


def backup_tags(volume: Volume) -> dict[str, str]:
    """Tags stamped on a new snapshot: the volume Name plus provenance."""
    return {
        NAME_TAG_KEY: volume.tags.get(NAME_TAG_KEY, ""),
        CREATED_BY_TAG_KEY: CREATED_BY_TAG_VALUE,
    }


def orphaned_snapshots(snapshots: Iterable[Snapshot], volumes: Iterable[Volume]) -> list[Snapshot]:
    """Return snapshots whose source volume is not among the given volumes."""
    existing = {volume.volume_id for volume in volumes}
    return [snapshot for snapshot in snapshots if snapshot.volume_id not in existing]


class SnapshotLifecycle:
    """Drives backup and purge stages against an Ec2Gateway."""

    def __init__(
        self,
        gateway: Ec2Gateway,
        config: RunConfig,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.gateway = gateway
        self.config = config
        self._clock = clock

    def run(self) -> RunSummary:
        """Execute every enabled stage and return the aggregated counters."""
        summary = RunSummary()
        if self.config.backup_enabled or self.config.purge_attached:
            summary += self.process_attached_volumes()
        if self.config.purge_orphaned:
            summary += self.purge_orphaned_volumes()
        if self.config.purge_unattached:
            summary += self.purge_unattached_volumes()
        return summary

    # Stages

    def process_attached_volumes(self) -> RunSummary:
        """Purge and back up every EBS volume attached to an instance."""
        instances = self.gateway.list_instances()
        logging.info("Number of instances: %d", len(instances))
        summary = RunSummary()
        for instance in instances:
            summary += self._process_instance(instance)
        return summary

    def purge_orphaned_volumes(self) -> RunSummary:
        """Purge snapshots whose source volume no longer exists."""
        logging.info("Purging snapshots of no longer existing volumes")
        snapshots = self.gateway.list_snapshots(owner_self=True)
        volumes = self.gateway.list_volumes()
        logging.info("Total number of alive volumes: %d", len(volumes))
        orphans = orphaned_snapshots(snapshots, volumes)
        logging.info("Total number of snapshots with no volumes: %d", len(orphans))
        return RunSummary(snapshots_deleted=self.purge_snapshots(orphans))

    def purge_unattached_volumes(self) -> RunSummary:
        """Purge snapshots of volumes that exist but are not attached."""
        logging.info("Purging snapshots of volumes no longer attached to instances")
        volumes = self.gateway.list_available_volumes()
        logging.info("Total number of available volumes: %d", len(volumes))
        snapshots = self.gateway.list_snapshots(volume_ids=[v.volume_id for v in volumes])
        logging.info("Total number of snapshots of available volumes: %d", len(snapshots))
        return RunSummary(snapshots_deleted=self.purge_snapshots(snapshots))

    # Per-resource steps

    def _process_instance(self, instance: Instance) -> RunSummary:
        logging.info("Instance ID: %s - State: %s", instance.instance_id, instance.state)
        for key, value in instance.tags.items():
            logging.debug("  Tag key: %s - Value: %s", key, value)

        summary = RunSummary()
        for mapping in instance.block_devices:
            logging.info("  Device: %s - Volume: %s", mapping.device_name, mapping.volume_id)
            for volume in self.gateway.list_volumes(volume_ids=[mapping.volume_id]):
                summary += self._process_volume(volume)
        return summary

    def _process_volume(self, volume: Volume) -> RunSummary:
        deleted = 0
        if self.config.purge_attached:
            snapshots = self.gateway.list_snapshots(volume_ids=[volume.volume_id])
            deleted = self.purge_snapshots(snapshots)

        for key, value in volume.tags.items():
            logging.debug("    Tag key: %s - Value: %s", key, value)

        created = 0
        if self.config.backup_enabled and backup_requested(volume, self.config.tagged_only):
            self.create_backup(volume)
            created = 1
        return RunSummary(snapshots_deleted=deleted, volumes_snapshotted=created)

    def create_backup(self, volume: Volume) -> None:
        """
        Snapshot a volume and tag the snapshot with its Name and provenance.

        Raises:
            SnapshotCreationError: If creation or tagging fails
        """
        logging.info("Creating snapshot of volume %s", volume.volume_id)
        if self.config.dry_run:
            logging.info(SIMULATION_MARKER)
            return

        snapshot = self.gateway.create_snapshot(volume.volume_id, description=volume.volume_id)
        logging.info(
            "Created snapshot: %s - Date of creation: %s",
            snapshot.snapshot_id,
            snapshot.start_time,
        )
        try:
            self.gateway.tag_resource(snapshot.snapshot_id, backup_tags(volume))
        except TaggingError as e:
            raise SnapshotCreationError(volume.volume_id, e) from e

    def purge_snapshots(self, snapshots: list[Snapshot]) -> int:
        """
        Apply the retention policy to snapshots and delete the ones not kept.

        Snapshots EC2 refuses to delete with a bad-request status are logged
        and skipped. Any other deletion failure propagates.

        Returns:
            Number of snapshots deleted (or that would be, in a dry run)
        """
        if self.config.purge_automated_only:
            snapshots = automated_only(snapshots)

        now = self._clock()
        deleted = 0
        for snapshot in snapshots:
            logging.debug(
                "Checking snapshot %s with date %s", snapshot.snapshot_id, snapshot.start_time
            )
            if should_keep(snapshot.start_time, now):
                continue
            if self.delete_snapshot(snapshot):
                deleted += 1
        return deleted

    def delete_snapshot(self, snapshot: Snapshot) -> bool:
        """Delete one snapshot. Returns False if it was skipped as in use."""
        logging.info("Deleting snapshot %s", snapshot.snapshot_id)
        if self.config.dry_run:
            logging.info(SIMULATION_MARKER)
            return True
        try:
            self.gateway.delete_snapshot(snapshot.snapshot_id)
        except SnapshotInUseError as e:
            logging.warning("%s", e)
            logging.warning("The snapshot %s is in use. Ignoring it.", snapshot.snapshot_id)
            return False
        return True
