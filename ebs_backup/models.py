"""
EC2 resource models used by the snapshot lifecycle engine.

The gateway converts raw describe_* responses into these dataclasses so the
retention and orchestration code never touches boto3 dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from .config import CREATED_BY_TAG_KEY, CREATED_BY_TAG_VALUE


def tags_to_dict(tags: Iterable[Mapping[str, str]] | None) -> dict[str, str]:
    """
    Convert an AWS tag list into a dictionary.

    EC2 does not guarantee unique keys in the returned list; when a key repeats,
    the last value seen wins.

    Args:
        tags: List of {"Key": ..., "Value": ...} items, or None

    Returns:
        Dictionary of tag key-value pairs
    """
    result: dict[str, str] = {}
    for tag in tags or []:
        result[tag["Key"]] = tag.get("Value", "")
    return result


def dict_to_tags(tags: Mapping[str, str]) -> list[dict[str, str]]:
    """Convert a tag mapping into the list form expected by create_tags."""
    return [{"Key": key, "Value": value} for key, value in tags.items()]


@dataclass(frozen=True)
class BlockDeviceMapping:
    """An EBS volume attached to an instance under a device name."""

    device_name: str
    volume_id: str


@dataclass
class Instance:
    """EC2 instance as seen by the backup pass."""

    instance_id: str
    state: str
    tags: dict[str, str] = field(default_factory=dict)
    block_devices: list[BlockDeviceMapping] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping) -> Instance:
        """Build from a describe_instances instance entry, skipping non-EBS devices."""
        block_devices = [
            BlockDeviceMapping(device_name=bdm["DeviceName"], volume_id=bdm["Ebs"]["VolumeId"])
            for bdm in data.get("BlockDeviceMappings", [])
            if "Ebs" in bdm
        ]
        return cls(
            instance_id=data["InstanceId"],
            state=data.get("State", {}).get("Name", "unknown"),
            tags=tags_to_dict(data.get("Tags")),
            block_devices=block_devices,
        )


@dataclass
class Volume:
    """EBS volume with its attachment status and tags."""

    volume_id: str
    state: str
    tags: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping) -> Volume:
        """Build from a describe_volumes entry."""
        return cls(
            volume_id=data["VolumeId"],
            state=data.get("State", "unknown"),
            tags=tags_to_dict(data.get("Tags")),
        )


@dataclass
class Snapshot:
    """EBS snapshot. volume_id may reference a volume that no longer exists."""

    snapshot_id: str
    volume_id: str
    start_time: datetime
    tags: dict[str, str] = field(default_factory=dict)
    state: str = "unknown"
    description: str = ""

    @property
    def is_automated(self) -> bool:
        """Return True if the snapshot carries the automated-backup provenance tag."""
        return self.tags.get(CREATED_BY_TAG_KEY) == CREATED_BY_TAG_VALUE

    @classmethod
    def from_api(cls, data: Mapping) -> Snapshot:
        """Build from a describe_snapshots or create_snapshot response."""
        return cls(
            snapshot_id=data["SnapshotId"],
            volume_id=data.get("VolumeId", ""),
            start_time=data["StartTime"],
            tags=tags_to_dict(data.get("Tags")),
            state=data.get("State", "unknown"),
            description=data.get("Description", ""),
        )


@dataclass(frozen=True)
class RunSummary:
    """Outcome counters reported once a run completes."""

    snapshots_deleted: int = 0
    volumes_snapshotted: int = 0

    def __add__(self, other: RunSummary) -> RunSummary:
        if not isinstance(other, RunSummary):
            return NotImplemented
        return RunSummary(
            snapshots_deleted=self.snapshots_deleted + other.snapshots_deleted,
            volumes_snapshotted=self.volumes_snapshotted + other.volumes_snapshotted,
        )
