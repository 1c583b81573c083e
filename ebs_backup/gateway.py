"""
EC2 gateway for the snapshot lifecycle engine.

Wraps the boto3 EC2 client: paginated inventory reads, snapshot creation,
tagging and deletion. Every request is paced by one throttle wait, and
botocore failures are mapped onto the tool's exception taxonomy.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from .config import AVAILABLE_STATUS, FILTER_VALUES_LIMIT, SELF_OWNER
from .exceptions import (
    InventoryError,
    SnapshotCreationError,
    SnapshotDeletionError,
    SnapshotInUseError,
    TaggingError,
)
from .models import Instance, Snapshot, Volume, dict_to_tags
from .throttle import Throttle

HTTP_BAD_REQUEST = 400


def _chunked(values: list[str], size: int) -> Iterable[list[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


def is_bad_request(error: ClientError) -> bool:
    """Return True if the ClientError carries an HTTP 400 status."""
    metadata = error.response.get("ResponseMetadata", {})
    return metadata.get("HTTPStatusCode") == HTTP_BAD_REQUEST


class Ec2Gateway:
    """Throttled access to the EC2 resources the lifecycle engine needs."""

    def __init__(self, ec2_client, throttle: Throttle | None = None):
        self._client = ec2_client
        self._throttle = throttle or Throttle()

    def _paginate(self, operation_name: str, result_key: str, **kwargs) -> list[dict]:
        """Collect every item of a paginated describe call, pacing each page."""
        items: list[dict] = []
        try:
            for page in self._client.get_paginator(operation_name).paginate(**kwargs):
                # pages are fetched lazily, one request each
                self._throttle.wait()
                items.extend(page.get(result_key, []))
        except (ClientError, BotoCoreError) as e:
            raise InventoryError(operation_name, e) from e
        return items

    def list_instances(self) -> list[Instance]:
        """Return every instance in the region, flattened across reservations."""
        reservations = self._paginate("describe_instances", "Reservations")
        return [
            Instance.from_api(instance)
            for reservation in reservations
            for instance in reservation.get("Instances", [])
        ]

    def list_volumes(
        self,
        volume_ids: list[str] | None = None,
        status: str | None = None,
    ) -> list[Volume]:
        """
        List volumes, optionally restricted by id or status.

        An empty volume id list returns no volumes without calling EC2.

        Args:
            volume_ids: Only describe these volumes
            status: Only volumes in this state (e.g. "available")

        Returns:
            List of Volume objects
        """
        if volume_ids is not None and not volume_ids:
            return []

        filters = []
        if volume_ids is not None:
            filters.append({"Name": "volume-id", "Values": list(volume_ids)})
        if status is not None:
            filters.append({"Name": "status", "Values": [status]})
        kwargs = {"Filters": filters} if filters else {}
        return [Volume.from_api(v) for v in self._paginate("describe_volumes", "Volumes", **kwargs)]

    def list_available_volumes(self) -> list[Volume]:
        """List volumes not attached to any instance."""
        return self.list_volumes(status=AVAILABLE_STATUS)

    def list_snapshots(
        self,
        volume_ids: list[str] | None = None,
        owner_self: bool = False,
    ) -> list[Snapshot]:
        """
        List snapshots by source volume ids or by owner.

        Volume id lists longer than the EC2 filter limit are split across
        several requests. An empty volume id list returns no snapshots
        without calling EC2.

        Args:
            volume_ids: Source volumes whose snapshots are wanted
            owner_self: Restrict to snapshots owned by the calling account

        Returns:
            List of Snapshot objects
        """
        base_kwargs: dict = {}
        if owner_self:
            base_kwargs["OwnerIds"] = [SELF_OWNER]

        if volume_ids is None:
            raw = self._paginate("describe_snapshots", "Snapshots", **base_kwargs)
            return [Snapshot.from_api(s) for s in raw]

        snapshots: list[Snapshot] = []
        for chunk in _chunked(list(volume_ids), FILTER_VALUES_LIMIT):
            raw = self._paginate(
                "describe_snapshots",
                "Snapshots",
                Filters=[{"Name": "volume-id", "Values": chunk}],
                **base_kwargs,
            )
            snapshots.extend(Snapshot.from_api(s) for s in raw)
        return snapshots

    def create_snapshot(self, volume_id: str, description: str) -> Snapshot:
        """Start a snapshot of the volume and return it as reported by EC2."""
        self._throttle.wait()
        try:
            response = self._client.create_snapshot(VolumeId=volume_id, Description=description)
        except (ClientError, BotoCoreError) as e:
            raise SnapshotCreationError(volume_id, e) from e
        response.setdefault("VolumeId", volume_id)
        return Snapshot.from_api(response)

    def tag_resource(self, resource_id: str, tags: Mapping[str, str]) -> None:
        """Assign the given tags to a resource."""
        self._throttle.wait()
        try:
            self._client.create_tags(Resources=[resource_id], Tags=dict_to_tags(tags))
        except (ClientError, BotoCoreError) as e:
            raise TaggingError(resource_id, e) from e

    def delete_snapshot(self, snapshot_id: str) -> None:
        """
        Delete a snapshot.

        Raises:
            SnapshotInUseError: EC2 answered with HTTP 400 (snapshot in use or
                not deletable in its current state)
            SnapshotDeletionError: Any other failure
        """
        self._throttle.wait()
        try:
            self._client.delete_snapshot(SnapshotId=snapshot_id)
        except ClientError as e:
            if is_bad_request(e):
                raise SnapshotInUseError(snapshot_id, e) from e
            raise SnapshotDeletionError(snapshot_id, e) from e
        except BotoCoreError as e:
            raise SnapshotDeletionError(snapshot_id, e) from e
