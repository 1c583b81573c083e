"""
EBS snapshot lifecycle package.

Create snapshots of volumes attached to EC2 instances and purge old snapshots
according to a generational retention policy.
"""

from .classifier import automated_only
from .config import RunConfig
from .gateway import Ec2Gateway
from .models import BlockDeviceMapping, Instance, RunSummary, Snapshot, Volume
from .orchestrator import SnapshotLifecycle
from .retention import should_keep
from .throttle import Throttle

__all__ = [
    "BlockDeviceMapping",
    "Ec2Gateway",
    "Instance",
    "RunConfig",
    "RunSummary",
    "Snapshot",
    "SnapshotLifecycle",
    "Throttle",
    "Volume",
    "automated_only",
    "should_keep",
]
