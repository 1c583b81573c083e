"""
Exceptions for the EBS snapshot lifecycle tool.
"""


class SnapshotLifecycleError(RuntimeError):
    """Base class for every error that aborts a run."""


class CredentialLoadError(SnapshotLifecycleError):
    """Raised when AWS credentials cannot be loaded."""


class InventoryError(SnapshotLifecycleError):
    """Raised when listing instances, volumes or snapshots fails."""

    def __init__(self, operation: str, error: Exception):
        super().__init__(f"Error during {operation}: {str(error)}")
        self.operation = operation


class SnapshotCreationError(SnapshotLifecycleError):
    """Raised when creating or tagging a snapshot fails."""

    def __init__(self, volume_id: str, error: Exception):
        super().__init__(f"Error creating snapshot for volume {volume_id}: {str(error)}")
        self.volume_id = volume_id


class SnapshotDeletionError(SnapshotLifecycleError):
    """Raised when deleting a snapshot fails."""

    def __init__(self, snapshot_id: str, error: Exception):
        super().__init__(f"Error deleting snapshot {snapshot_id}: {str(error)}")
        self.snapshot_id = snapshot_id


class SnapshotInUseError(SnapshotDeletionError):
    """Raised when EC2 rejects a deletion with a bad-request status.

    The snapshot is in use (for example by a registered AMI) or otherwise not
    deletable in its current state. Callers skip it and carry on.
    """


class TaggingError(SnapshotLifecycleError):
    """Raised when assigning tags to a resource fails."""

    def __init__(self, resource_id: str, error: Exception):
        super().__init__(f"Error tagging {resource_id}: {str(error)}")
        self.resource_id = resource_id
