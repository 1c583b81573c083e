"""
Configuration for the EBS snapshot lifecycle tool.

Holds the tag conventions shared by backup and purge, API pacing defaults,
and the resolved run configuration handed to the orchestrator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

VERSION = "0.2.0"

# Provenance tag stamped on every snapshot this tool creates
CREATED_BY_TAG_KEY = "CreatedBy"
CREATED_BY_TAG_VALUE = "AutomatedBackup"

# Volume tags read during backup
NAME_TAG_KEY = "Name"
BACKUP_TAG_KEY = "Backup"
BACKUP_TAG_ENABLED_VALUE = "true"

AVAILABLE_STATUS = "available"
SELF_OWNER = "self"

# EC2 rejects filters carrying more values than this
FILTER_VALUES_LIMIT = 200

DEFAULT_API_DELAY_SECONDS = 0.2

REGION_ENV_VARS = ("AWS_DEFAULT_REGION", "AWS_REGION")


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing."""


@dataclass(frozen=True)
class RunConfig:
    """Resolved options for a single invocation."""

    region: str
    backup_enabled: bool = False
    tagged_only: bool = False
    purge_attached: bool = False
    purge_automated_only: bool = False
    purge_orphaned: bool = False
    purge_unattached: bool = False
    dry_run: bool = False
    api_delay: float = DEFAULT_API_DELAY_SECONDS

    @property
    def any_purge(self) -> bool:
        """Return True if at least one purge stage is enabled."""
        return self.purge_attached or self.purge_orphaned or self.purge_unattached


def resolve_region(region: str | None = None) -> str:
    """Return the explicit region, or the first one found in the environment.

    Raises:
        ConfigurationError: If no region is given or configured.
    """
    if region:
        return region
    for name in REGION_ENV_VARS:
        env_val = os.environ.get(name)
        if env_val:
            return env_val
    raise ConfigurationError(
        "No AWS region given. Pass REGION or set AWS_DEFAULT_REGION/AWS_REGION."
    )
