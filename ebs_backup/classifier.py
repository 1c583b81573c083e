"""Separate snapshots created by this tool from manually created ones."""

from __future__ import annotations

from typing import Iterable

from .models import Snapshot


def automated_only(snapshots: Iterable[Snapshot]) -> list[Snapshot]:
    """Return the snapshots tagged CreatedBy=AutomatedBackup, in input order."""
    return [snapshot for snapshot in snapshots if snapshot.is_automated]
