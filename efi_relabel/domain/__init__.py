"""Domain models for boot entry relabelling."""

from __future__ import annotations

from .models import (
    BootEntry,
    DeviceFamily,
    DeviceLocation,
    EfiCommand,
    Partition,
    PartitionIndex,
    RenamePlan,
    normalize_uuid,
)


__all__ = [
    "BootEntry",
    "DeviceFamily",
    "DeviceLocation",
    "EfiCommand",
    "Partition",
    "PartitionIndex",
    "RenamePlan",
    "normalize_uuid",
]
