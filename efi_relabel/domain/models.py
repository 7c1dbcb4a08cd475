"""Domain model for boot entry relabelling.

Type-safe value objects for the data that flows through the relabel pipeline:
partitions read from sfdisk, boot entries read from efibootmgr, the resolved
disk location of a boot loader, and the final pair of efibootmgr commands.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


def normalize_uuid(value: str) -> str:
    """Return the canonical (stripped, lowercase) form of a partition uuid."""
    return value.strip().lower()


# ==============================================================================
# Partition Domain
# ==============================================================================


@dataclass(frozen=True)
class Partition:
    """A partition record from a disk's partition table."""

    device_path: str  # e.g., "/dev/sda1"
    uuid: str  # Always lowercase

    def __post_init__(self) -> None:
        object.__setattr__(self, "uuid", normalize_uuid(self.uuid))

    @classmethod
    def from_record(cls, device_path: str, uuid: str) -> Partition:
        return cls(device_path=device_path.strip(), uuid=uuid)


@dataclass
class PartitionIndex:
    """Partition uuid to device path mapping.

    Partition uuids are expected to be unique across the system. When one
    recurs anyway, the partition added last wins.
    """

    devices: dict[str, str] = field(default_factory=dict)

    def add(self, partition: Partition) -> Optional[str]:
        """Insert a partition and return the device path it replaced, if any."""
        previous = self.devices.get(partition.uuid)
        self.devices[partition.uuid] = partition.device_path
        return previous

    def lookup(self, uuid: str) -> Optional[str]:
        return self.devices.get(normalize_uuid(uuid))

    def __len__(self) -> int:
        return len(self.devices)


# ==============================================================================
# Boot Entry Domain
# ==============================================================================


@dataclass(frozen=True)
class BootEntry:
    """A firmware boot entry pointing at a loader on a GPT partition."""

    bootnum: str  # Four hex digits, e.g. "0001"
    label: str
    partition_index: int
    partition_uuid: str  # Always lowercase
    loader_path: str  # e.g. "\\EFI\\ubuntu\\shimx64.efi"
    active: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "partition_uuid", normalize_uuid(self.partition_uuid))


# ==============================================================================
# Device Domain
# ==============================================================================


class DeviceFamily(Enum):
    """Block device naming families with their partition-name patterns.

    See https://wiki.archlinux.org/title/Device_file#Block_device_names
    """

    SCSI = re.compile(r"^(/dev/sd[a-z]+)([0-9]+)$")  # /dev/sda1
    NVME = re.compile(r"^(/dev/nvme[0-9]+n[0-9]+)p?([0-9]+)$")  # /dev/nvme0n1p1
    MMC = re.compile(r"^(/dev/mmcblk[0-9]+)p?([0-9]+)$")  # /dev/mmcblk0p1

    @property
    def pattern(self) -> re.Pattern:
        return self.value

    def match(self, device_path: str) -> Optional[DeviceLocation]:
        match = self.pattern.match(device_path)
        if match is None:
            return None
        return DeviceLocation(
            family=self,
            disk_path=match.group(1),
            partition_number=int(match.group(2)),
        )


@dataclass(frozen=True)
class DeviceLocation:
    """A partition device path split into its disk and partition number."""

    family: DeviceFamily
    disk_path: str  # e.g., "/dev/nvme0n1"
    partition_number: int


# ==============================================================================
# Command Domain
# ==============================================================================


@dataclass(frozen=True)
class EfiCommand:
    """An efibootmgr invocation.

    ``argv`` is executed directly without a shell; ``display`` is the
    equivalent shell command line shown to the user before execution.
    """

    argv: tuple[str, ...]
    display: str

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class RenamePlan:
    """The validated delete-and-recreate pair for one boot entry."""

    entry: BootEntry
    location: DeviceLocation
    new_label: str
    delete_command: EfiCommand
    create_command: EfiCommand

    @property
    def commands(self) -> tuple[EfiCommand, EfiCommand]:
        return (self.delete_command, self.create_command)
