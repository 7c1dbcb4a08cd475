"""Consistency checks between a boot entry and the partitions on disk.

A boot entry is only safe to recreate when the partition its uuid refers to
is attached, has a recognizable device name, and sits at the same partition
number the entry records. All validation functions raise specific exceptions
from the exceptions module rather than returning boolean values.

Example:
    from efi_relabel.storage.validation import validate_entry_device

    location = validate_entry_device(entry, index)
    # location.disk_path == "/dev/sda", location.partition_number == 1
"""

from efi_relabel.domain import BootEntry, DeviceFamily, DeviceLocation, PartitionIndex
from efi_relabel.logging import LoggerFactory

from .exceptions import DeviceFormatError, PartitionMismatchError, UnknownPartitionError

log = LoggerFactory.for_disks()


def decompose_device_path(device_path: str) -> DeviceLocation:
    """Split a partition device path into its disk and partition number.

    Raises:
        DeviceFormatError: If the path belongs to no known device family
    """
    for family in DeviceFamily:
        location = family.match(device_path)
        if location is not None:
            return location
    raise DeviceFormatError(device_path)


def resolve_partition_device(entry: BootEntry, index: PartitionIndex) -> str:
    """Return the device path of the partition a boot entry points at.

    Raises:
        UnknownPartitionError: If no attached partition has the entry's uuid
    """
    device_path = index.lookup(entry.partition_uuid)
    if device_path is None:
        raise UnknownPartitionError(entry.label, entry.partition_uuid)
    log.debug(f"Partition UUID {entry.partition_uuid} corresponds to device {device_path}")
    return device_path


def validate_partition_number(location: DeviceLocation, entry: BootEntry, device_path: str) -> None:
    """Validate that the on-disk partition number matches the boot entry.

    Raises:
        PartitionMismatchError: If the numbers differ
    """
    if location.partition_number != entry.partition_index:
        raise PartitionMismatchError(device_path, location.partition_number, entry.partition_index)


def validate_entry_device(entry: BootEntry, index: PartitionIndex) -> DeviceLocation:
    """Run every device consistency check for a boot entry.

    Returns:
        The disk location of the entry's partition
    """
    device_path = resolve_partition_device(entry, index)
    location = decompose_device_path(device_path)
    validate_partition_number(location, entry, device_path)
    return location
