"""Partition uuid index built from sfdisk dumps.

Parses ``sfdisk -d`` partition lines such as::

    /dev/sda1 : start=2048, size=1048576, type=C12A7328-F81F-11D2-BA4B-00A0C93EC93B, uuid=2FFCC127-F6CE-40F0-9932-D1DFD14E9462, name="EFI System Partition"

into Partition records and accumulates them, disk by disk, into a
PartitionIndex keyed by lowercase uuid.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable

from efi_relabel.domain import Partition, PartitionIndex
from efi_relabel.logging import LoggerFactory

log = LoggerFactory.for_disks()

SFDISK_UUID_RE = re.compile(r"^([^ \t]+)[ \t]:[ \t].*[ \t]uuid=([^,]+)")


def parse_partition_records(text: str) -> list[Partition]:
    """Extract partitions carrying a uuid from sfdisk dump text."""
    partitions = []
    for line in text.splitlines():
        match = SFDISK_UUID_RE.match(line)
        if match:
            partitions.append(Partition.from_record(match.group(1), match.group(2)))
    return partitions


def build_partition_index(
    disk_names: Iterable[str],
    read_partition_table: Callable[[str], str],
) -> PartitionIndex:
    """Map every partition uuid on the given disks to its device path.

    Disks are read in the order given; a uuid seen again on a later disk
    replaces the earlier mapping.
    """
    log.debug("Mapping partition UUIDs to device names...")
    index = PartitionIndex()
    for disk_name in disk_names:
        text = read_partition_table(disk_name) or ""
        for partition in parse_partition_records(text):
            previous = index.add(partition)
            if previous is not None and previous != partition.device_path:
                log.debug(
                    f"UUID {partition.uuid} seen on both {previous} and "
                    f"{partition.device_path}; keeping {partition.device_path}"
                )
            log.debug(f"Mapped UUID {partition.uuid} to {partition.device_path}")
    if not len(index):
        log.warning("Could not find any partitions with UUIDs via sfdisk.")
    return index
