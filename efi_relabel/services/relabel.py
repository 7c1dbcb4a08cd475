from __future__ import annotations

from typing import Callable, Iterable, Optional

from efi_relabel.config import settings
from efi_relabel.domain import RenamePlan
from efi_relabel.logging import operation_context
from efi_relabel.storage import devices
from efi_relabel.storage.boot_entries import locate_boot_entry, parse_boot_entries
from efi_relabel.storage.commands import build_rename_plan
from efi_relabel.storage.partitions import build_partition_index
from efi_relabel.storage.validation import validate_entry_device


def resolve_rename_plan(
    old_label: str,
    new_label: str,
    bootnum: Optional[str] = None,
    *,
    list_disks: Optional[Callable[[], Iterable[str]]] = None,
    read_partition_table: Optional[Callable[[str], str]] = None,
    read_boot_entries: Optional[Callable[[], str]] = None,
) -> RenamePlan:
    """Work out the efibootmgr commands that rename a boot entry.

    Each step must succeed before the next one runs; any RelabelError raised
    along the way means no command may be executed.
    """
    list_disks = list_disks or devices.list_disk_names
    read_partition_table = read_partition_table or devices.read_partition_table
    read_boot_entries = read_boot_entries or devices.read_boot_entries

    with operation_context("relabel", old_label=old_label, bootnum=bootnum or "-") as log:
        disk_names = list(list_disks())
        index = build_partition_index(disk_names, read_partition_table)

        entries = parse_boot_entries(read_boot_entries())
        log.debug(f"Parsed {len(entries)} disk-backed boot entries")
        entry = locate_boot_entry(
            entries,
            old_label,
            bootnum,
            wildcard=settings.get_wildcard_label(),
        )

        location = validate_entry_device(entry, index)
        return build_rename_plan(
            entry,
            location,
            new_label,
            executable=settings.get_tool("efibootmgr"),
        )
