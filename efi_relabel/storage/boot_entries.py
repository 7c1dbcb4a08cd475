"""Boot entry parsing and selection from ``efibootmgr --verbose`` output.

efibootmgr output differs slightly across distributions. Arch and Fedora print
the loader path bare after the hard drive device path, Ubuntu and Mint wrap it
in ``File(...)``::

    Boot0001* ubuntu	HD(1,GPT,2ffcc127-f6ce-40f0-9932-d1dfd14e9462,0x800,0x100000)/File(\\EFI\\ubuntu\\shimx64.efi)
    Boot0002* arch	HD(1,GPT,2ffcc127-f6ce-40f0-9932-d1dfd14e9462,0x800,0x100000)/\\EFI\\arch\\grubx64.efi

Both shapes parse into the same BootEntry. A loader path inside ``File(...)``
may contain balanced parentheses; a ``File(`` wrapper that cannot be closed is
skipped with a warning rather than registered under a truncated path.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from efi_relabel.config.settings import DEFAULT_WILDCARD_LABEL
from efi_relabel.domain import BootEntry
from efi_relabel.logging import LoggerFactory

from .exceptions import AmbiguousBootEntryError, BootEntryNotFoundError

log = LoggerFactory.for_efi()

WILDCARD_LABEL = DEFAULT_WILDCARD_LABEL

_ENTRY_PREFIX = (
    r"^Boot(?P<bootnum>[0-9A-Fa-f]{4})(?P<active>\*?)[ \t]+(?P<label>.+)[ \t]+"
    r"HD\((?P<part>[0-9]+),[^,]+,(?P<uuid>[^,]+)[^)]+\)/"
)

# alternative format: loader path wrapped in File(...); one level of balanced
# parentheses inside the path is allowed, e.g. File(\EFI\a(1)\b.efi)
BOOT_ENTRY_FILE_RE = re.compile(
    _ENTRY_PREFIX + r"File\((?P<loader>(?:[^()]|\([^()]*\))+)\)"
)

# standard efibootmgr: ends with loader path
BOOT_ENTRY_BARE_RE = re.compile(_ENTRY_PREFIX + r"(?P<loader>.+)$")

BOOT_ENTRY_PATTERNS = (BOOT_ENTRY_FILE_RE, BOOT_ENTRY_BARE_RE)

_FILE_WRAPPER = "File("


def parse_boot_entry(line: str) -> Optional[BootEntry]:
    line = line.rstrip("\r\n")
    for pattern in BOOT_ENTRY_PATTERNS:
        match = pattern.match(line)
        if match:
            loader_path = match.group("loader").rstrip()
            if pattern is BOOT_ENTRY_BARE_RE and loader_path.startswith(_FILE_WRAPPER):
                log.warning(
                    f"Skipping Boot{match.group('bootnum')}: cannot read loader path "
                    f"from {loader_path}"
                )
                return None
            return BootEntry(
                bootnum=match.group("bootnum"),
                label=match.group("label"),
                partition_index=int(match.group("part")),
                partition_uuid=match.group("uuid"),
                loader_path=loader_path,
                active=bool(match.group("active")),
            )
    return None


def parse_boot_entries(text: str) -> list[BootEntry]:
    """Parse every disk-backed boot entry, in firmware order."""
    entries = []
    for line in text.splitlines():
        entry = parse_boot_entry(line)
        if entry is not None:
            entries.append(entry)
    return entries


def _same_bootnum(left: str, right: str) -> bool:
    return left.upper() == right.upper()


def locate_boot_entry(
    entries: Iterable[BootEntry],
    target_label: str,
    target_bootnum: Optional[str] = None,
    *,
    wildcard: str = WILDCARD_LABEL,
) -> BootEntry:
    """Select the single boot entry to rename.

    Entries are scanned in order. The first entry whose label matches (any
    label when ``target_label`` is the wildcard) and whose bootnum matches
    ``target_bootnum`` when one is given becomes the candidate. Without a
    bootnum, a second matching entry is an ambiguity reported against the
    candidate and that second entry.

    Raises:
        AmbiguousBootEntryError: Two entries match and no bootnum was given
        BootEntryNotFoundError: Nothing matches
    """
    candidate: Optional[BootEntry] = None
    for entry in entries:
        if entry.label != target_label and target_label != wildcard:
            continue
        if candidate is None:
            if not target_bootnum or _same_bootnum(entry.bootnum, target_bootnum):
                candidate = entry
        elif not target_bootnum:
            raise AmbiguousBootEntryError(target_label, candidate.bootnum, entry.bootnum)
    if candidate is None:
        raise BootEntryNotFoundError(target_label, target_bootnum or None)
    log.debug(
        f"Target found: BootNum={candidate.bootnum}, Part={candidate.partition_index}, "
        f"UUID={candidate.partition_uuid}, Loader={candidate.loader_path}, "
        f"Active={candidate.active}"
    )
    return candidate
