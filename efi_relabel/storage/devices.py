"""Access to the system tools the relabel pipeline reads from and writes to.

Disk Enumeration:
    Uses ``lsblk --nodeps --noheadings --pairs`` and keeps only rows with
    ``TYPE="disk"``, in the order lsblk reports them.

Partition Tables:
    Uses ``sfdisk -d /dev/<disk>`` per disk. Disks without a recognized
    partition table (or that sfdisk cannot read) contribute nothing; the
    failure is logged and an empty string is returned so that other disks are
    still scanned.

Boot Entries:
    Uses ``efibootmgr --verbose``. Reading NVRAM must succeed, otherwise there
    is nothing to rename.

Mutation:
    apply_rename_plan() runs the delete and create commands of a RenamePlan,
    in that order, without a shell. A failed create after a successful delete
    is reported with the shell-quoted command that re-creates the entry.

Implementation Notes:
    - sfdisk and efibootmgr modifications require root
    - Tool paths are taken from settings (efibootmgr_path, sfdisk_path, lsblk_path)
"""
import re
import subprocess
from typing import List, Sequence

from efi_relabel.config import settings
from efi_relabel.domain import EfiCommand, RenamePlan
from efi_relabel.logging import LoggerFactory, get_logger

from .exceptions import CommandExecutionError, IncompleteRenameError

log = LoggerFactory.for_disks()
log_efi = LoggerFactory.for_efi()
log_output = get_logger(source="disks", tags=["disks", "tool-output"])

_LSBLK_DISK_NAME_RE = re.compile(r'^NAME="([^"]+)"')
_LSBLK_TYPE_DISK = 'TYPE="disk"'
_SFDISK_PARTITION_MARKER = ": start="


def run_command(command: Sequence[str], check: bool = True) -> subprocess.CompletedProcess:
    command = list(command)
    log.debug(f"Running command: {' '.join(command)}")
    try:
        result = subprocess.run(command, check=check, text=True, capture_output=True)
    except subprocess.CalledProcessError as error:
        log.debug(f"Command failed: {' '.join(command)}")
        if error.stdout:
            log_output.trace(f"stdout: {error.stdout.strip()}")
        if error.stderr:
            log_output.debug(f"stderr: {error.stderr.strip()}")
        raise
    if result.stdout:
        log_output.trace(f"stdout: {result.stdout.strip()}")
    if result.stderr:
        log_output.trace(f"stderr: {result.stderr.strip()}")
    log.debug(f"Command completed with return code {result.returncode}")
    return result


def list_disk_names() -> List[str]:
    """Return the names (e.g. ``sda``, ``nvme0n1``) of all whole-disk devices."""
    command = [settings.get_tool("lsblk"), "--nodeps", "--noheadings", "--pairs"]
    try:
        result = run_command(command)
    except (OSError, subprocess.CalledProcessError) as error:
        raise CommandExecutionError(command, _describe_failure(error)) from error
    names = []
    for line in result.stdout.splitlines():
        if _LSBLK_TYPE_DISK not in line:
            continue
        match = _LSBLK_DISK_NAME_RE.match(line)
        if match:
            names.append(match.group(1))
            log.debug(f"Found disk: {match.group(1)}")
    return names


def read_partition_table(disk_name: str) -> str:
    """Return the partition lines of ``sfdisk -d`` for a disk, or "" if unreadable."""
    command = [settings.get_tool("sfdisk"), "-d", f"/dev/{disk_name}"]
    log.debug(f"Scanning disk /dev/{disk_name} for partitions...")
    try:
        result = run_command(command)
    except (OSError, subprocess.CalledProcessError) as error:
        # e.g. "sfdisk: /dev/sdb: does not contain a recognized partition table"
        log.debug(f"No partition table read from /dev/{disk_name}: {_describe_failure(error)}")
        return ""
    lines = [line for line in result.stdout.splitlines() if _SFDISK_PARTITION_MARKER in line]
    return "\n".join(lines)


def read_boot_entries() -> str:
    """Return the raw ``efibootmgr --verbose`` listing."""
    command = [settings.get_tool("efibootmgr"), "--verbose"]
    log_efi.debug("Scanning EFI boot entries...")
    try:
        result = run_command(command)
    except (OSError, subprocess.CalledProcessError) as error:
        raise CommandExecutionError(command, _describe_failure(error)) from error
    return result.stdout


def apply_rename_plan(plan: RenamePlan) -> None:
    """Delete the old boot entry and create its renamed replacement.

    Raises:
        CommandExecutionError: The delete step failed; NVRAM is unchanged
        IncompleteRenameError: The entry was deleted but the create step failed
    """
    _execute(plan.delete_command)
    try:
        _execute(plan.create_command)
    except CommandExecutionError as error:
        log_efi.error(f"Boot entry {plan.entry.bootnum} deleted but not re-created")
        raise IncompleteRenameError(
            plan.entry.bootnum,
            plan.create_command.display,
            error.reason,
            returncode=error.returncode,
        ) from error


def _execute(command: EfiCommand) -> None:
    log_efi.info(f"... executing `{command.display}` ...")
    try:
        result = run_command(command.argv, check=False)
    except OSError as error:
        raise CommandExecutionError(command.argv, str(error)) from error
    if result.returncode != 0:
        message = result.stderr.strip() or result.stdout.strip() or "Command failed"
        raise CommandExecutionError(command.argv, message, returncode=result.returncode)


def _describe_failure(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        stderr = (error.stderr or "").strip()
        return stderr or f"exit status {error.returncode}"
    return str(error)
