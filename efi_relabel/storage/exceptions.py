"""Custom exceptions for boot entry relabelling.

This module defines a hierarchy of exceptions so that every reason for refusing
to rename a boot entry has its own type and a distinguishing message.

Exception Hierarchy:
    RelabelError (base)
        ├── BootEntryError
        │   ├── BootEntryNotFoundError
        │   └── AmbiguousBootEntryError
        ├── PartitionError
        │   ├── UnknownPartitionError
        │   ├── DeviceFormatError
        │   └── PartitionMismatchError
        ├── CommandError
        │   ├── CommandExecutionError
        │   └── IncompleteRenameError
        └── PrivilegeError

Usage:
    from efi_relabel.storage.exceptions import UnknownPartitionError

    if device_path is None:
        raise UnknownPartitionError(label, entry.partition_uuid)
"""

import shlex
from typing import Optional, Sequence


class RelabelError(Exception):
    """Base exception for all relabel failures."""



class BootEntryError(RelabelError):
    """Base exception for boot entry lookup errors."""



class BootEntryNotFoundError(BootEntryError):
    """No boot entry matches the requested label and bootnum."""

    def __init__(self, label: str, bootnum: Optional[str] = None):
        self.label = label
        self.bootnum = bootnum
        msg = f"no EFI data found for any label matching '{label}'"
        if bootnum:
            msg += f" with bootnum {bootnum}"
        super().__init__(msg)


class AmbiguousBootEntryError(BootEntryError):
    """More than one boot entry matches the label and no bootnum was given."""

    def __init__(self, label: str, first_bootnum: str, second_bootnum: str):
        self.label = label
        self.first_bootnum = first_bootnum
        self.second_bootnum = second_bootnum
        super().__init__(
            f"more than one boot entry found with label matching '{label}': "
            f"{first_bootnum} and {second_bootnum}; "
            f"please use optional 'bootnum' command line argument to resolve this ambiguity"
        )


class PartitionError(RelabelError):
    """Base exception for partition consistency errors."""



class UnknownPartitionError(PartitionError):
    """The boot entry refers to a partition uuid the system does not know."""

    def __init__(self, label: str, partition_uuid: str):
        self.label = label
        self.partition_uuid = partition_uuid
        super().__init__(
            f"EFI label '{label}' is related to partition '{partition_uuid}' "
            f"that is not currently known to the system"
        )


class DeviceFormatError(PartitionError):
    """A partition device path matches none of the known device families."""

    def __init__(self, device_path: str):
        self.device_path = device_path
        super().__init__(
            f"unexpected device name format '{device_path}' found by 'sfdisk' "
            f"for partition that relates to the given label"
        )


class PartitionMismatchError(PartitionError):
    """On-disk partition number disagrees with the boot entry."""

    def __init__(self, device_path: str, device_partition: int, entry_partition: int):
        self.device_path = device_path
        self.device_partition = device_partition
        self.entry_partition = entry_partition
        super().__init__(
            f"partition number of the device [{device_partition}] is different "
            f"from partition number in the EFI entry [{entry_partition}]"
        )


class CommandError(RelabelError):
    """Base exception for external tool failures."""



class CommandExecutionError(CommandError):
    """An external command exited with an error or could not be started."""

    def __init__(self, command: Sequence[str], message: str, returncode: Optional[int] = None):
        self.command = list(command)
        self.returncode = returncode
        self.reason = message
        super().__init__(f"Command failed ({shlex.join(self.command)}): {message}")


class IncompleteRenameError(CommandError):
    """The old boot entry was deleted but its replacement could not be created."""

    def __init__(self, bootnum: str, create_command: str, reason: str,
                 returncode: Optional[int] = None):
        self.bootnum = bootnum
        self.create_command = create_command
        self.reason = reason
        self.returncode = returncode
        super().__init__(
            f"boot entry {bootnum} was deleted but re-creating it failed: {reason}; "
            f"re-create it manually with: {create_command}"
        )


class PrivilegeError(RelabelError):
    """The process lacks the privileges needed to touch NVRAM."""

    def __init__(self, message: str = "this script must be run as root"):
        super().__init__(message)
