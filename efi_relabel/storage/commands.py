"""efibootmgr command construction for renaming a boot entry.

Renaming is a delete followed by a create with the same disk, partition and
loader. Nothing here executes anything; see devices.apply_rename_plan().
"""
import shlex

from efi_relabel.domain import BootEntry, DeviceLocation, EfiCommand, RenamePlan

EFIBOOTMGR = "efibootmgr"


def build_delete_command(bootnum: str, executable: str = EFIBOOTMGR) -> EfiCommand:
    argv = (executable, "--bootnum", bootnum, "--delete-bootnum")
    return EfiCommand(argv=argv, display=" ".join(argv))


def build_create_command(
    disk_path: str,
    partition_number: int,
    new_label: str,
    loader_path: str,
    executable: str = EFIBOOTMGR,
) -> EfiCommand:
    """Build the command that recreates the entry under its new label.

    The label is shown single-quoted as given; the loader path is shell-quoted
    so backslashes, spaces and metacharacters are kept literally.
    """
    argv = (
        executable,
        "--create",
        "--disk",
        disk_path,
        "--part",
        str(partition_number),
        "--label",
        new_label,
        "--loader",
        loader_path,
    )
    display = (
        f"{executable} --create --disk {disk_path} --part {partition_number} "
        f"--label '{new_label}' --loader {shlex.quote(loader_path)}"
    )
    return EfiCommand(argv=argv, display=display)


def build_rename_plan(
    entry: BootEntry,
    location: DeviceLocation,
    new_label: str,
    executable: str = EFIBOOTMGR,
) -> RenamePlan:
    return RenamePlan(
        entry=entry,
        location=location,
        new_label=new_label,
        delete_command=build_delete_command(entry.bootnum, executable),
        create_command=build_create_command(
            location.disk_path,
            entry.partition_index,
            new_label,
            entry.loader_path,
            executable,
        ),
    )
