import argparse
import os
import sys
from pathlib import Path

from efi_relabel.config import settings
from efi_relabel.logging import LoggerFactory, setup_logging
from efi_relabel.services.relabel import resolve_rename_plan
from efi_relabel.storage import devices
from efi_relabel.storage.exceptions import CommandError, PrivilegeError, RelabelError

PROG = "efi-relabel"

log = LoggerFactory.for_system()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Rename an existing EFI boot entry by deleting it and re-creating "
            "it with the required label."
        ),
    )
    parser.add_argument(
        "existing_label",
        nargs="?",
        help="Label of the boot entry to rename, or '*' to match any label",
    )
    parser.add_argument("new_label", nargs="?", help="New label for the boot entry")
    parser.add_argument(
        "bootnum",
        nargs="?",
        help="Four hex digit boot number, required when several entries share a label",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Also log raw output of system tools")
    parser.add_argument(
        "--test",
        action="store_true",
        help="Verify and print the commands without executing them",
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    return parser


def print_usage() -> None:
    print("Usage:")
    print(f"  sudo {PROG} existing_efi_label new_efi_label [bootnum]")
    print("Example:")
    print(f"  sudo {PROG} ubuntu 'ubuntu 18.04'")
    print("Example:")
    print(f"  sudo {PROG} ubuntu 'ubuntu 18.04' 0001")
    print("Example:")
    print(f"  sudo {PROG} '*' 'ubuntu 18.04' 0001")


def print_usage_and_efi_data() -> None:
    print_usage()
    print()
    print("Current EFI data:")
    try:
        print(devices.read_boot_entries().rstrip("\n"))
    except CommandError as error:
        print(f"  (unavailable: {error})")


def report_error(message) -> None:
    print(f"{PROG} : ERROR : {message}", file=sys.stderr)


def is_root() -> bool:
    return os.geteuid() == 0


def confirm(prompt: str = "Execute these commands? [y/N] ") -> bool:
    try:
        reply = input(prompt)
    except EOFError:
        return False
    return reply.strip() in ("y", "Y")


def _setup_logging(args: argparse.Namespace) -> None:
    log_dir = args.log_dir
    if log_dir is None and settings.get_setting("log_dir"):
        log_dir = Path(settings.get_setting("log_dir"))
    try:
        setup_logging(debug=args.debug, trace=args.trace, log_dir=log_dir)
    except OSError as error:
        setup_logging(debug=args.debug, trace=args.trace, file_logging=False)
        log.warning(f"File logging disabled: {error}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args)

    if not is_root():
        report_error(PrivilegeError())
        print_usage_and_efi_data()
        return 1

    if not args.new_label:
        if not args.existing_label:
            report_error("no existing EFI label specified to be renamed")
            print_usage_and_efi_data()
        else:
            report_error("no new EFI label specified")
            print_usage()
        return 1

    if args.test:
        print(f"{PROG} : INFO : test mode enabled; no commands will be executed, only verification and dry run")

    try:
        plan = resolve_rename_plan(args.existing_label, args.new_label, args.bootnum)
    except RelabelError as error:
        log.debug(f"Rename refused: {type(error).__name__}")
        report_error(error)
        return 1

    print("The following commands are about to be executed:")
    for command in plan.commands:
        print(f"  {command.display}")

    if args.test:
        print(f"{PROG} : INFO : test mode; command execution skipped")
        return 0

    if not args.yes and not confirm():
        print(f"{PROG} : INFO : command execution aborted")
        return 0

    try:
        devices.apply_rename_plan(plan)
    except CommandError as error:
        log.error(str(error))
        report_error(error)
        return 1

    log.success(
        f"Boot entry {plan.entry.bootnum} '{plan.entry.label}' renamed to '{plan.new_label}'"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
