"""
Pytest configuration and shared fixtures for efi-relabel tests.

This module provides sample output of lsblk, sfdisk and efibootmgr as used
across all test modules.
"""

import subprocess
from typing import Dict
from unittest.mock import Mock

import pytest

from efi_relabel.config import settings


@pytest.fixture(autouse=True)
def default_settings():
    """Run every test against default settings, whatever the host has."""
    settings.settings_store.values = dict(settings.DEFAULT_SETTINGS)
    yield
    settings.settings_store.values = dict(settings.DEFAULT_SETTINGS)


# ==============================================================================
# Disk Fixtures
# ==============================================================================


@pytest.fixture
def lsblk_pairs_output() -> str:
    """Fixture providing `lsblk --nodeps --noheadings --pairs` output."""
    return (
        'NAME="sda" MAJ:MIN="8:0" RM="0" SIZE="238.5G" RO="0" TYPE="disk" MOUNTPOINT=""\n'
        'NAME="sr0" MAJ:MIN="11:0" RM="1" SIZE="1024M" RO="0" TYPE="rom" MOUNTPOINT=""\n'
        'NAME="nvme0n1" MAJ:MIN="259:0" RM="0" SIZE="476.9G" RO="0" TYPE="disk" MOUNTPOINT=""\n'
        'NAME="loop0" MAJ:MIN="7:0" RM="0" SIZE="55.4M" RO="1" TYPE="loop" MOUNTPOINT="/snap/core18/1"\n'
    )


@pytest.fixture
def sfdisk_dump_sda() -> str:
    """Fixture providing `sfdisk -d /dev/sda` output from Ubuntu 18.04."""
    return (
        "label: gpt\n"
        "label-id: 5B6D9F5E-4A43-4A5B-9D3C-8A6E0F7C1D22\n"
        "device: /dev/sda\n"
        "unit: sectors\n"
        "first-lba: 34\n"
        "last-lba: 500118158\n"
        "\n"
        "/dev/sda1 : start=        2048, size=     1048576, "
        "type=C12A7328-F81F-11D2-BA4B-00A0C93EC93B, "
        "uuid=2FFCC127-F6CE-40F0-9932-D1DFD14E9462, name=\"EFI System Partition\"\n"
        "/dev/sda2 : start=     1050624, size=   499067535, "
        "type=0FC63DAF-8483-4772-8E79-3D69D8477DE4, "
        "uuid=8E3A4E1B-77C4-4F5C-A0A7-0D0E8C9E5B11\n"
    )


@pytest.fixture
def sfdisk_dump_nvme() -> str:
    """Fixture providing `sfdisk -d /dev/nvme0n1` output."""
    return (
        "label: gpt\n"
        "device: /dev/nvme0n1\n"
        "\n"
        "/dev/nvme0n1p1 : start=        2048, size=      532480, "
        "type=C12A7328-F81F-11D2-BA4B-00A0C93EC93B, "
        "uuid=6A1F0C3B-9E2D-4B7A-8C55-1F2E3D4C5B6A, name=\"EFI\"\n"
        "/dev/nvme0n1p3 : start=      534528, size=   999680000, "
        "type=0FC63DAF-8483-4772-8E79-3D69D8477DE4, "
        "uuid=D4C3B2A1-0F9E-4D8C-B7A6-5F4E3D2C1B0A, name=\"root\"\n"
    )


@pytest.fixture
def partition_tables(sfdisk_dump_sda, sfdisk_dump_nvme) -> Dict[str, str]:
    return {"sda": sfdisk_dump_sda, "nvme0n1": sfdisk_dump_nvme}


# ==============================================================================
# EFI Fixtures
# ==============================================================================


@pytest.fixture
def efibootmgr_output() -> str:
    """Fixture providing `efibootmgr --verbose` output mixing both loader shapes."""
    return (
        "BootCurrent: 0001\n"
        "Timeout: 1 seconds\n"
        "BootOrder: 0001,0003,0000,0002\n"
        "Boot0000* Windows Boot Manager\tHD(1,GPT,6a1f0c3b-9e2d-4b7a-8c55-1f2e3d4c5b6a,0x800,0x82000)"
        "/File(\\EFI\\Microsoft\\Boot\\bootmgfw.efi)WINDOWS.........x...B.C.D.O.B.J.E.C.T.\n"
        "Boot0001* ubuntu\tHD(1,GPT,2ffcc127-f6ce-40f0-9932-d1dfd14e9462,0x800,0x100000)"
        "/File(\\EFI\\ubuntu\\shimx64.efi)\n"
        "Boot0002* UEFI: PXE IPv4 Intel(R) Ethernet\tPciRoot(0x0)/Pci(0x1f,0x6)/MAC(54e1ad000000,0)/IPv4(0.0.0.00.0.0.0,0,0)..BO\n"
        "Boot0003  Arch Linux\tHD(3,GPT,d4c3b2a1-0f9e-4d8c-b7a6-5f4e3d2c1b0a,0x82800,0x3b964000)"
        "/\\EFI\\arch\\grubx64.efi\n"
    )


# ==============================================================================
# Subprocess Mock Fixtures
# ==============================================================================


@pytest.fixture
def mock_subprocess_success(mocker) -> Mock:
    """
    Fixture providing a mock subprocess.run that always succeeds.

    Returns:
        Mock object for subprocess.run.
    """
    mock_result = Mock()
    mock_result.returncode = 0
    mock_result.stdout = ""
    mock_result.stderr = ""
    return mocker.patch("subprocess.run", return_value=mock_result)


@pytest.fixture
def mock_subprocess_failure(mocker) -> Mock:
    """
    Fixture providing a mock subprocess.run that always fails.

    Returns:
        Mock object for subprocess.run that raises CalledProcessError.
    """

    def raise_error(*args, **kwargs):
        raise subprocess.CalledProcessError(1, args[0], stderr="Mock error")

    return mocker.patch("subprocess.run", side_effect=raise_error)
