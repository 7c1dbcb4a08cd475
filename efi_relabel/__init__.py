"""Rename UEFI boot entries by deleting and re-creating them with efibootmgr."""

from .__version__ import __version__

__all__ = ["__version__"]
