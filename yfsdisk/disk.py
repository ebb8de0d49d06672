"""A sector-addressed disk device kept in an ordinary file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO

SECTOR_SIZE = 512
NUM_SECTORS = 1426


class DiskError(Exception):
    """Raised when a sector access cannot be carried out."""


@dataclass
class DiskStats:
    """Counts of completed sector reads and writes."""

    reads: int = 0
    writes: int = 0


class Disk:
    """A fixed number of fixed-size sectors backed by a binary file object.

    Sectors past the end of the backing file read as zeros, the same way a
    hole in a sparse file does.
    """

    def __init__(self, fileobj: BinaryIO, num_sectors: int = NUM_SECTORS) -> None:
        if num_sectors <= 0:
            raise DiskError(f"disk must have at least one sector, got {num_sectors}")
        self._file = fileobj
        self.num_sectors = num_sectors
        self.stats = DiskStats()
        self.closed = False

    @classmethod
    def open(cls, path: str | os.PathLike[str], num_sectors: int = NUM_SECTORS) -> "Disk":
        """Open the disk image at ``path``, creating an empty one if it is missing."""
        try:
            fileobj = open(path, "r+b")
        except FileNotFoundError:
            fileobj = open(path, "w+b")
        except OSError as exc:
            raise DiskError(f"cannot open disk image {os.fspath(path)!r}: {exc}") from exc
        return cls(fileobj, num_sectors)

    def _check(self, num: int) -> None:
        if self.closed:
            raise DiskError("disk is closed")
        if not 0 <= num < self.num_sectors:
            raise DiskError(
                f"sector {num} out of range (disk has {self.num_sectors} sectors)"
            )

    def read_sector(self, num: int) -> bytes:
        """Return the contents of sector ``num``."""
        self._check(num)
        self._file.seek(num * SECTOR_SIZE)
        data = self._file.read(SECTOR_SIZE)
        self.stats.reads += 1
        return data.ljust(SECTOR_SIZE, b"\0")

    def write_sector(self, num: int, data: bytes | bytearray | memoryview) -> None:
        """Replace the contents of sector ``num`` with exactly one sector of data."""
        self._check(num)
        payload = bytes(data)
        if len(payload) != SECTOR_SIZE:
            raise DiskError(
                f"sector write needs {SECTOR_SIZE} bytes, got {len(payload)}"
            )
        self._file.seek(num * SECTOR_SIZE)
        self._file.write(payload)
        self._file.flush()
        self.stats.writes += 1

    def close(self) -> None:
        """Close the backing file; further access raises DiskError."""
        if not self.closed:
            self._file.close()
            self.closed = True

    def __enter__(self) -> "Disk":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()