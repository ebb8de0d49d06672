"""On-disk structures of the file system: header, inodes and directory entries."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .disk import NUM_SECTORS, SECTOR_SIZE

BLOCKSIZE = SECTOR_SIZE
NUMBLOCKS = NUM_SECTORS
INODESIZE = 64
NUM_DIRECT = 12
INODES_PER_BLOCK = BLOCKSIZE // INODESIZE
DIRNAMELEN = 30
ROOTINODE = 1
MAXPATHNAMELEN = 256
MAXSYMLINKS = 20
BLOCK_CACHESIZE = 32
INODE_CACHESIZE = 16
MAX_OPEN_FILES = 16

_HEADER = struct.Struct("<ii56x")
_INODE = struct.Struct(f"<hhii{NUM_DIRECT}ii")
_DIRENT = struct.Struct(f"<h{DIRNAMELEN}s")

DIR_ENTRY_SIZE = _DIRENT.size


class InodeType(IntEnum):
    """The kind of file an inode describes."""

    FREE = 0
    DIRECTORY = 1
    REGULAR = 2
    SYMLINK = 3


def _slice(data: bytes | bytearray | memoryview, size: int, what: str) -> bytes:
    raw = bytes(data[:size])
    if len(raw) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(raw)}")
    return raw


def _coerce_type(value: int) -> InodeType | int:
    try:
        return InodeType(value)
    except ValueError:
        return value


@dataclass
class FsHeader:
    """The file system header stored in place of inode 0."""

    num_blocks: int
    num_inodes: int

    def pack(self) -> bytes:
        return _HEADER.pack(self.num_blocks, self.num_inodes)

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "FsHeader":
        num_blocks, num_inodes = _HEADER.unpack(_slice(data, _HEADER.size, "header"))
        return cls(num_blocks, num_inodes)


@dataclass
class Inode:
    """A fixed-size inode record."""

    type: InodeType | int = InodeType.FREE
    nlink: int = 0
    reuse: int = 0
    size: int = 0
    direct: list[int] = field(default_factory=lambda: [0] * NUM_DIRECT)
    indirect: int = 0

    def pack(self) -> bytes:
        if len(self.direct) != NUM_DIRECT:
            raise ValueError(
                f"inode needs {NUM_DIRECT} direct block numbers, got {len(self.direct)}"
            )
        return _INODE.pack(
            int(self.type), self.nlink, self.reuse, self.size, *self.direct, self.indirect
        )

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "Inode":
        fields = _INODE.unpack(_slice(data, _INODE.size, "inode"))
        type_, nlink, reuse, size = fields[:4]
        direct = list(fields[4 : 4 + NUM_DIRECT])
        indirect = fields[4 + NUM_DIRECT]
        return cls(_coerce_type(type_), nlink, reuse, size, direct, indirect)


@dataclass
class DirEntry:
    """A directory entry; the name is stored without a terminating null."""

    inum: int
    name: str

    def pack(self) -> bytes:
        raw = self.name.encode("latin-1")
        if len(raw) > DIRNAMELEN:
            raise ValueError(
                f"directory entry name longer than {DIRNAMELEN} bytes: {self.name!r}"
            )
        return _DIRENT.pack(self.inum, raw)

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> "DirEntry":
        inum, raw = _DIRENT.unpack(_slice(data, _DIRENT.size, "directory entry"))
        return cls(inum, raw.split(b"\0", 1)[0].decode("latin-1"))


def inode_block(inum: int) -> int:
    """Return the number of the block that holds inode ``inum``."""
    return 1 + inum // INODES_PER_BLOCK


def inode_offset(inum: int) -> int:
    """Return the byte offset of inode ``inum`` within its block."""
    return (inum % INODES_PER_BLOCK) * INODESIZE