"""Create an empty file system image in a disk file."""

from __future__ import annotations

import os
import re
import sys
from typing import Sequence

from .layout import (
    BLOCKSIZE,
    DIR_ENTRY_SIZE,
    INODES_PER_BLOCK,
    INODESIZE,
    NUMBLOCKS,
    ROOTINODE,
    DirEntry,
    FsHeader,
    Inode,
    InodeType,
)

DISK_FILE_NAME = "DISK"
DEFAULT_NUM_INODES = 6 * INODES_PER_BLOCK - 1
USAGE = "usage: mkyfs [num_inodes]"

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def build_image(num_inodes: int = DEFAULT_NUM_INODES) -> bytes:
    """Return the bytes of a whole disk holding an empty file system.

    Block 0 is the boot block, the inode blocks follow it, and the root
    directory's single data block comes right after the inodes.
    """
    if num_inodes < ROOTINODE:
        raise ValueError(f"need at least {ROOTINODE} inode, got {num_inodes}")
    inode_area = (num_inodes + 1) * INODESIZE
    inode_area = (inode_area + BLOCKSIZE - 1) // BLOCKSIZE * BLOCKSIZE
    root_block = inode_area // BLOCKSIZE + 1
    if root_block >= NUMBLOCKS - 1:
        raise ValueError(f"{num_inodes} inodes do not fit on a {NUMBLOCKS}-block disk")

    image = bytearray(NUMBLOCKS * BLOCKSIZE)

    header = FsHeader(num_blocks=NUMBLOCKS, num_inodes=num_inodes).pack()
    image[BLOCKSIZE : BLOCKSIZE + INODESIZE] = header

    root = Inode(type=InodeType.DIRECTORY, nlink=2, reuse=1, size=2 * DIR_ENTRY_SIZE)
    root.direct[0] = root_block
    start = BLOCKSIZE + ROOTINODE * INODESIZE
    image[start : start + INODESIZE] = root.pack()

    entries = DirEntry(ROOTINODE, ".").pack() + DirEntry(ROOTINODE, "..").pack()
    start = root_block * BLOCKSIZE
    image[start : start + len(entries)] = entries
    return bytes(image)


def make_filesystem(
    path: str | os.PathLike[str] = DISK_FILE_NAME, num_inodes: int = DEFAULT_NUM_INODES
) -> None:
    """Write an empty file system image to ``path``, replacing any existing file."""
    image = build_image(num_inodes)
    try:
        with open(path, "wb") as disk:
            disk.write(image)
    except OSError:
        try:
            os.unlink(path)
        except OSError:
            pass
        raise


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: ``mkyfs [num_inodes]`` creates ./DISK."""
    args = list(sys.argv[1:] if argv is None else argv)
    num_inodes = DEFAULT_NUM_INODES
    if args:
        match = _LEADING_INT.match(args[0])
        if match is None:
            print(USAGE, file=sys.stderr)
            return 1
        num_inodes = int(match.group())
    try:
        make_filesystem(DISK_FILE_NAME, num_inodes)
    except ValueError as exc:
        print(f"mkyfs: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{DISK_FILE_NAME}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    return 0