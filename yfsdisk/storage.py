"""Cached access to the blocks and inodes of a file system on a disk."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Optional

from .bitmap import Bitmap
from .cache import LRUCache
from .disk import Disk
from .layout import (
    BLOCK_CACHESIZE,
    BLOCKSIZE,
    INODE_CACHESIZE,
    INODESIZE,
    NUM_DIRECT,
    ROOTINODE,
    FsHeader,
    Inode,
    InodeType,
    inode_block,
    inode_offset,
)

log = logging.getLogger(__name__)

_BLOCK_NUM = struct.Struct("<i")
POINTERS_PER_BLOCK = BLOCKSIZE // _BLOCK_NUM.size
MAX_FILE_BLOCKS = NUM_DIRECT + POINTERS_PER_BLOCK
MAX_FILE_SIZE = MAX_FILE_BLOCKS * BLOCKSIZE


class FileSystemError(Exception):
    """Raised when the file system cannot carry out an operation."""


class NoSpaceError(FileSystemError):
    """Raised when no free block or inode is left."""


@dataclass(eq=False)
class CachedBlock:
    """A disk block held in the block cache."""

    num: int
    data: bytearray
    dirty: bool = False


@dataclass(eq=False)
class CachedInode:
    """An inode held in the inode cache."""

    inum: int
    inode: Inode
    dirty: bool = False


def _blocks_for(size: int) -> int:
    return max(0, (size + BLOCKSIZE - 1) // BLOCKSIZE)


class BlockStore:
    """Blocks and inodes of a file system, with LRU caches and free maps.

    Opening the store reads the file system header and scans every inode to
    rebuild the maps of used blocks and inodes.
    """

    def __init__(self, disk: Disk) -> None:
        self.disk = disk
        self._blocks: LRUCache[int, CachedBlock] = LRUCache(
            BLOCK_CACHESIZE, self._write_back_block
        )
        self._inodes: LRUCache[int, CachedInode] = LRUCache(
            INODE_CACHESIZE, self._write_back_inode
        )

        header = FsHeader.unpack(disk.read_sector(inode_block(0)))
        if header.num_inodes < ROOTINODE:
            raise FileSystemError(f"bad inode count in header: {header.num_inodes}")
        if not 0 < header.num_blocks <= disk.num_sectors:
            raise FileSystemError(
                f"bad block count in header: {header.num_blocks} "
                f"(disk has {disk.num_sectors} sectors)"
            )
        self.num_blocks = header.num_blocks
        self.num_inodes = header.num_inodes
        self.inode_blocks = (
            (self.num_inodes + 1) * INODESIZE + BLOCKSIZE - 1
        ) // BLOCKSIZE
        if self.inode_blocks + 1 > self.num_blocks:
            raise FileSystemError("inode area does not fit in the file system")

        self.block_bitmap = Bitmap(self.num_blocks)
        self.inode_bitmap = Bitmap(self.num_inodes + 1)
        for num in range(self.inode_blocks + 1):
            self.block_bitmap.set_used(num)
        self.inode_bitmap.set_used(0)
        self._scan_inodes()

    def _scan_inodes(self) -> None:
        for inum in range(1, self.num_inodes + 1):
            inode = self._read_inode(inum)
            if inode.type == InodeType.FREE:
                continue
            self.inode_bitmap.set_used(inum)
            try:
                blocks = self._file_blocks(inode)
            except FileSystemError as exc:
                log.warning("inode %d: %s", inum, exc)
                continue
            for num in blocks:
                if self._is_data_block(num):
                    self.block_bitmap.set_used(num)
                else:
                    log.warning("inode %d: block number %d out of range", inum, num)

    def _is_data_block(self, num: int) -> bool:
        return self.inode_blocks < num < self.num_blocks

    def _file_blocks(self, inode: Inode) -> list[int]:
        """Return the data blocks of ``inode``, with its indirect block if used."""
        count = min(_blocks_for(inode.size), MAX_FILE_BLOCKS)
        blocks = list(inode.direct[: min(count, NUM_DIRECT)])
        if count > NUM_DIRECT:
            if not self._is_data_block(inode.indirect):
                raise FileSystemError(
                    f"indirect block number {inode.indirect} out of range"
                )
            data = self.get_block(inode.indirect).data
            used = bytes(data[: (count - NUM_DIRECT) * _BLOCK_NUM.size])
            blocks.append(inode.indirect)
            blocks.extend(num for (num,) in _BLOCK_NUM.iter_unpack(used))
        return blocks

    def _check_inum(self, inum: int) -> None:
        if not 1 <= inum <= self.num_inodes:
            raise FileSystemError(
                f"inode {inum} out of range (file system has {self.num_inodes})"
            )

    def _read_inode(self, inum: int) -> Inode:
        block = self.get_block(inode_block(inum))
        offset = inode_offset(inum)
        return Inode.unpack(block.data[offset : offset + INODESIZE])

    def _store_inode(self, entry: CachedInode) -> None:
        block = self.get_block(inode_block(entry.inum))
        offset = inode_offset(entry.inum)
        block.data[offset : offset + INODESIZE] = entry.inode.pack()
        block.dirty = True
        entry.dirty = False

    def _write_back_inode(self, inum: int, entry: CachedInode) -> None:
        if entry.dirty:
            self._store_inode(entry)

    def _write_back_block(self, num: int, block: CachedBlock) -> None:
        if block.dirty:
            self.disk.write_sector(num, block.data)
            block.dirty = False

    def _allocate_block(self) -> int:
        num = self.block_bitmap.find_free()
        if num is None:
            raise NoSpaceError("no free blocks")
        self.block_bitmap.set_used(num)
        self._blocks.put(num, CachedBlock(num, bytearray(BLOCKSIZE), dirty=True))
        return num

    def get_block(self, num: int) -> CachedBlock:
        """Return block ``num`` from the cache, reading it from disk if needed."""
        if not 0 <= num < self.num_blocks:
            raise FileSystemError(
                f"block {num} out of range (file system has {self.num_blocks})"
            )
        cached = self._blocks.get(num)
        if cached is None:
            cached = CachedBlock(num, bytearray(self.disk.read_sector(num)))
            self._blocks.put(num, cached)
        return cached

    def get_inode(self, inum: int) -> Optional[CachedInode]:
        """Return inode ``inum``, or None if it is free on disk."""
        self._check_inum(inum)
        cached = self._inodes.get(inum)
        if cached is not None:
            return cached
        inode = self._read_inode(inum)
        if inode.type == InodeType.FREE:
            return None
        entry = CachedInode(inum, inode)
        self._inodes.put(inum, entry)
        return entry

    def new_inode(self) -> CachedInode:
        """Reserve the lowest free inode and return it; its fields are as on disk."""
        inum = self.inode_bitmap.find_free()
        if inum is None:
            raise NoSpaceError("no free inodes")
        entry = CachedInode(inum, self._read_inode(inum))
        self.inode_bitmap.set_used(inum)
        self._inodes.put(inum, entry)
        return entry

    def extend(self, entry: CachedInode, newsize: int) -> None:
        """Grow the file of ``entry`` to ``newsize`` bytes, allocating zeroed blocks."""
        inode = entry.inode
        if newsize < inode.size:
            raise FileSystemError(
                f"cannot shrink file from {inode.size} to {newsize} bytes"
            )
        if newsize > MAX_FILE_SIZE:
            raise FileSystemError(
                f"file size {newsize} exceeds the maximum of {MAX_FILE_SIZE} bytes"
            )
        used = _blocks_for(inode.size)
        needed = _blocks_for(newsize)
        extra = 1 if used <= NUM_DIRECT < needed else 0
        available = sum(
            1
            for num in range(self.inode_blocks + 1, self.num_blocks)
            if self.block_bitmap.is_free(num)
        )
        if needed - used + extra > available:
            raise NoSpaceError("not enough free blocks")

        entry.dirty = True
        for index in range(used, needed):
            if index == NUM_DIRECT:
                inode.indirect = self._allocate_block()
            num = self._allocate_block()
            if index < NUM_DIRECT:
                inode.direct[index] = num
            else:
                pointers = self.get_block(inode.indirect)
                _BLOCK_NUM.pack_into(
                    pointers.data, (index - NUM_DIRECT) * _BLOCK_NUM.size, num
                )
                pointers.dirty = True
        inode.size = newsize

    def free_inode(self, inum: int) -> None:
        """Release inode ``inum`` and every block its file holds, then sync."""
        entry = self.get_inode(inum)
        if entry is None:
            raise FileSystemError(f"inode {inum} is not in use")
        blocks = self._file_blocks(entry.inode)
        bad = [num for num in blocks if not self._is_data_block(num)]
        if bad:
            raise FileSystemError(f"inode {inum} refers to reserved blocks {bad}")
        for num in blocks:
            self.block_bitmap.set_free(num)

        inode = entry.inode
        inode.type = InodeType.FREE
        inode.nlink = 0
        inode.size = 0
        inode.direct = [0] * NUM_DIRECT
        inode.indirect = 0
        entry.dirty = True
        self.inode_bitmap.set_free(inum)
        self.sync()
        self._inodes.remove(inum)

    def sync(self) -> None:
        """Write every dirty cached inode and block back to the disk."""
        for entry in self._inodes.values():
            if entry.dirty:
                self._store_inode(entry)
        for block in self._blocks.values():
            if block.dirty:
                self.disk.write_sector(block.num, block.data)
                block.dirty = False