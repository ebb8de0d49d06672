# yfsdisk

Tools for working with YFS disk images. An image is a fixed-size disk of
512-byte sectors. It holds a boot block, a file system header, a table of
64-byte inodes and the data blocks behind them.

## Installing

    pip install .

## Creating a disk image

The `mkyfs` command writes an empty file system to a file named `DISK`
in the current directory. Any existing file of that name is replaced. The
image has a root directory (inode 1) that holds `.` and `..`.

    mkyfs
    mkyfs 200

The optional argument gives the number of inodes. Without it the image
gets 47 inodes, which is six blocks' worth less one for the header. The
command exits with status 1 and prints a message if the argument is not
a number or the inodes do not fit on the disk.

From Python:

```python
from yfsdisk.mkyfs import build_image, make_filesystem

image = build_image(47)            # bytes of a whole disk image
make_filesystem("DISK", 47)        # the same image written to a file
```

## Disk access

`yfsdisk.disk.Disk` reads and writes whole sectors of a binary file.
`Disk.open(path, num_sectors)` opens an image, or creates an empty one if
the file is missing. Sectors past the end of the file read as zeros. A
sector number out of range, a write that is not exactly 512 bytes, or any
access after `close()` raises `DiskError`. `disk.stats` counts completed
reads and writes. A `Disk` works as a context manager.

## Reading and writing the on-disk format

`yfsdisk.layout` packs and unpacks the header (`FsHeader`), inodes
(`Inode`, with `InodeType`) and directory entries (`DirEntry`).
`inode_block` and `inode_offset` say where an inode lives.

```python
from yfsdisk.disk import Disk
from yfsdisk.layout import FsHeader, Inode, InodeType, inode_block, inode_offset

with Disk.open("DISK", 1426) as disk:
    header = FsHeader.unpack(disk.read_sector(1)[:64])
    sector = disk.read_sector(inode_block(1))
    off = inode_offset(1)
    root = Inode.unpack(sector[off:off + 64])
    assert root.type == InodeType.DIRECTORY
```

## Block and inode storage

`yfsdisk.storage.BlockStore` sits on top of a `Disk`. When it is opened it
reads the header and scans every inode to rebuild its free maps. It keeps
blocks and inodes in fixed-size LRU caches (`yfsdisk.cache.LRUCache`), 32
blocks and 16 inodes. Dirty entries are written back when they are
evicted. It tracks free blocks and inodes with `yfsdisk.bitmap.Bitmap`.

- `get_block(num)` returns a cached block.
- `get_inode(inum)` returns a cached inode, or `None` if the inode is free.
- `new_inode()` reserves the lowest free inode.
- `extend(entry, newsize)` grows a file with zeroed blocks. It uses the
  twelve direct blocks first and then the indirect block.
- `free_inode(inum)` releases an inode and its blocks, then syncs.
- `sync()` writes every dirty inode and block to the disk.

```python
from yfsdisk.disk import Disk
from yfsdisk.storage import BlockStore

with Disk.open("DISK", 1426) as disk:
    store = BlockStore(disk)
    entry = store.new_inode()
    store.extend(entry, 4096)
    store.sync()
```

Operations that cannot be done raise `FileSystemError`. Running out of
free blocks or inodes raises `NoSpaceError`, which is a kind of
`FileSystemError`. Disk access problems raise `DiskError`.

## What this package does not do

This package covers the disk image and the block and inode layer only.
It has no file server and no client library. It does not resolve path
names, look up or edit directory entries, open, read, write or seek
files, or handle links, symbolic links or the current directory. Those
operations would be built on top of `BlockStore`.

## Running the tests

    pip install .[test]
    pytest