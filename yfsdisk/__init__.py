"""Disk image tools and cached block/inode storage for the YFS file system format."""

__version__ = "0.1.0"
__all__ = ["bitmap", "cache", "disk", "layout", "mkyfs", "storage"]