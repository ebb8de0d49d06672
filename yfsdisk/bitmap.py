"""A fixed-length bitmap of used and free slots."""

from __future__ import annotations

from typing import Optional


class Bitmap:
    """Track which of ``length`` numbered slots are in use.

    Slot ``n`` lives in bit ``n % 8`` of byte ``n // 8``. Marking a number
    outside ``0 <= n < length`` as used or free has no effect.
    """

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"bitmap length must not be negative, got {length}")
        self.length = length
        self._bits = bytearray((length + 7) // 8)

    def _in_range(self, num: int) -> bool:
        return 0 <= num < self.length

    def set_used(self, num: int) -> None:
        """Mark slot ``num`` as used."""
        if self._in_range(num):
            self._bits[num >> 3] |= 1 << (num & 7)

    def set_free(self, num: int) -> None:
        """Mark slot ``num`` as free."""
        if self._in_range(num):
            self._bits[num >> 3] &= ~(1 << (num & 7)) & 0xFF

    def is_free(self, num: int) -> bool:
        """Return whether slot ``num`` is free; raise IndexError if out of range."""
        if not self._in_range(num):
            raise IndexError(f"slot {num} out of range (bitmap has {self.length})")
        return not self._bits[num >> 3] & (1 << (num & 7))

    def find_free(self) -> Optional[int]:
        """Return the lowest free slot, or None when every slot is used."""
        for index, byte in enumerate(self._bits):
            if byte == 0xFF:
                continue
            for bit in range(8):
                num = index * 8 + bit
                if num >= self.length:
                    return None
                if not byte & (1 << bit):
                    return num
        return None