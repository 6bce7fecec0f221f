"""A small byte-addressable memory for the interpreter."""

from __future__ import annotations

MEM_CAPACITY = 1024
_VALID_SIZES = frozenset({1, 2, 4, 8})


class MemoryError_(Exception):
    """Raised for an invalid access size or an out-of-range address."""


class Memory:
    """Fixed-size, zero-initialised memory accessed in 1, 2, 4 or 8 bytes."""

    def __init__(self, capacity: int = MEM_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("memory capacity must be positive")
        self.capacity = capacity
        self._data = bytearray(capacity)

    def _check(self, offset: int, size: int) -> None:
        if size not in _VALID_SIZES:
            raise MemoryError_(f"invalid access size {size}")
        if offset < 0 or offset + size > self.capacity:
            raise MemoryError_(f"access of {size} bytes at {offset} is out of range")

    def load(self, offset: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``offset``."""
        self._check(offset, size)
        return bytes(self._data[offset:offset + size])

    def store(self, offset: int, data: bytes) -> None:
        """Write ``data`` (1, 2, 4 or 8 bytes) starting at ``offset``."""
        self._check(offset, len(data))
        self._data[offset:offset + len(data)] = data

    def dump(self) -> str:
        """Render the modified region of memory as a hex listing."""
        lines = ["Memory state:"]
        width = len(f"{self.capacity - 1:x}")

        used = [i for i, byte in enumerate(self._data) if byte]
        if not used:
            lines.append("Unmodified")
            return "\n".join(lines) + "\n"

        first, last = used[0], used[-1]
        start = first & ~0xF
        end = min((last + 16) & ~0xF, self.capacity)
        lines.append(f"0x{start:0{width}x}-0x{end - 1:0{width}x}:")

        for row in range(start, end, 16):
            chunk = self._data[row:min(row + 16, end)]
            cells = "".join(
                f"{byte:02x}" + (" " if (k + 1) % 4 == 0 else "")
                for k, byte in enumerate(chunk)
            )
            lines.append(f"    0x{row:0{width}x}: {cells}")
        return "\n".join(lines) + "\n"