"""Little-endian sized access to byte buffers, and the console's main RAM."""

from __future__ import annotations

RAM_SIZE = 2 * 1024 * 1024

_ACCESS_SIZES = (1, 2, 4)


def _check_access(length: int, addr: int, size: int) -> None:
    if size not in _ACCESS_SIZES:
        raise ValueError(f"unsupported access size {size}")
    if addr < 0 or addr + size > length:
        raise IndexError(
            f"access of {size} bytes at {addr:#x} is outside a buffer of {length:#x} bytes"
        )


def read_sized(buffer: bytes | bytearray, addr: int, size: int) -> int:
    """Read a little-endian unsigned value of 1, 2 or 4 bytes at ``addr``."""
    _check_access(len(buffer), addr, size)
    return int.from_bytes(buffer[addr : addr + size], "little")


def write_sized(buffer: bytearray, addr: int, value: int, size: int) -> None:
    """Write ``value``, truncated to ``size`` bytes, little-endian at ``addr``."""
    _check_access(len(buffer), addr, size)
    mask = (1 << (8 * size)) - 1
    buffer[addr : addr + size] = (value & mask).to_bytes(size, "little")


class Ram:
    """2 MiB of zero-initialised main memory."""

    def __init__(self) -> None:
        self.memory = bytearray(RAM_SIZE)

    def read(self, addr: int, size: int = 4) -> int:
        return read_sized(self.memory, addr, size)

    def write(self, addr: int, value: int, size: int = 4) -> None:
        write_sized(self.memory, addr, value, size)