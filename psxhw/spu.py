"""Sound processor register space and sound RAM."""

from __future__ import annotations

from psxhw.memory import read_sized, write_sized

IO_SIZE = 1024
SOUND_RAM_SIZE = 512 * 1024

_TRANSFER_ADDRESS = 0x1A6
_TRANSFER_FIFO = 0x1A8
_SPUCNT = 0x1AA
_SPUSTAT = 0x1AE


class Spu:
    """Stores register writes and handles manual transfers into sound RAM."""

    def __init__(self) -> None:
        self.io_space = bytearray(IO_SIZE)
        self.memory = bytearray(SOUND_RAM_SIZE)
        self.spucnt = 0
        self._transfer_address = 0

    def write(self, addr: int, value: int, size: int = 4) -> None:
        write_sized(self.io_space, addr, value, 4)

        if addr == _TRANSFER_ADDRESS:
            self._transfer_address = (value & 0xFFFF) * 8
        elif addr == _TRANSFER_FIFO:
            write_sized(self.memory, self._transfer_address, value, 2)
            self._transfer_address = (self._transfer_address + 2) % len(self.memory)
        elif addr == _SPUCNT:
            self.spucnt = value & 0xFFFF

    def read(self, addr: int, size: int = 4) -> int:
        value = read_sized(self.io_space, addr, 4)
        if addr == _SPUCNT:
            return self.spucnt
        if addr == _SPUSTAT:
            return self.spucnt & 0x3F
        return value