"""The three root counters and their memory-mapped registers."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field


def _to_f32(x: float) -> float:
    return struct.unpack("<f", struct.pack("<f", x))[0]


# Horizontal-blank clock: about 15840 Hz, averaged between PAL and NTSC.
_HBLANK_DIVIDER = _to_f32(1.0 / 2200.0)

_REACHED_TARGET = 1 << 11
_REACHED_WRAP = 1 << 12


@dataclass
class CounterStatus:
    """Counter mode register."""

    value: int = 0x400

    def _bit(self, n: int) -> bool:
        return bool(self.value >> n & 1)

    def _set_bit(self, mask: int, on: bool) -> None:
        self.value = self.value | mask if on else self.value & ~mask

    @property
    def synchronization_enable(self) -> bool:
        return self._bit(0)

    @property
    def synchronization_mode(self) -> int:
        return self.value >> 1 & 0b11

    @property
    def reset_at_target(self) -> bool:
        return self._bit(3)

    @property
    def irq_at_target(self) -> bool:
        return self._bit(4)

    @property
    def irq_at_wrap(self) -> bool:
        return self._bit(5)

    @property
    def repeat_mode(self) -> bool:
        return self._bit(6)

    @property
    def pulse_mode(self) -> bool:
        return self._bit(7)

    @property
    def clock_source(self) -> int:
        return self.value >> 8 & 0b11

    @property
    def irq_pulse(self) -> bool:
        return self._bit(10)

    @property
    def reached_target(self) -> bool:
        return self._bit(11)

    @reached_target.setter
    def reached_target(self, on: bool) -> None:
        self._set_bit(_REACHED_TARGET, on)

    @property
    def reached_wrap(self) -> bool:
        return self._bit(12)

    @reached_wrap.setter
    def reached_wrap(self, on: bool) -> None:
        self._set_bit(_REACHED_WRAP, on)


@dataclass
class Timer:
    """One 16-bit counter, advanced lazily from the bus cycle count."""

    n: int
    current: int = 0
    target: int = 0
    status: CounterStatus = field(default_factory=CounterStatus)
    last_update_cycles: int = 0

    def write_current_value(self, value: int, total_cycles: int) -> None:
        self.current = value & 0xFFFF
        self._refresh_cycles(total_cycles)

    def write_status(self, value: int, total_cycles: int) -> None:
        # Only bits 0-9 are writable; bit 10 is set by every write.
        value = (value & 0x3FF) | 0x400
        self.status.value = (self.status.value & ~0x3FF) | value
        self.current = 0
        self._refresh_cycles(total_cycles)

    def write_target(self, value: int) -> None:
        self.target = value & 0xFFFF

    def current_value(self, total_cycles: int) -> int:
        """Advance the counter to ``total_cycles`` and return its value."""
        previous = self._refresh_cycles(total_cycles)
        delta = (self.last_update_cycles - previous) & 0xFFFF

        if self.n == 1 and self.status.clock_source in (1, 3):
            delta = int(_to_f32(delta * _HBLANK_DIVIDER))

        total = self.current + delta
        self.current = total & 0xFFFF
        if total > 0xFFFF:
            self.status.reached_wrap = True
        return self.current

    def _refresh_cycles(self, total_cycles: int) -> int:
        old = self.last_update_cycles
        self.last_update_cycles = total_cycles
        return old


class Timers:
    """Register block of the three counters, 16 bytes per counter."""

    def __init__(self) -> None:
        self.timers = (Timer(0), Timer(1), Timer(2))

    def _timer(self, addr: int) -> Timer | None:
        n = addr >> 4
        return self.timers[n] if n <= 2 else None

    def read(self, addr: int, total_cycles: int, size: int = 4) -> int:
        timer = self._timer(addr)
        if timer is None:
            return 0
        register = addr & 0xF
        if register == 0x0:
            return timer.current_value(total_cycles)
        if register == 0x4:
            value = timer.status.value
            # Reading the mode clears the reached flags.
            timer.status.reached_target = False
            timer.status.reached_wrap = False
            return value
        if register == 0x8:
            return timer.target
        return 0

    def write(self, addr: int, value: int, total_cycles: int, size: int = 4) -> None:
        timer = self._timer(addr)
        if timer is None:
            return
        register = addr & 0xF
        if register == 0x0:
            timer.write_current_value(value, total_cycles)
        elif register == 0x4:
            timer.write_status(value, total_cycles)
        elif register == 0x8:
            timer.write_target(value)