"""Joypad and memory-card serial port, answering as a digital pad."""

from __future__ import annotations

from enum import Enum, auto


class ControllerState(Enum):
    INITIAL = auto()
    ID_LOW = auto()
    ID_HIGH = auto()
    BUTTONS_LOW = auto()
    BUTTONS_HIGH = auto()
    ANALOG0 = auto()
    ANALOG1 = auto()
    ANALOG2 = auto()
    ANALOG3 = auto()


class JoypadProtocolError(RuntimeError):
    """Raised on a byte or register the port does not handle."""


# Reply byte and next state for each state past the ID request.
_REPLIES = {
    ControllerState.ID_HIGH: (0x5A, ControllerState.BUTTONS_LOW),
    ControllerState.BUTTONS_LOW: (0xFF, ControllerState.BUTTONS_HIGH),
    ControllerState.BUTTONS_HIGH: (0xFF, ControllerState.ANALOG0),
    ControllerState.ANALOG0: (0x80, ControllerState.ANALOG1),
    ControllerState.ANALOG1: (0x80, ControllerState.ANALOG2),
    ControllerState.ANALOG2: (0x80, ControllerState.ANALOG3),
    ControllerState.ANALOG3: (0x80, ControllerState.ANALOG3),
}


class JoypadMemorycard:
    """Registers of the controller port."""

    def __init__(self) -> None:
        self.state = ControllerState.INITIAL
        self.joy_ctrl = 0
        self.joy_stat = 0
        self.tx_data = 0
        self.rx_data = 0
        self.txen = False
        self.current_joy = 0

    def read(self, addr: int, size: int = 4) -> int:
        if addr == 0x00:
            return self.rx_data
        if addr == 0x04:
            return 7
        if addr == 0x0A:
            return self.joy_ctrl
        return 0

    def write(self, addr: int, value: int, size: int = 4) -> None:
        value &= 0xFFFF
        if addr == 0x00:
            self._write_tx_data(value & 0xFF)
        elif addr == 0x0A:
            self._write_joy_ctrl(value)
        elif addr in (0x08, 0x0C, 0x0E):
            pass
        else:
            raise JoypadProtocolError(f"unsupported joypad register {addr:#x}")

    def _write_tx_data(self, tx_data: int) -> None:
        self.tx_data = tx_data
        if self.txen:
            self._process_tx_data()

    def _write_joy_ctrl(self, value: int) -> None:
        value &= ~0xC080 & 0xFFFF
        self.txen = bool(value & 1)

        if value & (1 << 1):
            self.current_joy = value >> 13 & 1
            self.state = ControllerState.ID_LOW

        if value & (1 << 4):
            self.joy_stat &= ~0x208

        self.joy_ctrl = value
        if self.txen:
            self._process_tx_data()

    def _process_tx_data(self) -> None:
        if self.state is ControllerState.INITIAL:
            if self.tx_data == 1:
                self.state = ControllerState.ID_LOW
            elif self.tx_data != 0:
                raise JoypadProtocolError(
                    f"unhandled value {self.tx_data:02x} in state {self.state.name}"
                )
        elif self.state is ControllerState.ID_LOW:
            if self.tx_data == 0x42:
                self.rx_data = 0x41
                self.state = ControllerState.ID_HIGH
        else:
            self.rx_data, self.state = _REPLIES[self.state]