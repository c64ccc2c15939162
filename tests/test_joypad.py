import pytest

from psxhw.joypad import ControllerState, JoypadMemorycard, JoypadProtocolError


def test_stat_register_reads_7():
    joy = JoypadMemorycard()
    assert joy.read(0x04) == 7


def test_ctrl_forced_zero_bits():
    joy = JoypadMemorycard()
    joy.write(0x0A, 0xFFFF)
    ctrl = joy.read(0x0A)
    assert ctrl & 0xC080 == 0
    assert ctrl | 0xC080 == 0xFFFF
    assert joy.current_joy == 1
    assert joy.state is ControllerState.ID_LOW


def test_ctrl_write_truncated_to_16_bits():
    joy = JoypadMemorycard()
    joy.write(0x0A, 0x10000)
    assert joy.read(0x0A) == 0
    assert joy.txen is False


def test_full_poll_sequence():
    joy = JoypadMemorycard()
    joy.write(0x0A, 0x0003)
    assert joy.state is ControllerState.ID_LOW
    joy.write(0x00, 0x01)
    assert joy.state is ControllerState.ID_LOW

    replies = []
    for byte in [0x42, 0, 0, 0, 0, 0, 0, 0]:
        joy.write(0x00, byte)
        replies.append(joy.read(0x00))
    assert replies == [0x41, 0x5A, 0xFF, 0xFF, 0x80, 0x80, 0x80, 0x80]
    assert joy.state is ControllerState.ANALOG3

    joy.write(0x00, 0)
    assert joy.read(0x00) == 0x80
    assert joy.state is ControllerState.ANALOG3


def test_initial_state_starts_on_1():
    joy = JoypadMemorycard()
    joy.write(0x0A, 0x0001)
    assert joy.state is ControllerState.INITIAL
    joy.write(0x00, 0x01)
    assert joy.state is ControllerState.ID_LOW


def test_initial_state_rejects_other_bytes():
    joy = JoypadMemorycard()
    joy.write(0x0A, 0x0001)
    with pytest.raises(JoypadProtocolError):
        joy.write(0x00, 0x02)


def test_tx_without_enable_is_not_processed():
    joy = JoypadMemorycard()
    joy.write(0x00, 0x02)
    assert joy.state is ControllerState.INITIAL
    assert joy.read(0x00) == 0


def test_unknown_register_write_raises():
    joy = JoypadMemorycard()
    with pytest.raises(JoypadProtocolError):
        joy.write(0x06, 1)


def test_unused_registers():
    joy = JoypadMemorycard()
    for addr in (0x08, 0x0C, 0x0E):
        joy.write(addr, 0xFFFF)
    assert joy.read(0x08) == 0
    assert joy.state is ControllerState.INITIAL


def test_ack_clears_stat_bits():
    joy = JoypadMemorycard()
    joy.joy_stat = 0x20F
    joy.write(0x0A, 1 << 4)
    assert joy.joy_stat & 0x208 == 0
    assert joy.joy_stat & 0x007 == 0x007