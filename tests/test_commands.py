"""Tests for command builders."""

import pytest

from uhf_u6_mcp.errors import InvalidParameter
from uhf_u6_mcp.models.banks import MemoryBank
from uhf_u6_mcp.protocol.commands import (
    Command,
    TagCommand,
    build_action,
    build_inventory_poll,
    build_inventory_start,
    build_lock,
    build_read,
    build_set_access_password,
    build_write,
)


def test_command_enum_values():
    """Opcode bytes the reader firmware expects."""
    assert Command.TAG == 0x41
    assert Command.INVENTORY == 0x55
    assert Command.ACTION == 145
    assert TagCommand.READ == ord("R")
    assert TagCommand.WRITE == ord("W")
    assert TagCommand.PASSWORD == ord("P")
    assert TagCommand.LOCK == ord("L")


@pytest.mark.parametrize("bank", list(MemoryBank))
@pytest.mark.parametrize("address", [0, 1, 9, 10, 15])
def test_read_low_address_uses_one_digit(bank, address):
    frame = build_read(bank, address, 4)
    assert len(frame) == 9
    assert frame[0] == 8
    assert frame[1:4] == b"\x02AR"
    assert frame[4] == ord("0") + bank.value
    assert frame[5] == ord(",")
    assert frame[6] == ord("0123456789ABCDEF"[address])
    assert frame[7] == ord(",")
    assert frame[8] == ord("4")


@pytest.mark.parametrize("bank", list(MemoryBank))
@pytest.mark.parametrize("address", [0x10, 0x2A, 0x9F, 0xFF])
def test_read_high_address_uses_two_digits(bank, address):
    frame = build_read(bank, address, 2)
    assert len(frame) == 10
    assert frame[0] == 9
    assert frame[6:8] == f"{address:02X}".encode()
    assert frame[8] == ord(",")
    assert frame[9] == ord("2")


def test_read_epc_example_bytes():
    assert build_read(MemoryBank.EPC, 2, 6) == bytes([8, 2, 0x41, 0x52, 0x31, 0x2C, 0x32, 0x2C, 0x36])


@pytest.mark.parametrize("words", range(10))
def test_read_word_count_digits(words):
    assert build_read(MemoryBank.TID, 0, words)[-1] == ord("0") + words


@pytest.mark.parametrize("words", range(10, 16))
def test_read_word_count_letters(words):
    assert build_read(MemoryBank.TID, 0, words)[-1] == words + 55


def test_read_bounds():
    with pytest.raises(InvalidParameter):
        build_read(MemoryBank.EPC, 256, 1)
    with pytest.raises(InvalidParameter):
        build_read(MemoryBank.EPC, -1, 1)
    with pytest.raises(InvalidParameter):
        build_read(MemoryBank.EPC, 0, 16)


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError):
        build_read(MemoryBank.EPC, 0, 99)


def test_write_low_address():
    data = bytes([0xDE, 0xAD, 0xBE, 0xEF])
    frame = build_write(MemoryBank.USER, 3, data)
    assert frame == bytes([13, 2]) + b"AW3,3,1," + data
    assert frame[0] == len(frame) - 1


def test_write_high_address():
    data = bytes(8)
    frame = build_write(MemoryBank.EPC, 0x20, data)
    assert frame[:11] == bytes([18, 2]) + b"AW1,20,2,"
    assert frame[11:] == data
    assert frame[0] == len(frame) - 1


def test_write_rejects_bad_lengths():
    with pytest.raises(InvalidParameter):
        build_write(MemoryBank.EPC, 0, b"")
    with pytest.raises(InvalidParameter):
        build_write(MemoryBank.EPC, 0, b"\x01\x02\x03")
    with pytest.raises(InvalidParameter):
        build_write(MemoryBank.EPC, 0, bytes(64))


def test_write_large_frame_spans_chunks():
    frame = build_write(MemoryBank.USER, 0x40, bytes(60))
    assert len(frame) == 71
    assert frame[0] == 70
    assert frame[9] == ord("F")


def test_build_action():
    assert build_action(0x05, 50) == bytes([4, 2, 145, 5, 50])


def test_action_bounds():
    with pytest.raises(InvalidParameter):
        build_action(0, 10)
    with pytest.raises(InvalidParameter):
        build_action(16, 10)
    with pytest.raises(InvalidParameter):
        build_action(1, 256)


def test_build_set_access_password():
    password = bytes([1, 2, 3, 4, 0, 0, 0, 0])
    frame = build_set_access_password(password)
    assert len(frame) == 12
    assert frame[:4] == bytes([11, 2]) + b"AP"
    assert frame[4:] == password


def test_set_access_password_requires_8_bytes():
    with pytest.raises(InvalidParameter):
        build_set_access_password(bytes(4))


def test_build_lock():
    frame = build_lock(b"00C030")
    assert frame == bytes([10, 2]) + b"AL00C030"
    assert len(frame) == 11


def test_lock_requires_6_bytes():
    with pytest.raises(InvalidParameter):
        build_lock(b"C030")


def test_inventory_commands():
    assert build_inventory_start() == bytes([3, 2, 0x55, 0x80])
    assert build_inventory_poll() == bytes([3, 2, 0x55, 0x91])
