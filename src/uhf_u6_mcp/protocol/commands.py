"""Command opcodes and byte-exact command builders.

Every command starts with a declared length byte (frame length minus
one), the 0x02 protocol marker and an opcode. Tag memory commands use
the ASCII ``'A'`` opcode followed by a sub-command letter and encode
their numeric fields as ASCII hex digits separated by commas.
"""

from __future__ import annotations

from enum import IntEnum

from ..errors import InvalidParameter
from ..models.banks import MemoryBank
from ..utils.ascii_hex import hex_digit
from .framing import PROTOCOL_MARKER

COMMA = ord(",")
MAX_ADDRESS = 0xFF
MAX_WORDS = 0x0F
PASSWORD_SIZE = 8
LOCK_SETTING_SIZE = 6


class Command(IntEnum):
    """Opcode bytes following the protocol marker."""

    TAG = ord("A")
    INVENTORY = 0x55
    ACTION = 0x91


class TagCommand(IntEnum):
    """Sub-command letters of the ``'A'`` opcode."""

    READ = ord("R")
    WRITE = ord("W")
    PASSWORD = ord("P")
    LOCK = ord("L")


class InventoryStep(IntEnum):
    """Sub-commands of the inventory opcode."""

    START = 0x80
    POLL = 0x91


def _check_address(address: int) -> None:
    if not 0 <= address <= MAX_ADDRESS:
        raise InvalidParameter(f"Address must be 0-{MAX_ADDRESS}, got {address}")


def _encode_address(address: int) -> bytes:
    """One hex digit below 0x10, two digits from 0x10 upward."""
    if address >= 0x10:
        return bytes([hex_digit(address >> 4), hex_digit(address & 0x0F)])
    return bytes([hex_digit(address)])


def _memory_command(sub: TagCommand, bank: MemoryBank, address: int, words: int) -> bytearray:
    body = bytearray([PROTOCOL_MARKER, Command.TAG, sub, MemoryBank(bank).to_ascii(), COMMA])
    body += _encode_address(address)
    body.append(COMMA)
    body.append(hex_digit(words))
    return body


def build_read(bank: MemoryBank, address: int, words: int) -> bytes:
    """Build a tag memory read command.

    Args:
        bank: Memory bank to read.
        address: Word address 0-255.
        words: Number of words 0-15 (the reply carries ``words * 4`` bytes).
    """
    _check_address(address)
    if not 0 <= words <= MAX_WORDS:
        raise InvalidParameter(f"Word count must be 0-{MAX_WORDS}, got {words}")
    body = _memory_command(TagCommand.READ, bank, address, words)
    return bytes([len(body)]) + body


def build_write(bank: MemoryBank, address: int, data: bytes) -> bytes:
    """Build a tag memory write command.

    The raw data bytes are appended after a trailing comma. ``data`` must
    be a non-empty multiple of 4 bytes.
    """
    _check_address(address)
    if not data or len(data) % 4:
        raise InvalidParameter("Data length must be a non-zero multiple of 4")
    words = len(data) // 4
    if words > MAX_WORDS:
        raise InvalidParameter(
            f"Data too large: {len(data)} bytes, at most {MAX_WORDS * 4}"
        )
    body = _memory_command(TagCommand.WRITE, bank, address, words)
    body.append(COMMA)
    body += data
    return bytes([len(body)]) + body


def build_action(action: int, time_units: int) -> bytes:
    """Build a buzzer/LED command.

    Args:
        action: ``DeviceAction`` bitmask 1-15.
        time_units: Duration in 10 ms units, 0-255.
    """
    if not 1 <= action <= 0x0F:
        raise InvalidParameter(f"Invalid action value: {action}")
    if not 0 <= time_units <= 0xFF:
        raise InvalidParameter(f"Time must be 0-255, got {time_units}")
    return bytes([4, PROTOCOL_MARKER, Command.ACTION, action, time_units])


def build_set_access_password(password: bytes) -> bytes:
    """Build the access-password command from 8 password bytes."""
    if len(password) != PASSWORD_SIZE:
        raise InvalidParameter(
            f"Password must be {PASSWORD_SIZE} bytes, got {len(password)}"
        )
    return bytes([11, PROTOCOL_MARKER, Command.TAG, TagCommand.PASSWORD]) + bytes(password)


def build_lock(lock_setting: bytes) -> bytes:
    """Build the lock command from a 6-byte ASCII lock setting."""
    if len(lock_setting) != LOCK_SETTING_SIZE:
        raise InvalidParameter(
            f"Lock setting must be {LOCK_SETTING_SIZE} bytes, got {len(lock_setting)}"
        )
    return bytes([10, PROTOCOL_MARKER, Command.TAG, TagCommand.LOCK]) + bytes(lock_setting)


def build_inventory_start() -> bytes:
    return bytes([3, PROTOCOL_MARKER, Command.INVENTORY, InventoryStep.START])


def build_inventory_poll() -> bytes:
    return bytes([3, PROTOCOL_MARKER, Command.INVENTORY, InventoryStep.POLL])
