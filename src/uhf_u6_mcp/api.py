"""High-level reader operations built on top of the protocol engine."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import InvalidParameter, InvalidResponse, NotConnected
from .models.banks import (
    DeviceAction,
    LockAction,
    LockableMemoryBank,
    MemoryBank,
    PasswordLockAction,
)
from .models.tag import InventoryResult
from .protocol.framing import (
    CHUNK_SIZE,
    CHUNK_TIMEOUT_MS,
    ENDPOINT_IN,
    ENDPOINT_OUT,
)
from .protocol.interface import ReaderInterface
from .protocol.lock import LockPatternBuilder, lock_setting
from .transport.usb_connection import USBConnection
from .utils import ascii_hex

logger = logging.getLogger(__name__)


class UhfRfidApi:
    """Convenience wrapper tying a USB connection to the protocol engine.

    Every operation checks the connection first and raises
    :class:`NotConnected` if it has been closed.
    """

    def __init__(self, connection: USBConnection, debug_mode: bool = False) -> None:
        self._connection = connection
        self._interface = ReaderInterface(debug_mode=debug_mode)

    @property
    def connection(self) -> USBConnection:
        return self._connection

    @property
    def debug_mode(self) -> bool:
        return self._interface.debug_mode

    def set_debug_mode(self, enabled: bool) -> None:
        self._interface.set_debug_mode(enabled)

    def _device(self) -> USBConnection:
        if not self._connection.connected:
            raise NotConnected()
        return self._connection

    def device_action(self, actions: Iterable[DeviceAction], time: int) -> None:
        """Beep and/or light LEDs for ``time`` deciseconds (10 ms units)."""
        device = self._device()
        self._interface.action(device, DeviceAction.combine(actions), time)

    def read(self, bank: MemoryBank, address: int, word_count: int) -> bytes:
        device = self._device()
        return self._interface.read(device, bank, address, word_count)

    def write(self, bank: MemoryBank, address: int, data: bytes) -> None:
        if len(data) % 4:
            raise InvalidParameter("Data length must be a multiple of 4")
        device = self._device()
        self._interface.write(device, bank, address, data)

    def lock_memory_bank(self, bank: LockableMemoryBank, action: LockAction) -> None:
        """Lock ``bank`` with the modify mask applied."""
        self.lock_memory_raw(LockPatternBuilder.memory_bank(bank, action, True))

    def lock_password(self, bank: LockableMemoryBank, action: PasswordLockAction) -> None:
        if not bank.is_password:
            raise InvalidParameter(
                "Only Access and Kill passwords can be locked with this method"
            )
        self.lock_memory_raw(LockPatternBuilder.password(bank, action, True))

    def lock_memory_raw(self, pattern: int) -> None:
        """Send a raw lock word."""
        if pattern < 0:
            raise InvalidParameter(f"Invalid lock pattern: {pattern}")
        setting = lock_setting(pattern)
        device = self._device()
        self._interface.lock_memory(device, setting)

    def inventory(self) -> list[InventoryResult]:
        """Scan for tags.

        Each record carries the number of records the round produced as its
        read count; the reader does not report per-tag counts.
        """
        device = self._device()
        epc_list = self._interface.inventory(device)
        if len(epc_list) > 0xFF:
            raise InvalidResponse("Too many tags in one inventory")
        read_count = len(epc_list)
        return [InventoryResult(epc=epc, read_count=read_count) for epc in epc_list]

    def set_access_password(self, password: int) -> None:
        """Set a 32-bit access password. The second password word is zero."""
        if not 0 <= password <= 0xFFFFFFFF:
            raise InvalidParameter(f"Password must fit in 32 bits, got {password:#x}")
        full_password = password.to_bytes(4, "big") + b"\x00" * 4
        device = self._device()
        self._interface.set_access_password(device, full_password)

    def send_raw(self, data: bytes, timeout_ms: int = CHUNK_TIMEOUT_MS) -> bytes:
        """Write one raw chunk and return the single chunk read back.

        No framing or validation is applied.
        """
        if not data or len(data) > CHUNK_SIZE:
            raise InvalidParameter(f"Raw command must be 1-{CHUNK_SIZE} bytes")
        device = self._device()
        written = device.write_chunk(ENDPOINT_OUT, bytes(data).ljust(CHUNK_SIZE, b"\x00"), timeout_ms)
        logger.debug("Sent raw command %s (%d bytes)", ascii_hex.hex_to_ascii(data), written)
        return device.read_chunk(ENDPOINT_IN, CHUNK_SIZE, timeout_ms)

    @staticmethod
    def ascii_to_hex(hex_string: str) -> bytes:
        return ascii_hex.ascii_to_hex(hex_string)

    @staticmethod
    def hex_to_ascii(data: bytes) -> str:
        return ascii_hex.hex_to_ascii(data)

    @staticmethod
    def byte_to_ascii_hex(byte: int) -> tuple[int, int]:
        return ascii_hex.byte_to_ascii_hex(byte)
