"""Command/response engine for the UHF-U6 reader.

Each operation builds its command, sends it through the chunk framer,
drains the reply and validates it. Commands are strictly sequential: a
reply is fully consumed before the next command goes out. Nothing is
retried here.
"""

from __future__ import annotations

import logging

from ..models.banks import MemoryBank
from . import inventory
from .commands import (
    build_action,
    build_lock,
    build_read,
    build_set_access_password,
    build_write,
)
from .framing import CHUNK_TIMEOUT_MS, ChunkIO, read_response, send_command
from .parser import (
    parse_action,
    parse_lock,
    parse_read,
    parse_set_access_password,
    parse_write,
)

logger = logging.getLogger(__name__)


class ReaderInterface:
    """Stateless protocol engine bound to nothing but a debug flag.

    Usage::

        engine = ReaderInterface()
        data = engine.read(conn, MemoryBank.EPC, 0, 8)
        tags = engine.inventory(conn)
    """

    def __init__(self, debug_mode: bool = False) -> None:
        self.debug_mode = debug_mode

    def set_debug_mode(self, enabled: bool) -> None:
        """Log every chunk sent and received at DEBUG level when enabled."""
        self.debug_mode = enabled

    def _transact(self, device: ChunkIO, command: bytes) -> bytes:
        send_command(device, command, self.debug_mode)
        return read_response(device, CHUNK_TIMEOUT_MS, self.debug_mode)

    def read(self, device: ChunkIO, bank: MemoryBank, address: int, words: int) -> bytes:
        """Read ``words`` words from a tag memory bank.

        Returns:
            At most ``words * 4`` bytes of tag data.

        Raises:
            InvalidParameter: If address or word count cannot be encoded.
            InvalidResponse: If the reply is not a read reply.
            ReaderTimeout: If the reader does not answer.
            CommunicationError: If the USB transfer fails.
        """
        response = self._transact(device, build_read(bank, address, words))
        data = parse_read(response, words)
        if self.debug_mode:
            logger.debug("Read data: %s", data.hex())
        return data

    def write(self, device: ChunkIO, bank: MemoryBank, address: int, data: bytes) -> None:
        """Write ``data`` (a multiple of 4 bytes) to a tag memory bank."""
        response = self._transact(device, build_write(bank, address, data))
        parse_write(response)
        if self.debug_mode:
            logger.debug("Write data: %s - Success", data.hex())

    def action(self, device: ChunkIO, action: int, time_units: int) -> None:
        """Drive the buzzer/LEDs for ``time_units`` tens of milliseconds."""
        response = self._transact(device, build_action(action, time_units))
        parse_action(response)
        if self.debug_mode:
            logger.debug(
                "Action (beep/led) executed: action=%d, time=%dms",
                action,
                time_units * 10,
            )

    def set_access_password(self, device: ChunkIO, password: bytes) -> None:
        """Set the 8-byte access password the reader uses for secured commands."""
        response = self._transact(device, build_set_access_password(password))
        parse_set_access_password(response)
        if self.debug_mode:
            logger.debug("Set Access Password: %s - Success", bytes(password).hex())

    def lock_memory(self, device: ChunkIO, lock_setting: bytes) -> None:
        """Send a 6-byte ASCII lock setting to the tag."""
        response = self._transact(device, build_lock(lock_setting))
        parse_lock(response)
        if self.debug_mode:
            logger.debug("Lock Memory: %s - Success", bytes(lock_setting).hex())

    def inventory(self, device: ChunkIO) -> list[str]:
        """Scan for tags; see :func:`uhf_u6_mcp.protocol.inventory.scan`."""
        return inventory.scan(device, self.debug_mode)
