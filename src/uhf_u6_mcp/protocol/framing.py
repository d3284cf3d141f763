"""Chunked transport framing for 64-byte USB HID transfers.

Outgoing commands::

    +---------+--------+--------+----------------------+---------+
    | Length  | 0x02   | Opcode |       Payload        | Padding |
    | 1 byte  | 1 byte | 1+ B   |   variable length    | to 64 B |
    +---------+--------+--------+----------------------+---------+

A command longer than one chunk is split into consecutive 64-byte
chunks. The first byte of every chunk but the last is overwritten with
0x82 (continuation) and the first byte of the last chunk with 0x02
(end). Commands that fit in a single chunk are only zero-padded.

Incoming responses use a different convention: a chunk whose first byte
is 63 is followed by another chunk, any other first byte ends the
message, and so does a short read.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

from ..errors import InvalidResponse

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64
ENDPOINT_OUT = 0x03
ENDPOINT_IN = 0x82
CHUNK_TIMEOUT_MS = 2000

PROTOCOL_MARKER = 0x02
CONTINUATION_MARKER = 0x82
END_MARKER = 0x02
RESPONSE_CONTINUATION = 63


class ChunkIO(Protocol):
    """Raw chunk I/O offered by a USB backend.

    Implementations raise :class:`~uhf_u6_mcp.errors.ReaderTimeout` when
    nothing moves within ``timeout_ms`` and
    :class:`~uhf_u6_mcp.errors.CommunicationError` for any other failure.
    """

    def write_chunk(self, endpoint: int, data: bytes, timeout_ms: int) -> int:
        ...

    def read_chunk(self, endpoint: int, size: int, timeout_ms: int) -> bytes:
        ...


def build_chunks(data: bytes) -> list[bytes]:
    """Split a command into zero-padded 64-byte chunks with markers applied."""
    chunks: list[bytes] = []
    multi = len(data) > CHUNK_SIZE
    for offset in range(0, len(data), CHUNK_SIZE):
        chunk = bytearray(data[offset : offset + CHUNK_SIZE])
        chunk.extend(b"\x00" * (CHUNK_SIZE - len(chunk)))
        if multi:
            last = offset + CHUNK_SIZE >= len(data)
            chunk[0] = END_MARKER if last else CONTINUATION_MARKER
        chunks.append(bytes(chunk))
    return chunks


def send_command(device: ChunkIO, data: bytes, debug: bool = False) -> None:
    """Write a command to the reader chunk by chunk.

    Errors raised by the device propagate unchanged.
    """
    for chunk in build_chunks(data):
        written = device.write_chunk(ENDPOINT_OUT, chunk, CHUNK_TIMEOUT_MS)
        if debug:
            logger.debug(
                "Sent command chunk: %s (Bytes written: %d)",
                chunk.hex().upper(),
                written,
            )


def read_response(
    device: ChunkIO,
    timeout_ms: int = CHUNK_TIMEOUT_MS,
    debug: bool = False,
) -> bytes:
    """Drain response chunks from the reader into one buffer.

    Raises:
        ReaderTimeout: If a chunk read times out.
        InvalidResponse: If nothing at all was received.
    """
    response = bytearray()
    start = time.monotonic()

    while True:
        chunk = device.read_chunk(ENDPOINT_IN, CHUNK_SIZE, timeout_ms)
        response.extend(chunk)
        if debug:
            logger.debug(
                "Received response chunk: %s (Length: %d)",
                chunk.hex().upper(),
                len(chunk),
            )

        first = chunk[0] if chunk else 0
        elapsed_ms = (time.monotonic() - start) * 1000
        if first != RESPONSE_CONTINUATION or elapsed_ms > timeout_ms:
            break
        if len(chunk) < CHUNK_SIZE:
            break

    if not response:
        raise InvalidResponse("Empty response from device")

    if debug:
        logger.debug(
            "Full response: %s (Length: %d)",
            response.hex().upper(),
            len(response),
        )
    return bytes(response)
