"""Shared fakes for protocol tests."""

from __future__ import annotations

import pytest

from uhf_u6_mcp.errors import CommunicationError
from uhf_u6_mcp.protocol.framing import CHUNK_SIZE


class FakeReader:
    """In-memory stand-in for the USB chunk I/O capability.

    ``chunks`` is the queue of replies handed out by ``read_chunk``; an
    exception instance in the queue is raised instead. Writes are
    recorded, and fail once ``fail_writes_after`` chunks have been written.
    """

    def __init__(self, chunks=None, fail_writes_after=None):
        self.chunks = list(chunks or [])
        self.written: list[bytes] = []
        self.write_calls: list[tuple[int, int]] = []
        self.reads = 0
        self.fail_writes_after = fail_writes_after
        self.connected = True

    def queue(self, *chunks):
        self.chunks.extend(chunks)

    def write_chunk(self, endpoint, data, timeout_ms):
        if self.fail_writes_after is not None and len(self.written) >= self.fail_writes_after:
            raise CommunicationError("pipe error")
        assert len(data) == CHUNK_SIZE
        self.written.append(bytes(data))
        self.write_calls.append((endpoint, timeout_ms))
        return len(data)

    def read_chunk(self, endpoint, size, timeout_ms):
        self.reads += 1
        item = self.chunks.pop(0)
        if isinstance(item, Exception):
            raise item
        return bytes(item)


@pytest.fixture
def reader():
    return FakeReader()
