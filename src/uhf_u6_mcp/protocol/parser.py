"""Response validation for reader replies.

The reader echoes fixed marker bytes for each command. Parsers here
return the payload, or ``None`` for commands without one, and raise
:class:`InvalidResponse` when the markers do not match.
"""

from __future__ import annotations

from ..errors import InvalidResponse
from .commands import Command, TagCommand

ACTION_ACK = bytes([3, 2, Command.ACTION, 0])
PASSWORD_ACK = bytes([4, 2, Command.TAG, 0, TagCommand.PASSWORD])
WRITE_ACK_LENGTH = 8
LOCK_ACK_LENGTH = 8
LOCK_OK = b"OK"

TAG_HEX_LENGTH = 47
EMPTY_TAG_SENTINEL = "04025591000000000000000000000000000000000000000"
MIN_TAG_RESPONSE = 5


def parse_read(response: bytes, words: int) -> bytes:
    """Extract the data of a read reply, at most ``words * 4`` bytes."""
    if len(response) < 6 or response[4] != TagCommand.READ:
        raise InvalidResponse("Unexpected read response", response)
    return response[5 : 5 + words * 4]


def parse_write(response: bytes) -> None:
    if not response or response[0] != WRITE_ACK_LENGTH:
        raise InvalidResponse("Unexpected write response", response)


def parse_action(response: bytes) -> None:
    if len(response) < 4 or response[:4] != ACTION_ACK:
        raise InvalidResponse("Unexpected action response", response)


def parse_set_access_password(response: bytes) -> None:
    if len(response) < 5 or response[:5] != PASSWORD_ACK:
        raise InvalidResponse("Unexpected set-password response", response)


def parse_lock(response: bytes) -> None:
    if (
        len(response) < 8
        or response[0] != LOCK_ACK_LENGTH
        or response[4] != TagCommand.LOCK
        or response[6:8] != LOCK_OK
    ):
        raise InvalidResponse("Unexpected lock response", response)


def parse_inventory_tag(response: bytes) -> str | None:
    """Turn one inventory poll reply into a tag identifier.

    The identifier is the first 47 characters of the lowercase hex dump of
    the whole reply. Returns ``None`` for the reader's "no tag" reply.
    Replies shorter than 5 bytes are invalid.
    """
    if len(response) < MIN_TAG_RESPONSE:
        raise InvalidResponse("Inventory response too short", response)
    tag = response.hex()[:TAG_HEX_LENGTH]
    if tag == EMPTY_TAG_SENTINEL:
        return None
    return tag
