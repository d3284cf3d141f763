"""Tests for reply validation."""

import pytest

from uhf_u6_mcp.errors import InvalidResponse
from uhf_u6_mcp.protocol.parser import (
    EMPTY_TAG_SENTINEL,
    parse_action,
    parse_inventory_tag,
    parse_lock,
    parse_read,
    parse_set_access_password,
    parse_write,
)


def test_read_payload_truncated_to_word_count():
    response = bytes([20, 2, 0x41, 0, ord("R")]) + bytes(range(1, 40))
    assert parse_read(response, 2) == bytes(range(1, 9))


def test_read_payload_shorter_than_requested():
    response = bytes([6, 2, 0x41, 0, ord("R"), 0xAB])
    assert parse_read(response, 4) == b"\xab"


def test_read_rejects_wrong_marker():
    with pytest.raises(InvalidResponse):
        parse_read(bytes([20, 2, 0x41, 0, ord("E"), 1, 2]), 1)


def test_read_rejects_short_reply():
    with pytest.raises(InvalidResponse):
        parse_read(bytes([4, 2, 0x41, 0, ord("R")]), 1)


def test_write_ack():
    parse_write(bytes([8, 2, 0x41, 0, ord("W")]))
    with pytest.raises(InvalidResponse):
        parse_write(bytes([7, 2]))
    with pytest.raises(InvalidResponse):
        parse_write(b"")


def test_action_ack():
    parse_action(bytes([3, 2, 145, 0]) + bytes(60))
    with pytest.raises(InvalidResponse):
        parse_action(bytes([3, 2, 145, 1]))
    with pytest.raises(InvalidResponse):
        parse_action(bytes([3, 2, 145]))


def test_set_access_password_ack():
    parse_set_access_password(bytes([4, 2, 65, 0, 80]))


@pytest.mark.parametrize("index", range(5))
def test_set_access_password_any_differing_byte_fails(index):
    response = bytearray([4, 2, 65, 0, 80])
    response[index] ^= 0xFF
    with pytest.raises(InvalidResponse):
        parse_set_access_password(bytes(response))


def test_lock_ack():
    parse_lock(bytes([8, 2, 0x41, 0, ord("L"), 0]) + b"OK")


@pytest.mark.parametrize(
    "response",
    [
        bytes([9, 2, 0x41, 0, ord("L"), 0]) + b"OK",
        bytes([8, 2, 0x41, 0, ord("R"), 0]) + b"OK",
        bytes([8, 2, 0x41, 0, ord("L"), 0]) + b"NO",
        bytes([8, 2, 0x41, 0, ord("L"), 0, ord("O")]),
    ],
)
def test_lock_rejects(response):
    with pytest.raises(InvalidResponse):
        parse_lock(response)


def test_invalid_response_keeps_raw_bytes():
    with pytest.raises(InvalidResponse) as exc_info:
        parse_write(bytes([1, 2, 3]))
    assert exc_info.value.response == bytes([1, 2, 3])
    assert "01 02 03" in str(exc_info.value)


def test_inventory_sentinel_is_no_tag():
    response = bytes([4, 2, 0x55, 0x91]) + bytes(60)
    assert response.hex()[:47] == EMPTY_TAG_SENTINEL
    assert parse_inventory_tag(response) is None


def test_inventory_tag_truncated_to_47_chars():
    response = bytes([0x12, 2, 0x55, 0x91]) + bytes(range(0x30, 0x6C))
    tag = parse_inventory_tag(response)
    assert tag == response.hex()[:47]
    assert len(tag) == 47
    assert tag == tag.lower()


def test_inventory_short_tag_kept_whole():
    response = bytes([4, 2, 0x55, 0x91, 0x01])
    assert parse_inventory_tag(response) == "0402559101"


def test_inventory_too_short():
    with pytest.raises(InvalidResponse):
        parse_inventory_tag(bytes([4, 2, 0x55, 0x91]))
