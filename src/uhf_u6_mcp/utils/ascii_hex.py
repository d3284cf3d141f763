"""ASCII-hex conversions used by the reader's hybrid wire format.

The reader embeds numbers inside otherwise binary frames as uppercase
ASCII hex digits. ``hex_digit`` is the single-nibble rule used for bank
addresses and word counts; the remaining helpers convert whole buffers.
"""

from __future__ import annotations

from ..errors import InvalidParameter


def hex_digit(value: int) -> int:
    """Return the ASCII code of ``value`` rendered as one hex digit.

    0-9 map to ``'0'``-``'9'``; 10 and above are offset by 55, so 10-15
    give ``'A'``-``'F'``. Values above 15 are not rejected here, callers
    validate their own ranges.
    """
    if value >= 10:
        return value + 55
    return value + 48


def byte_to_ascii_hex(byte: int) -> tuple[int, int]:
    """Split a byte into the ASCII codes of its high and low hex digits."""
    return hex_digit((byte >> 4) & 0x0F), hex_digit(byte & 0x0F)


def hex_to_ascii(data: bytes) -> str:
    """Render bytes as an uppercase hex string without separators."""
    return data.hex().upper()


def ascii_to_hex(text: str) -> bytes:
    """Parse an even-length hex string into bytes.

    Raises:
        InvalidParameter: If the string has odd length or non-hex characters.
    """
    if len(text) % 2:
        raise InvalidParameter(f"Invalid hex string (odd length): {text!r}")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise InvalidParameter(f"Invalid hex string: {text!r}") from e
