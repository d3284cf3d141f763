"""Exception hierarchy shared by the transport, protocol and API layers."""

from __future__ import annotations


class UhfError(Exception):
    """Base class for all reader errors."""


class TransportError(UhfError):
    """A chunk could not be moved across the USB link."""


class ReaderTimeout(TransportError, TimeoutError):
    """No chunk arrived from the reader within the timeout."""

    def __init__(self, message: str = "Timeout waiting for response") -> None:
        super().__init__(message)


class CommunicationError(TransportError, OSError):
    """The underlying USB backend failed.

    The message carries the backend's diagnostic text.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Communication error: {message}")
        self.detail = message


class InvalidParameter(UhfError, ValueError):
    """A caller-supplied value cannot be represented on the wire."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid parameter: {message}")


class InvalidResponse(UhfError):
    """The reader answered, but not with the expected marker bytes."""

    def __init__(self, message: str = "Invalid response from device", response: bytes = b"") -> None:
        if response:
            message = f"{message} (response: {response[:32].hex(' ').upper()}{'...' if len(response) > 32 else ''})"
        super().__init__(message)
        self.response = response


class NotConnected(UhfError, ConnectionError):
    """The reader is not open, or could not be opened."""

    def __init__(self, message: str = "Device not connected") -> None:
        super().__init__(message)
