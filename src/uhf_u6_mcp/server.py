"""MCP server entry point for the UHF-U6 RFID reader.

Exposes tools and resources via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .api import UhfRfidApi
from .errors import UhfError
from .models.banks import (
    DeviceAction,
    LockAction,
    LockableMemoryBank,
    MemoryBank,
    PasswordLockAction,
)
from .transport.usb_connection import USBConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "uhf-u6",
    instructions="MCP server for the Fongwah UHF-U6 USB RFID reader",
)

# Global connection state
_api: UhfRfidApi | None = None
_debug_mode = False
_saved_log_level: int | None = None

NO_TAGS_MESSAGE = "No tags found in range. Place a tag near the reader."

WRITE_WARNING = (
    "Write and lock operations can permanently alter or lock RFID tags. "
    "Test with disposable tags first."
)


def _get_api() -> UhfRfidApi:
    """Get the API bound to the active connection, raising if not connected."""
    if _api is None or not _api.connection.connected:
        raise RuntimeError(
            "Not connected to device. Use the 'connect' tool first."
        )
    return _api


def _tags_in_range(api: UhfRfidApi, operation: str) -> dict[str, Any]:
    """Inventory the field before an operation that touches a tag.

    Returns ``{"error": ...}`` when no tag answers, otherwise the tag count
    plus a warning when more than one tag would be affected.
    """
    count = len(api.inventory())
    if count == 0:
        return {"error": NO_TAGS_MESSAGE}
    context: dict[str, Any] = {"tags_in_range": count}
    if count > 1:
        context["warning"] = f"Multiple tags detected. {operation} may affect all tags in range."
    return context


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect() -> dict[str, Any]:
    """Open the USB connection to the RFID reader.

    Auto-discovers the reader by USB vendor/product ID (0x0e6a:0x0317).
    """
    global _api
    if _api is not None and _api.connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "product": _api.connection.device_info.product,
        }

    connection = USBConnection()
    try:
        info = connection.open()
    except UhfError as e:
        return {"connected": False, "error": str(e)}

    _api = UhfRfidApi(connection, debug_mode=_debug_mode)
    return {
        "connected": True,
        "product": info.product,
        "manufacturer": info.manufacturer,
        "serial_number": info.serial_number,
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the USB connection to the reader."""
    global _api
    if _api is None:
        return {"disconnected": True}
    _api.connection.close()
    _api = None
    return {"disconnected": True}


@mcp.tool()
def get_device_info() -> dict[str, Any]:
    """Report USB descriptors, interface and endpoints of the open reader."""
    api = _get_api()
    result = api.connection.device_info.to_dict()
    result["connected"] = api.connection.connected
    return result


@mcp.tool()
def set_debug_mode(enabled: bool) -> dict[str, bool]:
    """Log every USB chunk sent and received (DEBUG level).

    Args:
        enabled: True to turn chunk tracing on.
    """
    global _debug_mode, _saved_log_level
    _debug_mode = enabled
    if _api is not None:
        _api.set_debug_mode(enabled)
    package_logger = logging.getLogger("uhf_u6_mcp")
    if enabled:
        if _saved_log_level is None:
            _saved_log_level = package_logger.level
        package_logger.setLevel(logging.DEBUG)
    elif _saved_log_level is not None:
        package_logger.setLevel(_saved_log_level)
        _saved_log_level = None
    return {"debug": enabled}


# ─── TAG TOOLS ───────────────────────────────────────────────────────

@mcp.tool()
def inventory() -> dict[str, Any]:
    """Scan for RFID tags in range."""
    api = _get_api()
    try:
        tags = api.inventory()
    except UhfError as e:
        return {"error": str(e)}
    return {"tags": [tag.to_dict() for tag in tags], "count": len(tags)}


@mcp.tool()
def read_memory(bank: str, address: int = 0, words: int = 4) -> dict[str, Any]:
    """Read words from a tag memory bank.

    Args:
        bank: Memory bank (reserved, epc, tid, user).
        address: Starting word address (0-255).
        words: Number of words to read (0-15).
    """
    try:
        memory_bank = MemoryBank.from_name(bank)
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        context = _tags_in_range(api, "Read")
        if "error" in context:
            return context
        data = api.read(memory_bank, address, words)
    except UhfError as e:
        return {"error": str(e)}

    return {
        "bank": str(memory_bank),
        "address": address,
        "words": words,
        "data": api.hex_to_ascii(data),
        "ascii": data.decode("ascii", errors="replace"),
        **context,
    }


@mcp.tool()
def write_memory(bank: str, data: str, address: int = 0) -> dict[str, Any]:
    """Write data to a tag memory bank.

    Args:
        bank: Memory bank (reserved, epc, tid, user).
        data: Hexadecimal string, a multiple of 4 bytes (e.g. 01020304).
        address: Starting word address (0-255).
    """
    try:
        memory_bank = MemoryBank.from_name(bank)
        payload = UhfRfidApi.ascii_to_hex(data)
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        context = _tags_in_range(api, "Write")
        if "error" in context:
            return context
        api.write(memory_bank, address, payload)
    except UhfError as e:
        return {"error": str(e)}

    return {
        "written": True,
        "bank": str(memory_bank),
        "address": address,
        "bytes": len(payload),
        **context,
    }


@mcp.tool()
def lock_memory(bank: str, action: str) -> dict[str, Any]:
    """Lock a memory bank on a tag. Locks can be permanent.

    Args:
        bank: Bank to lock (kill_password, access_password, epc, tid, user).
        action: writeable, permanent, secure or locked.
    """
    try:
        lockable = LockableMemoryBank.from_name(bank)
        lock_action = LockAction(action.strip().lower())
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        context = _tags_in_range(api, "Lock")
        if "error" in context:
            return context
        api.lock_memory_bank(lockable, lock_action)
    except UhfError as e:
        return {"error": str(e)}

    warning = " ".join(filter(None, [context.pop("warning", None), WRITE_WARNING]))
    return {
        "locked": True,
        "bank": lockable.name.lower(),
        "action": lock_action.value,
        **context,
        "warning": warning,
    }


@mcp.tool()
def lock_password(bank: str, action: str) -> dict[str, Any]:
    """Lock the access or kill password of a tag.

    Args:
        bank: access_password or kill_password.
        action: writeable, permanent, secure or locked.
    """
    try:
        lockable = LockableMemoryBank.from_name(bank)
        lock_action = PasswordLockAction(action.strip().lower())
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        context = _tags_in_range(api, "Lock")
        if "error" in context:
            return context
        api.lock_password(lockable, lock_action)
    except UhfError as e:
        return {"error": str(e)}

    return {"locked": True, "bank": lockable.name.lower(), "action": lock_action.value, **context}


@mcp.tool()
def set_access_password(password: str) -> dict[str, Any]:
    """Set the access password used for secured tag operations.

    Args:
        password: 8 hexadecimal characters, e.g. 12345678.
    """
    if len(password) != 8:
        return {"error": "Password must be 8 hexadecimal characters"}
    try:
        raw = UhfRfidApi.ascii_to_hex(password)
    except ValueError:
        return {"error": f"Password must be hexadecimal, got '{password}'"}
    if len(raw) != 4:
        return {"error": f"Password must be hexadecimal, got '{password}'"}

    api = _get_api()
    try:
        context = _tags_in_range(api, "Password change")
        if "error" in context:
            return context
        api.set_access_password(int.from_bytes(raw, "big"))
    except UhfError as e:
        return {"error": str(e)}

    return {"password_set": True, **context}


@mcp.tool()
def device_action(actions: str, time: int = 50) -> dict[str, Any]:
    """Beep and/or light the reader's LEDs.

    Args:
        actions: Comma separated list of beep, red, green, yellow.
        time: Duration in deciseconds (10 ms units), default 50 (500 ms).
    """
    try:
        flags = DeviceAction.from_names(actions)
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        api.device_action(flags, time)
    except UhfError as e:
        return {"error": str(e)}

    return {"actions": [flag.name.lower() for flag in flags], "time_ms": time * 10}


@mcp.tool()
def send_raw_command(data: str) -> dict[str, Any]:
    """Send one raw chunk to the reader and return the raw reply (advanced).

    Manual commands can damage the reader or tags.

    Args:
        data: Hexadecimal command bytes, at most 64 bytes.
    """
    try:
        payload = UhfRfidApi.ascii_to_hex(data)
    except ValueError as e:
        return {"error": str(e)}

    api = _get_api()
    try:
        response = api.send_raw(payload)
    except UhfError as e:
        return {"error": str(e)}

    return {
        "sent": api.hex_to_ascii(payload),
        "response": api.hex_to_ascii(response),
        "ascii": response.decode("ascii", errors="replace"),
    }


@mcp.tool()
def run_self_test() -> dict[str, Any]:
    """Read 8 words from every bank, then beep with the green LED."""
    api = _get_api()
    results: dict[str, Any] = {}
    try:
        for bank in (MemoryBank.EPC, MemoryBank.TID, MemoryBank.USER, MemoryBank.RESERVED):
            results[str(bank)] = api.hex_to_ascii(api.read(bank, 0, 8))
        api.device_action([DeviceAction.BEEP, DeviceAction.GREEN_LED], 50)
    except UhfError as e:
        return {"passed": False, "banks": results, "error": str(e)}
    return {"passed": True, "banks": results}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("uhf://device/info")
def resource_device_info() -> str:
    """Reader descriptors and connection state."""
    if _api is None or not _api.connection.connected:
        return json.dumps({"connected": False})

    info = _api.connection.device_info.to_dict()
    info["connected"] = True
    return json.dumps(info)


@mcp.resource("uhf://device/status")
def resource_device_status() -> str:
    """Connection state and debug flag."""
    connected = _api is not None and _api.connection.connected
    return json.dumps({"connected": connected, "debug": _debug_mode})


@mcp.resource("uhf://catalog/banks")
def resource_bank_catalog() -> str:
    """Memory banks, lockable banks, lock actions and device actions."""
    return json.dumps({
        "memory_banks": [{"id": b.value, "name": str(b)} for b in MemoryBank],
        "lockable_banks": [b.name.lower() for b in LockableMemoryBank],
        "lock_actions": [a.value for a in LockAction],
        "device_actions": {a.name.lower(): a.value for a in DeviceAction},
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
