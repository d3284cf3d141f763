"""Data models for memory banks, lock actions, tags and device info."""

from .banks import (
    DeviceAction,
    LockAction,
    LockableMemoryBank,
    MemoryBank,
    PasswordLockAction,
)
from .system import DeviceInfo
from .tag import InventoryResult
