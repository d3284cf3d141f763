"""Memory banks, lock actions and device action flags."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, IntEnum, IntFlag


class MemoryBank(IntEnum):
    """Tag memory banks, numbered as the reader's firmware expects."""

    EPC = 1
    TID = 2
    USER = 3
    RESERVED = 4

    def to_ascii(self) -> int:
        """The bank's wire byte: its code as an ASCII digit."""
        return self.value + 48

    @classmethod
    def from_code(cls, code: int) -> MemoryBank:
        """Map a numeric code to a bank. Unknown codes fall back to RESERVED."""
        try:
            return cls(code)
        except ValueError:
            return cls.RESERVED

    @classmethod
    def from_name(cls, name: str) -> MemoryBank:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Invalid memory bank: {name}. Use 'reserved', 'epc', 'tid', or 'user'"
            ) from None

    def __str__(self) -> str:
        return _BANK_LABELS[self]


_BANK_LABELS = {
    MemoryBank.EPC: "EPC",
    MemoryBank.TID: "TID",
    MemoryBank.USER: "User",
    MemoryBank.RESERVED: "Reserved",
}


class LockableMemoryBank(Enum):
    """Lock targets, each owning a (data bit, permanent bit) pair in the lock word."""

    USER = (8, 9)
    TID = (6, 7)
    EPC = (4, 5)
    ACCESS_PASSWORD = (2, 3)
    KILL_PASSWORD = (0, 1)

    @property
    def data_bit(self) -> int:
        return self.value[0]

    @property
    def perm_bit(self) -> int:
        return self.value[1]

    @property
    def is_password(self) -> bool:
        return self in (LockableMemoryBank.ACCESS_PASSWORD, LockableMemoryBank.KILL_PASSWORD)

    @classmethod
    def from_name(cls, name: str) -> LockableMemoryBank:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Invalid lockable bank: {name}. Use 'kill_password', "
                f"'access_password', 'epc', 'tid', or 'user'"
            ) from None


class LockAction(Enum):
    """Write-lock state for the EPC, TID and User banks."""

    WRITEABLE = "writeable"
    PERMANENTLY_WRITEABLE = "permanent"
    SECURE_WRITEABLE = "secure"
    NOT_WRITEABLE = "locked"


class PasswordLockAction(Enum):
    """Read/write-lock state for the access and kill passwords."""

    READ_WRITEABLE = "writeable"
    PERMANENTLY_READ_WRITEABLE = "permanent"
    SECURE_READ_WRITEABLE = "secure"
    NOT_READ_WRITEABLE = "locked"


class DeviceAction(IntFlag):
    """Buzzer and LED flags for the action command. Combine with ``|``."""

    BEEP = 0x01
    RED_LED = 0x02
    GREEN_LED = 0x04
    YELLOW_LED = 0x08

    @classmethod
    def combine(cls, actions: Iterable[DeviceAction]) -> int:
        """OR a sequence of actions into a single bitmask byte."""
        mask = 0
        for action in actions:
            mask |= int(action)
        return mask

    @classmethod
    def from_names(cls, names: str) -> list[DeviceAction]:
        """Parse a comma separated list such as ``"beep,green"``."""
        aliases = {
            "beep": cls.BEEP,
            "red": cls.RED_LED,
            "green": cls.GREEN_LED,
            "yellow": cls.YELLOW_LED,
        }
        actions = []
        for part in names.split(","):
            part = part.strip().lower()
            if not part:
                continue
            if part not in aliases:
                raise ValueError(
                    f"Unknown action '{part}'. Valid: {list(aliases)}"
                )
            actions.append(aliases[part])
        return actions
