"""Lock word construction.

The lock word holds a (data, permanent) bit pair per lockable bank in
bits 0-9. The modify mask for a pair sits 10 bits above it, and a bank
only changes state on the tag when its mask bits are set. Mask bits of
the TID and User banks land above bit 15, so those words are wider
than 16 bits; the 6-character lock setting has room for them.
"""

from __future__ import annotations

from ..models.banks import LockAction, LockableMemoryBank, PasswordLockAction

MASK_SHIFT = 10


def _apply(
    bank: LockableMemoryBank,
    set_data: bool,
    set_perm: bool,
    apply_mask: bool,
) -> int:
    pattern = 0
    if set_data:
        pattern |= 1 << bank.data_bit
    if set_perm:
        pattern |= 1 << bank.perm_bit
    if apply_mask:
        pattern |= (1 << (bank.data_bit + MASK_SHIFT)) | (1 << (bank.perm_bit + MASK_SHIFT))
    return pattern


_LOCK_BITS = {
    LockAction.WRITEABLE: (False, False),
    LockAction.PERMANENTLY_WRITEABLE: (False, True),
    LockAction.SECURE_WRITEABLE: (True, False),
    LockAction.NOT_WRITEABLE: (True, True),
}

_PASSWORD_LOCK_BITS = {
    PasswordLockAction.READ_WRITEABLE: (False, False),
    PasswordLockAction.PERMANENTLY_READ_WRITEABLE: (False, True),
    PasswordLockAction.SECURE_READ_WRITEABLE: (True, False),
    PasswordLockAction.NOT_READ_WRITEABLE: (True, True),
}


class LockPatternBuilder:
    """Builds lock words for single banks."""

    @staticmethod
    def memory_bank(bank: LockableMemoryBank, action: LockAction, apply_mask: bool) -> int:
        """Lock word for ``bank`` set to ``action``."""
        set_data, set_perm = _LOCK_BITS[action]
        return _apply(bank, set_data, set_perm, apply_mask)

    @staticmethod
    def password(bank: LockableMemoryBank, action: PasswordLockAction, apply_mask: bool) -> int:
        """Lock word for one of the password banks.

        Raises:
            ValueError: If ``bank`` is not ACCESS_PASSWORD or KILL_PASSWORD.
        """
        if not bank.is_password:
            raise ValueError(
                "Only ACCESS_PASSWORD and KILL_PASSWORD can be used with PasswordLockAction"
            )
        set_read, set_write = _PASSWORD_LOCK_BITS[action]
        return _apply(bank, set_read, set_write, apply_mask)


def format_pattern(pattern: int) -> str:
    """Render a lock word as uppercase hex, at least 4 characters."""
    return f"{pattern:04X}"


def lock_setting(pattern: int) -> bytes:
    """The 6-byte ASCII lock setting sent on the wire, zero padded on the left."""
    return format_pattern(pattern).rjust(6, "0").encode("ascii")
