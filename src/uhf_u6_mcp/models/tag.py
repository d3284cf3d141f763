"""Inventory result model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class InventoryResult:
    """A tag seen during an inventory scan."""

    epc: str
    read_count: int = 1

    def __str__(self) -> str:
        return f"{self.epc} (Read Count: {self.read_count})"

    def to_dict(self) -> dict:
        return {"epc": self.epc, "read_count": self.read_count}
