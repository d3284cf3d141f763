"""USB device identification model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DeviceInfo:
    """Basic device identification from USB descriptors."""

    vendor_id: int
    product_id: int
    manufacturer: str = ""
    product: str = ""
    serial_number: str = ""
    backend: str = ""
    interface: int = 0
    endpoint_in: int = 0
    endpoint_out: int = 0

    def to_dict(self) -> dict:
        return {
            "vendor_id": f"0x{self.vendor_id:04X}",
            "product_id": f"0x{self.product_id:04X}",
            "manufacturer": self.manufacturer,
            "product": self.product,
            "serial_number": self.serial_number,
            "backend": self.backend,
            "interface": self.interface,
            "endpoint_in": f"0x{self.endpoint_in:02X}",
            "endpoint_out": f"0x{self.endpoint_out:02X}",
        }
