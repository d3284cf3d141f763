"""USB HID connection to the UHF-U6 RFID reader.

Supports both ``hidapi`` (preferred) and ``pyusb`` backends.
The reader enumerates as a HID device on interface 0 with bulk
endpoints 0x82 (IN) and 0x03 (OUT). Either backend moves exactly one
64-byte chunk per call.
"""

from __future__ import annotations

import logging

from ..errors import CommunicationError, NotConnected, ReaderTimeout
from ..models.system import DeviceInfo
from ..protocol.framing import CHUNK_SIZE, CHUNK_TIMEOUT_MS, ENDPOINT_IN, ENDPOINT_OUT

logger = logging.getLogger(__name__)

VENDOR_ID = 0x0E6A
PRODUCT_ID = 0x0317
HID_INTERFACE = 0


class USBConnection:
    """Manages the USB HID connection to the reader.

    Implements the chunk I/O capability used by the protocol engine.

    Usage::

        conn = USBConnection()
        conn.open()
        tags = ReaderInterface().inventory(conn)
        conn.close()
    """

    def __init__(
        self,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
    ) -> None:
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._device = None
        self._backend: str = ""
        self._connected = False
        self._device_info = DeviceInfo(vendor_id=vendor_id, product_id=product_id)

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def device_info(self) -> DeviceInfo:
        return self._device_info

    def open(self) -> DeviceInfo:
        """Open a connection to the reader, trying hidapi first, then pyusb.

        Returns:
            DeviceInfo with USB descriptor information.

        Raises:
            NotConnected: If the device cannot be found or opened.
        """
        try:
            return self._open_hidapi()
        except Exception as e:
            logger.debug("hidapi backend failed: %s, trying pyusb", e)

        try:
            return self._open_pyusb()
        except Exception as e:
            raise NotConnected(
                f"Could not connect to RFID reader "
                f"({self._vendor_id:#06x}:{self._product_id:#06x}). "
                f"Ensure the device is connected and you have permissions "
                f"(on Linux, a udev rule for the plugdev group). "
                f"Last error: {e}"
            ) from e

    def _open_hidapi(self) -> DeviceInfo:
        """Open using the hidapi library."""
        import hid

        device = hid.device()
        device.open(self._vendor_id, self._product_id)
        try:
            device.set_nonblocking(False)
            info = DeviceInfo(
                vendor_id=self._vendor_id,
                product_id=self._product_id,
                manufacturer=device.get_manufacturer_string() or "",
                product=device.get_product_string() or "",
                serial_number=device.get_serial_number_string() or "",
                backend="hidapi",
                interface=HID_INTERFACE,
                endpoint_in=ENDPOINT_IN,
                endpoint_out=ENDPOINT_OUT,
            )
        except Exception:
            device.close()
            raise

        self._device = device
        self._backend = "hidapi"
        self._connected = True
        self._device_info = info

        logger.info("Connected via hidapi: %s %s", info.manufacturer, info.product)
        return info

    def _open_pyusb(self) -> DeviceInfo:
        """Open using pyusb + libusb."""
        import usb.core
        import usb.util

        dev = usb.core.find(idVendor=self._vendor_id, idProduct=self._product_id)
        if dev is None:
            raise NotConnected("Device not found via pyusb")

        # Detach kernel driver if needed
        if dev.is_kernel_driver_active(HID_INTERFACE):
            dev.detach_kernel_driver(HID_INTERFACE)

        usb.util.claim_interface(dev, HID_INTERFACE)
        try:
            info = DeviceInfo(
                vendor_id=self._vendor_id,
                product_id=self._product_id,
                manufacturer=usb.util.get_string(dev, dev.iManufacturer) or "",
                product=usb.util.get_string(dev, dev.iProduct) or "",
                serial_number=usb.util.get_string(dev, dev.iSerialNumber) or "",
                backend="pyusb",
                interface=HID_INTERFACE,
                endpoint_in=ENDPOINT_IN,
                endpoint_out=ENDPOINT_OUT,
            )
        except Exception:
            usb.util.release_interface(dev, HID_INTERFACE)
            usb.util.dispose_resources(dev)
            raise

        self._device = dev
        self._backend = "pyusb"
        self._connected = True
        self._device_info = info

        logger.info("Connected via pyusb: %s %s", info.manufacturer, info.product)
        return info

    def close(self) -> None:
        """Close the USB connection."""
        if not self._connected:
            return

        try:
            if self._backend == "hidapi":
                self._device.close()
            elif self._backend == "pyusb":
                import usb.util
                usb.util.release_interface(self._device, HID_INTERFACE)
                usb.util.dispose_resources(self._device)
        except Exception as e:
            logger.warning("Error closing device: %s", e)
        finally:
            self._device = None
            self._connected = False
            logger.info("Disconnected")

    def write_chunk(
        self,
        endpoint: int,
        data: bytes,
        timeout_ms: int = CHUNK_TIMEOUT_MS,
    ) -> int:
        """Write one 64-byte chunk to the reader.

        Returns:
            Number of bytes written.

        Raises:
            NotConnected: If not connected.
            ReaderTimeout: If the write times out (pyusb only).
            CommunicationError: If the write fails.
        """
        if not self._connected:
            raise NotConnected()

        if len(data) != CHUNK_SIZE:
            raise ValueError(
                f"Chunk must be {CHUNK_SIZE} bytes, got {len(data)}"
            )

        if self._backend == "hidapi":
            # hidapi expects the report ID as the first byte
            try:
                written = self._device.write(b"\x00" + bytes(data))
            except (OSError, ValueError) as e:
                raise CommunicationError(str(e)) from e
            if written < 0:
                raise CommunicationError(self._hid_error())
            return written
        elif self._backend == "pyusb":
            import usb.core
            try:
                return self._device.write(endpoint, data, timeout=timeout_ms)
            except usb.core.USBTimeoutError as e:
                raise ReaderTimeout() from e
            except usb.core.USBError as e:
                raise CommunicationError(str(e)) from e
        else:
            raise RuntimeError(f"Unknown backend: {self._backend}")

    def read_chunk(
        self,
        endpoint: int,
        size: int = CHUNK_SIZE,
        timeout_ms: int = CHUNK_TIMEOUT_MS,
    ) -> bytes:
        """Read one chunk of up to ``size`` bytes from the reader.

        Raises:
            NotConnected: If not connected.
            ReaderTimeout: If nothing arrives within ``timeout_ms``.
            CommunicationError: If the read fails.
        """
        if not self._connected:
            raise NotConnected()

        if self._backend == "hidapi":
            try:
                data = self._device.read(size, timeout_ms)
            except (OSError, ValueError) as e:
                raise CommunicationError(str(e)) from e
            if not data:
                raise ReaderTimeout()
            return bytes(data)
        elif self._backend == "pyusb":
            import usb.core
            try:
                data = self._device.read(endpoint, size, timeout=timeout_ms)
            except usb.core.USBTimeoutError as e:
                raise ReaderTimeout() from e
            except usb.core.USBError as e:
                raise CommunicationError(str(e)) from e
            return bytes(data)
        else:
            raise RuntimeError(f"Unknown backend: {self._backend}")

    def _hid_error(self) -> str:
        try:
            return self._device.error() or "hidapi write failed"
        except Exception:
            return "hidapi write failed"
