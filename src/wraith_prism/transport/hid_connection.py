"""USB HID connection to the AMD Wraith Prism cooler.

Supports both ``hidapi`` (preferred) and ``pyusb`` backends.
The cooler presents several HID interfaces; the lighting controller
listens on Interface 1. Every command is a 65-byte output report
(report ID 0 + 64 bytes) answered by a 64-byte input report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import (
    DeviceNotFound,
    InvalidParameter,
    ReadFailure,
    ShortReply,
    WriteFailure,
)
from ..protocol.framing import COMMAND_SIZE, REPLY_SIZE, Reply, hex_dump

logger = logging.getLogger(__name__)

VENDOR_ID = 0x2516
PRODUCT_ID = 0x0051
HID_INTERFACE = 1
READ_TIMEOUT_MS = 0  # 0 blocks until the device answers


@dataclass
class DeviceInfo:
    """Basic device identification from USB descriptors."""

    vendor_id: int = VENDOR_ID
    product_id: int = PRODUCT_ID
    interface: int = HID_INTERFACE
    manufacturer: str = ""
    product: str = ""
    path: str = ""


class HIDConnection:
    """Manages the HID connection to the cooler's lighting controller.

    Usage::

        with HIDConnection() as conn:
            reply = conn.transact(build_enable())
    """

    def __init__(
        self,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
        interface: int = HID_INTERFACE,
        timeout_ms: int = READ_TIMEOUT_MS,
    ) -> None:
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._interface = interface
        self._timeout_ms = timeout_ms
        self._device = None
        self._endpoints = None
        self._backend: str = ""
        self._connected = False
        self._device_info = DeviceInfo(
            vendor_id=vendor_id, product_id=product_id, interface=interface
        )

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def device_info(self) -> DeviceInfo:
        return self._device_info

    def __enter__(self) -> HIDConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> DeviceInfo:
        """Open the lighting interface, trying hidapi first, then pyusb.

        Returns:
            DeviceInfo with USB descriptor information.

        Raises:
            DeviceNotFound: If the device cannot be found or opened.
        """
        try:
            return self._open_hidapi()
        except (ImportError, OSError, ValueError) as e:
            logger.debug("hidapi backend failed: %s, trying pyusb", e)

        try:
            return self._open_pyusb()
        except (ImportError, OSError, ValueError) as e:
            raise DeviceNotFound(
                f"Could not open Wraith Prism "
                f"({self._vendor_id:#06x}:{self._product_id:#06x}, "
                f"interface {self._interface}). "
                f"Ensure the device is connected and you have permissions. "
                f"Last error: {e}"
            ) from e

    def _open_hidapi(self) -> DeviceInfo:
        """Open using the hidapi library, selecting the interface by path."""
        import hid

        for entry in hid.enumerate(self._vendor_id, self._product_id):
            if (
                entry.get("vendor_id") == self._vendor_id
                and entry.get("product_id") == self._product_id
                and entry.get("interface_number") == self._interface
            ):
                break
        else:
            raise DeviceNotFound("Device not found via hidapi")

        device = hid.device()
        device.open_path(entry["path"])
        device.set_nonblocking(False)

        self._device = device
        self._backend = "hidapi"
        self._connected = True

        path = entry["path"]
        self._device_info = DeviceInfo(
            vendor_id=self._vendor_id,
            product_id=self._product_id,
            interface=self._interface,
            manufacturer=entry.get("manufacturer_string") or "",
            product=entry.get("product_string") or "",
            path=path.decode(errors="replace") if isinstance(path, bytes) else str(path),
        )

        logger.info(
            "Connected via hidapi: %s %s",
            self._device_info.manufacturer,
            self._device_info.product,
        )
        return self._device_info

    def _open_pyusb(self) -> DeviceInfo:
        """Open using pyusb + libusb, talking to the interrupt endpoints."""
        import usb.core
        import usb.util

        dev = usb.core.find(idVendor=self._vendor_id, idProduct=self._product_id)
        if dev is None:
            raise DeviceNotFound("Device not found via pyusb")

        # Detach kernel driver if needed
        if dev.is_kernel_driver_active(self._interface):
            dev.detach_kernel_driver(self._interface)

        configuration = dev.get_active_configuration()
        intf = configuration[(self._interface, 0)]
        ep_in = usb.util.find_descriptor(
            intf,
            custom_match=lambda e: usb.util.endpoint_direction(e.bEndpointAddress)
            == usb.util.ENDPOINT_IN,
        )
        ep_out = usb.util.find_descriptor(
            intf,
            custom_match=lambda e: usb.util.endpoint_direction(e.bEndpointAddress)
            == usb.util.ENDPOINT_OUT,
        )
        if ep_in is None or ep_out is None:
            raise DeviceNotFound(
                f"Interface {self._interface} has no interrupt endpoints"
            )

        usb.util.claim_interface(dev, self._interface)

        self._device = dev
        self._endpoints = (ep_in, ep_out)
        self._backend = "pyusb"
        self._connected = True
        self._device_info = DeviceInfo(
            vendor_id=self._vendor_id,
            product_id=self._product_id,
            interface=self._interface,
            manufacturer=usb.util.get_string(dev, dev.iManufacturer) or "",
            product=usb.util.get_string(dev, dev.iProduct) or "",
            path=f"usb:{dev.bus}:{dev.address}",
        )

        logger.info(
            "Connected via pyusb: %s %s",
            self._device_info.manufacturer,
            self._device_info.product,
        )
        return self._device_info

    def close(self) -> None:
        """Close the HID connection. Safe to call more than once."""
        if not self._connected:
            return

        try:
            if self._backend == "hidapi":
                self._device.close()
            elif self._backend == "pyusb":
                import usb.util
                usb.util.release_interface(self._device, self._interface)
                usb.util.dispose_resources(self._device)
        except (OSError, ValueError) as e:
            logger.warning("Error closing device: %s", e)
        finally:
            self._device = None
            self._endpoints = None
            self._connected = False
            logger.info("Disconnected")

    def write(self, data: bytes) -> int:
        """Write a 65-byte command frame to the device.

        Returns:
            Number of bytes the device accepted, counting the report ID.

        Raises:
            ConnectionError: If not connected.
            WriteFailure: If the backend reports an error.
        """
        if not self._connected:
            raise ConnectionError("Not connected to device")

        try:
            if self._backend == "hidapi":
                return self._device.write(bytes(data))
            elif self._backend == "pyusb":
                # libusb has no report ID; the leading 0x00 is implied
                _, ep_out = self._endpoints
                return ep_out.write(bytes(data[1:]), timeout=self._timeout_ms) + 1
            else:
                raise RuntimeError(f"Unknown backend: {self._backend}")
        except (OSError, ValueError) as e:
            raise WriteFailure(f"Device write failed: {e}") from e

    def read(self) -> bytes:
        """Read one reply from the device, blocking up to the timeout.

        Returns:
            The bytes read; may be shorter than 64 on a timeout.

        Raises:
            ConnectionError: If not connected.
            ReadFailure: If the backend reports an error.
        """
        if not self._connected:
            raise ConnectionError("Not connected to device")

        try:
            if self._backend == "hidapi":
                data = self._device.read(REPLY_SIZE, self._timeout_ms)
            elif self._backend == "pyusb":
                import usb.core
                ep_in, _ = self._endpoints
                try:
                    data = ep_in.read(REPLY_SIZE, timeout=self._timeout_ms)
                except usb.core.USBTimeoutError:
                    # hidapi returns an empty read on timeout; match it
                    data = b""
            else:
                raise RuntimeError(f"Unknown backend: {self._backend}")
        except (OSError, ValueError) as e:
            raise ReadFailure(f"Device read failed: {e}") from e

        if data is None:
            raise ReadFailure("Device read failed: no data returned")
        return bytes(data)

    def transact(self, frame: bytes, log_level: int = logging.DEBUG) -> Reply:
        """Send one command frame and read its reply.

        The frame must be exactly 65 bytes and the reply exactly 64
        bytes. Nothing is retried.

        Args:
            frame: A 65-byte command frame.
            log_level: Level at which the frame and reply are dumped.

        Raises:
            InvalidParameter: If the frame is not 65 bytes.
            WriteFailure: If fewer than 65 bytes were accepted.
            ReadFailure: If the read failed.
            ShortReply: If the reply is not exactly 64 bytes.
        """
        if len(frame) != COMMAND_SIZE:
            raise InvalidParameter(
                f"Command frame must be {COMMAND_SIZE} bytes, got {len(frame)}"
            )

        logger.log(log_level, "Sending:\n%s", hex_dump(frame))
        written = self.write(frame)
        if written is None or written < 0:
            raise WriteFailure("Device write failed")
        if written < COMMAND_SIZE:
            raise WriteFailure(
                f"Device write failed; only {written} of {COMMAND_SIZE} "
                f"command bytes sent"
            )

        data = self.read()
        logger.log(log_level, "Received:\n%s", hex_dump(data))
        if len(data) != REPLY_SIZE:
            raise ShortReply(len(data), REPLY_SIZE)
        return Reply(data=data)
