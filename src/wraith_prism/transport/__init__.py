"""Transport layer: HID device discovery and request/reply transactions."""

from .hid_connection import HIDConnection, DeviceInfo
