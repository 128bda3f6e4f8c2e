"""Configuration utility for the AMD Wraith Prism cooler's RGB lighting."""

__version__ = "0.1.0"

from .errors import (
    WraithError,
    InvalidParameter,
    DeviceNotFound,
    WriteFailure,
    ReadFailure,
    ShortReply,
)
from .models.effects import Channel, Mode, EffectFlags, RGB, ChannelMap
from .protocol.encoding import hz_to_bytes, lookup_speed, SpeedTable
from .session import DeviceSession
from .transport.hid_connection import HIDConnection
