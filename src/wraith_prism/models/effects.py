"""Data models for channels, modes, and lighting effect parameters.

All values end up as single unsigned bytes inside a command frame, so
every numeric field is validated to 0-255 on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from ..errors import InvalidParameter

RING_SLOTS = 15
MAX_MIRAGE_HZ = 65536


def check_byte(name: str, value: int) -> int:
    """Return ``value`` if it fits in one unsigned byte, else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 255:
        raise InvalidParameter(f"{name} must be 0-255, got {value}")
    return value


class Channel(IntEnum):
    """Addressable LED zones and ring animation selectors."""

    RING_STATIC = 0x00
    RING_BREATH = 0x01
    RING_COLOUR_CYCLE = 0x02
    LOGO = 0x05
    FAN = 0x06
    RING_RAINBOW = 0x07
    RING_BOUNCE = 0x08
    RING_CHASE = 0x09
    RING_SWIRL = 0x0A
    RING_MORSE = 0x0B
    OFF = 0xFE

    @classmethod
    def from_name(cls, name: str) -> Channel:
        """Resolve ``logo`` or ``fan``."""
        try:
            return ZONE_NAMES[name]
        except KeyError:
            raise InvalidParameter(
                f"Unknown channel '{name}'. Valid: {list(ZONE_NAMES)}"
            ) from None

    @classmethod
    def from_ring_name(cls, name: str) -> Channel:
        """Resolve one of the ring channel names (``static``, ``chase``, ...)."""
        try:
            return RING_NAMES[name]
        except KeyError:
            raise InvalidParameter(
                f"Unknown ring channel '{name}'. Valid: {list(RING_NAMES)}"
            ) from None

    @property
    def is_ring(self) -> bool:
        return self not in (Channel.LOGO, Channel.FAN)


class Mode(IntEnum):
    """Firmware animation algorithms."""

    STATIC = 0x01
    COLOUR_CYCLE = 0x02
    BREATH = 0x03
    RING_RAINBOW = 0x05
    RING_SWIRL = 0x4A
    RING_CHASE = 0xC3
    RING_DEFAULT = 0xFF

    @classmethod
    def from_name(cls, name: str) -> Mode:
        """Resolve a logo/fan effect mode name."""
        try:
            return MODE_NAMES[name]
        except KeyError:
            raise InvalidParameter(
                f"Unknown mode '{name}'. Valid: {list(MODE_NAMES)}"
            ) from None


class EffectFlags(IntFlag):
    """Bits of the effect flags byte. Bits are independent."""

    NONE = 0x00
    REVERSE = 0x01
    FIXED_COLOUR = 0x20
    BLEND_COLOURS = 0x40
    RANDOM_COLOUR = 0x80


ZONE_NAMES: dict[str, Channel] = {
    "logo": Channel.LOGO,
    "fan": Channel.FAN,
}

RING_NAMES: dict[str, Channel] = {
    "static": Channel.RING_STATIC,
    "cycle": Channel.RING_COLOUR_CYCLE,
    "colour-cycle": Channel.RING_COLOUR_CYCLE,
    "breath": Channel.RING_BREATH,
    "rainbow": Channel.RING_RAINBOW,
    "bounce": Channel.RING_BOUNCE,
    "chase": Channel.RING_CHASE,
    "swirl": Channel.RING_SWIRL,
    "morse": Channel.RING_MORSE,
    "off": Channel.OFF,
}

MODE_NAMES: dict[str, Mode] = {
    "static": Mode.STATIC,
    "cycle": Mode.COLOUR_CYCLE,
    "colour-cycle": Mode.COLOUR_CYCLE,
    "breath": Mode.BREATH,
}


@dataclass(frozen=True)
class RGB:
    """A colour as three bytes."""

    red: int = 0
    green: int = 0
    blue: int = 0

    def __post_init__(self) -> None:
        check_byte("red", self.red)
        check_byte("green", self.green)
        check_byte("blue", self.blue)

    def __bytes__(self) -> bytes:
        return bytes([self.red, self.green, self.blue])

    def __str__(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"


@dataclass
class EffectParameters:
    """Everything the effect-update frame carries besides channel and mode.

    ``speed`` is the device speed byte (already looked up from a speed
    table), not the 1-5 level the user chose.
    """

    speed: int
    brightness: int
    colour: RGB
    colour2: RGB = field(default_factory=RGB)
    flags: int = EffectFlags.FIXED_COLOUR

    def __post_init__(self) -> None:
        check_byte("speed", self.speed)
        check_byte("brightness", self.brightness)
        self.flags = int(check_byte("flags", self.flags))


@dataclass
class ChannelMap:
    """Assignment of channels to the logo, the fan and the 15 ring LEDs."""

    ring: list[Channel]
    logo: Channel = Channel.LOGO
    fan: Channel = Channel.FAN

    def __post_init__(self) -> None:
        if len(self.ring) != RING_SLOTS:
            raise InvalidParameter(
                f"Channel map needs exactly {RING_SLOTS} ring slots, "
                f"got {len(self.ring)}"
            )
        self.ring = [_as_channel(c) for c in self.ring]
        self.logo = _as_channel(self.logo)
        self.fan = _as_channel(self.fan)

    @classmethod
    def from_ring(
        cls,
        channels: list[Channel],
        logo: Channel = Channel.LOGO,
        fan: Channel = Channel.FAN,
    ) -> ChannelMap:
        """Build a map from 1-15 ring channels.

        Slots after the last given channel repeat that channel.
        """
        channels = list(channels)
        if not channels:
            raise InvalidParameter("Channel map needs at least one ring channel")
        if len(channels) > RING_SLOTS:
            raise InvalidParameter(
                f"Channel map takes at most {RING_SLOTS} ring channels, "
                f"got {len(channels)}"
            )
        channels += [channels[-1]] * (RING_SLOTS - len(channels))
        return cls(ring=channels, logo=logo, fan=fan)


@dataclass
class MirageSettings:
    """Per-colour blink frequencies in Hz; 0 disables that colour."""

    red_hz: int = 0
    green_hz: int = 0
    blue_hz: int = 0

    def __post_init__(self) -> None:
        for name in ("red_hz", "green_hz", "blue_hz"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameter(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= MAX_MIRAGE_HZ:
                raise InvalidParameter(
                    f"{name} must be 0-{MAX_MIRAGE_HZ}, got {value}"
                )


def _as_channel(value) -> Channel:
    try:
        return Channel(value)
    except ValueError:
        raise InvalidParameter(f"Unknown channel id {value!r}") from None
