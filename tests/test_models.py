"""Tests for channel/mode resolution and effect data models."""

import pytest

from wraith_prism.errors import InvalidParameter
from wraith_prism.models.effects import (
    RGB,
    Channel,
    ChannelMap,
    EffectFlags,
    EffectParameters,
    MirageSettings,
    Mode,
)


def test_channel_values():
    """Verify channel IDs match the device."""
    assert Channel.LOGO == 0x05
    assert Channel.FAN == 0x06
    assert Channel.RING_STATIC == 0x00
    assert Channel.RING_RAINBOW == 0x07
    assert Channel.RING_MORSE == 0x0B
    assert Channel.OFF == 0xFE


def test_mode_values():
    """Verify mode IDs match the firmware."""
    assert Mode.STATIC == 0x01
    assert Mode.RING_CHASE == 0xC3
    assert Mode.RING_SWIRL == 0x4A
    assert Mode.RING_DEFAULT == 0xFF


def test_channel_from_name():
    assert Channel.from_name("logo") is Channel.LOGO
    assert Channel.from_name("fan") is Channel.FAN
    with pytest.raises(InvalidParameter):
        Channel.from_name("ring")


def test_ring_channel_from_name():
    """Both 'cycle' and 'colour-cycle' resolve to the cycle channel."""
    assert Channel.from_ring_name("cycle") is Channel.RING_COLOUR_CYCLE
    assert Channel.from_ring_name("colour-cycle") is Channel.RING_COLOUR_CYCLE
    assert Channel.from_ring_name("off") is Channel.OFF
    with pytest.raises(InvalidParameter):
        Channel.from_ring_name("logo")


def test_mode_from_name():
    assert Mode.from_name("static") is Mode.STATIC
    assert Mode.from_name("breath") is Mode.BREATH
    with pytest.raises(InvalidParameter):
        Mode.from_name("chase")


def test_is_ring():
    assert Channel.RING_SWIRL.is_ring
    assert not Channel.LOGO.is_ring


def test_rgb_bounds():
    """Colour values outside 0-255 should raise."""
    assert bytes(RGB(1, 2, 3)) == b"\x01\x02\x03"
    with pytest.raises(InvalidParameter):
        RGB(256, 0, 0)
    with pytest.raises(InvalidParameter):
        RGB(0, -1, 0)


def test_rgb_str():
    assert str(RGB(255, 0, 16)) == "#FF0010"


def test_flags_combine():
    """Flag bits are independent."""
    flags = EffectFlags.RANDOM_COLOUR | EffectFlags.REVERSE
    assert int(flags) == 0x81


def test_effect_parameters_defaults():
    """Secondary colour defaults to black and flags to fixed colour."""
    params = EffectParameters(speed=0xFF, brightness=128, colour=RGB(1, 2, 3))
    assert params.colour2 == RGB(0, 0, 0)
    assert params.flags == 0x20


def test_effect_parameters_bounds():
    with pytest.raises(InvalidParameter):
        EffectParameters(speed=0x100, brightness=0, colour=RGB())
    with pytest.raises(InvalidParameter):
        EffectParameters(speed=0, brightness=300, colour=RGB())
    with pytest.raises(InvalidParameter):
        EffectParameters(speed=0, brightness=0, colour=RGB(), flags=0x1FF)


def test_channel_map_right_fill():
    """Three channels fill slots 0-2; slots 3-14 repeat slot 2."""
    ring = [Channel.RING_CHASE, Channel.RING_STATIC, Channel.RING_SWIRL]
    channel_map = ChannelMap.from_ring(ring)
    assert len(channel_map.ring) == 15
    assert channel_map.ring[:3] == ring
    assert channel_map.ring[3:] == [Channel.RING_SWIRL] * 12
    assert channel_map.logo is Channel.LOGO
    assert channel_map.fan is Channel.FAN


def test_channel_map_empty_raises():
    with pytest.raises(InvalidParameter):
        ChannelMap.from_ring([])


def test_channel_map_too_many_raises():
    with pytest.raises(InvalidParameter):
        ChannelMap.from_ring([Channel.RING_STATIC] * 16)


def test_channel_map_exact_slots():
    """A map built directly must have exactly 15 ring slots."""
    with pytest.raises(InvalidParameter):
        ChannelMap(ring=[Channel.RING_STATIC] * 14)
    with pytest.raises(InvalidParameter):
        ChannelMap(ring=[0x42] * 15)


def test_mirage_settings_bounds():
    MirageSettings(0, 65536, 440)
    with pytest.raises(InvalidParameter):
        MirageSettings(-1, 0, 0)
    with pytest.raises(InvalidParameter):
        MirageSettings(0, 65537, 0)
    with pytest.raises(InvalidParameter):
        MirageSettings(0, 0, 1.5)


@pytest.mark.parametrize("flags", [32.9, "0x20", True])
def test_effect_params_reject_non_integer_flags(flags):
    """Flags are checked before conversion, so 32.9 is not read as 0x20."""
    with pytest.raises(InvalidParameter):
        EffectParameters(speed=0, brightness=0, colour=RGB(), flags=flags)


def test_effect_params_store_flags_as_int():
    params = EffectParameters(
        speed=0, brightness=0, colour=RGB(), flags=EffectFlags.BLEND_COLOURS
    )
    assert params.flags == 0x40
    assert type(params.flags) is int
