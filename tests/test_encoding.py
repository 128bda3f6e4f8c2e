"""Tests for mirage frequency encoding and speed tables."""

import pytest

from wraith_prism.errors import InvalidParameter
from wraith_prism.models.effects import Channel, Mode
from wraith_prism.protocol.encoding import (
    MIRAGE_DISABLED,
    SpeedTable,
    hz_to_bytes,
    lookup_speed,
    ring_effect_for,
    speed_table_for,
)


def test_hz_zero_is_disabled():
    """0 Hz encodes as the fixed disabled triple."""
    assert hz_to_bytes(0) == (0x00, 0xFF, 0x4A)
    assert MIRAGE_DISABLED == (0x00, 0xFF, 0x4A)


def test_hz_1000_reference():
    """1000 Hz: v=1500, m=5, r=1500/5.75=260.869..., r0 wraps to 4.

    Byte order is (divisor, fraction, integer).
    """
    assert hz_to_bytes(1000) == (0x05, 0xDE, 0x04)


def test_hz_100_reference():
    """100 Hz: v=15000, m=58, r=15000/58.75=255.319..."""
    assert hz_to_bytes(100) == (58, 81, 255)


def test_hz_low_frequency_saturates_divisor():
    """1 Hz gives m=5859; the byte saturates but r uses the real divisor."""
    assert hz_to_bytes(1) == (255, 251, 255)


def test_hz_deterministic():
    """Same input should always produce same output."""
    for hz in (1, 45, 440, 1000, 2000, 65536):
        assert hz_to_bytes(hz) == hz_to_bytes(hz)


def test_hz_outputs_are_bytes():
    """Every component fits in a byte across the accepted range."""
    for hz in range(0, 65537, 97):
        triple = hz_to_bytes(hz)
        assert len(triple) == 3
        assert all(0 <= b <= 255 for b in triple)


def test_breath_level_3():
    """Level 3 of the breath table is 0x31."""
    assert lookup_speed(SpeedTable.BREATH, 3) == 0x31
    assert lookup_speed(Mode.BREATH, 3) == 0x31


def test_speed_tables_levels():
    """Spot-check the first and last entry of every table."""
    assert lookup_speed(SpeedTable.COLOUR_CYCLE, 1) == 0x96
    assert lookup_speed(SpeedTable.COLOUR_CYCLE, 5) == 0x68
    assert lookup_speed(SpeedTable.RAINBOW, 1) == 0x72
    assert lookup_speed(SpeedTable.RAINBOW, 5) == 0x61
    assert lookup_speed(SpeedTable.CHASE, 1) == 0x77
    assert lookup_speed(SpeedTable.SWIRL, 5) == 0x67


@pytest.mark.parametrize("table", [
    SpeedTable.BREATH, SpeedTable.COLOUR_CYCLE, SpeedTable.RAINBOW,
    SpeedTable.CHASE, SpeedTable.SWIRL,
])
def test_speed_level_bounds(table):
    """Levels 0 and 6 are rejected for table lookups."""
    with pytest.raises(InvalidParameter):
        lookup_speed(table, 0)
    with pytest.raises(InvalidParameter):
        lookup_speed(table, 6)


def test_table_lookup_requires_level():
    """A table mode with no level should raise."""
    with pytest.raises(InvalidParameter):
        lookup_speed(SpeedTable.BREATH, None)


def test_static_ignores_level():
    """Static always uses 0xFF, whatever the level."""
    assert lookup_speed(SpeedTable.STATIC, None) == 0xFF
    assert lookup_speed(SpeedTable.STATIC, 9) == 0xFF
    assert lookup_speed(Mode.STATIC, 0) == 0xFF


def test_fixed_zero_ignores_level():
    """Bounce and morse always use 0x00."""
    assert lookup_speed(SpeedTable.FIXED_ZERO, 7) == 0x00


def test_ring_effects():
    """Each ring channel maps to one mode and one speed strategy."""
    assert ring_effect_for(Channel.RING_STATIC) == (Mode.RING_DEFAULT, SpeedTable.STATIC)
    assert ring_effect_for(Channel.RING_COLOUR_CYCLE) == (Mode.RING_DEFAULT, SpeedTable.COLOUR_CYCLE)
    assert ring_effect_for(Channel.RING_BREATH) == (Mode.BREATH, SpeedTable.BREATH)
    assert ring_effect_for(Channel.RING_RAINBOW) == (Mode.RING_RAINBOW, SpeedTable.RAINBOW)
    assert ring_effect_for(Channel.RING_BOUNCE) == (Mode.RING_DEFAULT, SpeedTable.FIXED_ZERO)
    assert ring_effect_for(Channel.RING_CHASE) == (Mode.RING_CHASE, SpeedTable.CHASE)
    assert ring_effect_for(Channel.RING_SWIRL) == (Mode.RING_SWIRL, SpeedTable.SWIRL)
    assert ring_effect_for(Channel.RING_MORSE) == (Mode.RING_RAINBOW, SpeedTable.FIXED_ZERO)


def test_ring_effect_rejects_non_ring():
    """Off, logo and fan have no ring effect."""
    for channel in (Channel.OFF, Channel.LOGO, Channel.FAN):
        with pytest.raises(InvalidParameter):
            ring_effect_for(channel)


def test_speed_table_for_ring_mode_raises():
    """Ring-only modes are not valid logo/fan effects."""
    with pytest.raises(InvalidParameter):
        speed_table_for(Mode.RING_CHASE)


@pytest.mark.parametrize("hz", [-1, -5, 1.5, "100", True, None])
def test_hz_rejects_bad_input(hz):
    """Negative and non-integer rates are refused rather than encoded."""
    with pytest.raises(InvalidParameter):
        hz_to_bytes(hz)
