"""One configuration run against an opened Wraith Prism.

A session sends Enable when it starts, then one frame per requested
operation, and sends a single Apply on the way out if any operation
went through. The device is closed on every exit path.

Operations run strictly in order. The first error ends the batch: it
propagates out of the ``with`` block, so no later operation is tried.
By default settings that did make it to the device are still committed
(``commit_partial=True``); pass ``commit_partial=False`` to skip Apply
whenever the batch ended in an error.
"""

from __future__ import annotations

import logging

from .errors import InvalidParameter, WraithError
from .models.effects import RGB, Channel, ChannelMap, EffectFlags, EffectParameters, Mode
from .protocol.commands import (
    build_apply,
    build_channel_map,
    build_effect_update,
    build_enable,
    build_mirage,
    build_query_channel,
)
from .protocol.encoding import lookup_speed, ring_effect_for, speed_table_for
from .protocol.framing import Reply
from .protocol.parser import ChannelState, parse_channel_state
from .transport.hid_connection import HIDConnection

logger = logging.getLogger(__name__)


class DeviceSession:
    """Sequences Enable, the requested operations and Apply over one handle.

    Usage::

        with DeviceSession() as session:
            session.effect(Channel.LOGO, Mode.STATIC, None, 255, RGB(255, 0, 0))
    """

    def __init__(
        self,
        connection: HIDConnection | None = None,
        *,
        commit_partial: bool = True,
        query_log_level: int = logging.INFO,
    ) -> None:
        self._connection = connection if connection is not None else HIDConnection()
        self._commit_partial = commit_partial
        self._query_log_level = query_log_level
        self.applied = 0
        self.committed = False
        self.transactions: list[bytes] = []

    def __enter__(self) -> DeviceSession:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.commit()
            elif self._commit_partial:
                # the error already in flight is the one to report
                try:
                    self.commit()
                except WraithError as e:
                    logger.error("Apply after error failed: %s", e)
            elif self.applied:
                logger.warning(
                    "Skipping apply of %d operation(s) after error", self.applied
                )
        finally:
            self.close()

    def open(self) -> None:
        """Open the device and enable the lighting controller."""
        self._connection.open()
        try:
            logger.debug("Enable wraith controller.")
            self._transact(build_enable())
        except BaseException:
            self._connection.close()
            raise

    def close(self) -> None:
        self._connection.close()

    def commit(self) -> bool:
        """Send Apply once if at least one operation was applied.

        Returns:
            True if Apply was sent by this call.
        """
        if self.committed or self.applied == 0:
            return False
        logger.debug("Apply settings.")
        self._transact(build_apply())
        self.committed = True
        return True

    # ─── OPERATIONS ──────────────────────────────────────────────────

    def effect(
        self,
        channel: Channel,
        mode: Mode,
        level: int | None,
        brightness: int,
        colour: RGB,
        colour2: RGB | None = None,
        flags: int = EffectFlags.FIXED_COLOUR,
    ) -> Reply:
        """Program the logo or fan with a static, cycle or breath effect.

        Args:
            channel: ``Channel.LOGO`` or ``Channel.FAN``.
            mode: ``Mode.STATIC``, ``Mode.COLOUR_CYCLE`` or ``Mode.BREATH``.
            level: Speed level 1-5; ignored for static.
            brightness: 0-255.
            colour: Primary colour.
            colour2: Secondary colour, black if omitted.
            flags: Effect flags byte.
        """
        if channel not in (Channel.LOGO, Channel.FAN):
            raise InvalidParameter(
                f"Effects apply to the logo or fan, got {channel!r}"
            )
        speed = lookup_speed(speed_table_for(mode), level)
        params = EffectParameters(
            speed=speed,
            brightness=brightness,
            colour=colour,
            colour2=colour2 if colour2 is not None else RGB(),
            flags=flags,
        )
        frame = build_effect_update(channel, mode, params)
        logger.debug("Programming channel 0x%02x.", channel)
        return self._apply(frame)

    def ring_effect(
        self,
        channel: Channel,
        level: int | None,
        brightness: int,
        colour: RGB,
        colour2: RGB | None = None,
        flags: int = EffectFlags.FIXED_COLOUR,
    ) -> Reply:
        """Program one of the ring animation channels.

        The firmware mode and the speed table both follow from the
        channel; see :data:`~wraith_prism.protocol.encoding.RING_EFFECTS`.
        """
        mode, table = ring_effect_for(channel)
        params = EffectParameters(
            speed=lookup_speed(table, level),
            brightness=brightness,
            colour=colour,
            colour2=colour2 if colour2 is not None else RGB(),
            flags=flags,
        )
        frame = build_effect_update(channel, mode, params)
        logger.debug("Programming channel 0x%02x.", channel)
        return self._apply(frame)

    def ring_map(self, ring: list[Channel]) -> Reply:
        """Assign ring channels to the 15 ring LEDs, right-filling the rest."""
        frame = build_channel_map(ChannelMap.from_ring(ring))
        logger.debug("Programming channel map.")
        return self._apply(frame)

    def mirage(self, red_hz: int, green_hz: int, blue_hz: int) -> Reply:
        """Program per-colour mirage rates in Hz (0 disables)."""
        frame = build_mirage(red_hz, green_hz, blue_hz)
        logger.debug("Programming mirage.")
        return self._apply(frame)

    def query_channel(self, channel: int) -> ChannelState:
        """Read back the raw state of a channel.

        This only reads and does not count towards Apply.
        """
        frame = build_query_channel(channel)
        logger.log(self._query_log_level, "Reading channel 0x%02x:", channel)
        reply = self._transact(frame, log_level=self._query_log_level)
        return parse_channel_state(channel, reply)

    # ─── INTERNALS ───────────────────────────────────────────────────

    def _apply(self, frame: bytes) -> Reply:
        reply = self._transact(frame)
        self.applied += 1
        return reply

    def _transact(self, frame: bytes, log_level: int = logging.DEBUG) -> Reply:
        self.transactions.append(frame)
        return self._connection.transact(frame, log_level=log_level)
