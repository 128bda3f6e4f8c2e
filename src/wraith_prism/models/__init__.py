"""Data models for channels, modes, colours and effect settings."""

from .effects import (
    Channel,
    Mode,
    EffectFlags,
    RGB,
    EffectParameters,
    ChannelMap,
    MirageSettings,
)
