"""Protocol layer: frame layout, numeric encodings, builders and reply parsing."""

from .framing import COMMAND_SIZE, REPLY_SIZE, Reply
from .commands import Command
