"""Command line entry point (argparse).

Each positional argument is one command; its words are split on
whitespace::

    wraith-prism "effect logo static 1 255 255 0 0" "ring-map chase"
"""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import DeviceNotFound, InvalidParameter, WraithError
from .models.effects import RGB, Channel, EffectFlags, Mode
from .protocol.encoding import MAX_LEVEL, MIN_LEVEL
from .protocol.parser import ChannelState
from .session import DeviceSession
from .transport.hid_connection import READ_TIMEOUT_MS, HIDConnection

logger = logging.getLogger(__name__)

_REQUIRED = object()

EPILOG = """\
commands:
  ring-map <channel> [<channel> ...]
      set the channel map in order: ring-led1 ... ring-led15;
      missing slots repeat the last channel given
  effect logo|fan <mode> <speed> <brightness> <red> <green> <blue>
                  [<red2> <green2> <blue2> [<flags>]]
      set the effect for the logo or fan; <mode> is static, cycle or breath
  ring-effect <channel> <speed> <brightness> <red> <green> <blue>
                        [<red2> <green2> <blue2> [<flags>]]
      configure the effect of a ring channel
  mirage <red-hz> <green-hz> <blue-hz>
      program mirage rates, 0 disables
  query-channel <id>
      print the raw state of channel <id> (0-15)

ring channels: static, cycle, breath, rainbow, bounce, chase, swirl, morse, off
<speed> is 1 (slow) to 5 (fast) and is ignored by static, bounce and morse.
<flags> is a byte, default 0x20:
  0x80 random colour, 0x40 blend colours, 0x20 fixed colour, 0x01 reverse
"""


class CommandFailed(WraithError):
    """A command word could not be parsed or executed."""

    def __init__(self, command: str, error: Exception) -> None:
        super().__init__(f"{command!r}: {error}")
        self.command = command
        self.error = error


def _value(tokens, index, name, low, high, default=_REQUIRED) -> int:
    """Parse ``tokens[index]`` as an integer (0x.. allowed) in [low, high]."""
    if index >= len(tokens):
        if default is _REQUIRED:
            raise InvalidParameter(f"Missing {name}")
        return default
    text = tokens[index]
    try:
        value = int(text, 0)
    except ValueError:
        raise InvalidParameter(f"Unable to parse {name} {text!r}") from None
    if not low <= value <= high:
        raise InvalidParameter(
            f"Unable to parse {name} {text!r} (range {low} to {high})"
        )
    return value


def _check_arity(tokens, maximum: int) -> None:
    if len(tokens) > maximum:
        raise InvalidParameter(f"Unexpected arguments: {' '.join(tokens[maximum:])}")


def _effect_values(tokens, start: int):
    """Parse ``<speed> <brightness> <r> <g> <b> [<r2> <g2> <b2> [<flags>]]``."""
    _check_arity(tokens, start + 9)
    level = _value(tokens, start, "speed", MIN_LEVEL, MAX_LEVEL)
    brightness = _value(tokens, start + 1, "brightness", 0, 255)
    colour = RGB(
        _value(tokens, start + 2, "red", 0, 255),
        _value(tokens, start + 3, "green", 0, 255),
        _value(tokens, start + 4, "blue", 0, 255),
    )
    colour2 = RGB(
        _value(tokens, start + 5, "red2", 0, 255, 0),
        _value(tokens, start + 6, "green2", 0, 255, 0),
        _value(tokens, start + 7, "blue2", 0, 255, 0),
    )
    flags = _value(tokens, start + 8, "flags", 0, 255, int(EffectFlags.FIXED_COLOUR))
    return level, brightness, colour, colour2, flags


def _word(tokens, index, name) -> str:
    if index >= len(tokens):
        raise InvalidParameter(f"Missing {name}")
    return tokens[index]


def cmd_ring_map(session: DeviceSession, tokens: list[str]):
    if not tokens:
        raise InvalidParameter("ring-map needs at least one channel")
    return session.ring_map([Channel.from_ring_name(t) for t in tokens])


def cmd_effect(session: DeviceSession, tokens: list[str]):
    channel = Channel.from_name(_word(tokens, 0, "channel"))
    mode = Mode.from_name(_word(tokens, 1, "mode"))
    level, brightness, colour, colour2, flags = _effect_values(tokens, 2)
    return session.effect(channel, mode, level, brightness, colour, colour2, flags)


def cmd_ring_effect(session: DeviceSession, tokens: list[str]):
    channel = Channel.from_ring_name(_word(tokens, 0, "ring channel"))
    level, brightness, colour, colour2, flags = _effect_values(tokens, 1)
    return session.ring_effect(channel, level, brightness, colour, colour2, flags)


def cmd_mirage(session: DeviceSession, tokens: list[str]):
    _check_arity(tokens, 3)
    red = _value(tokens, 0, "red-hz", 0, 65536)
    green = _value(tokens, 1, "green-hz", 0, 65536)
    blue = _value(tokens, 2, "blue-hz", 0, 65536)
    return session.mirage(red, green, blue)


def cmd_query_channel(session: DeviceSession, tokens: list[str]):
    _check_arity(tokens, 1)
    return session.query_channel(_value(tokens, 0, "channel id", 0, 0x0F))


COMMANDS = {
    "ring-map": cmd_ring_map,
    "effect": cmd_effect,
    "ring-effect": cmd_ring_effect,
    "mirage": cmd_mirage,
    "query-channel": cmd_query_channel,
}


def run_command(session: DeviceSession, command: str):
    """Parse one command string and run it on the session."""
    logger.debug("Parsing command: %r", command)
    tokens = command.split()
    if not tokens:
        raise InvalidParameter("Empty command")
    handler = COMMANDS.get(tokens[0])
    if handler is None:
        raise InvalidParameter(
            f"Unknown command '{tokens[0]}'. Valid: {list(COMMANDS)}"
        )
    return handler(session, tokens[1:])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wraith-prism",
        description="AMD Wraith Prism RGB configuration utility",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every frame sent and received")
    parser.add_argument("--timeout", type=int, default=READ_TIMEOUT_MS, metavar="MS",
                        help="Reply timeout in milliseconds (0 = wait forever)")
    parser.add_argument("--strict", action="store_true",
                        help="Send no apply at all if any command fails; by default "
                             "commands that succeeded before the failure are "
                             "still applied")
    parser.add_argument("commands", nargs="+", metavar="COMMAND",
                        help="A quoted command, see below")
    return parser


def main(argv=None, connection: HIDConnection | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if connection is None:
        connection = HIDConnection(timeout_ms=args.timeout)

    try:
        with DeviceSession(connection, commit_partial=not args.strict) as session:
            for command in args.commands:
                try:
                    result = run_command(session, command)
                except WraithError as e:
                    raise CommandFailed(command, e) from e
                if isinstance(result, ChannelState):
                    print(result.dump())
    except DeviceNotFound as e:
        logger.error("No device found or device could not be opened: %s", e)
        return 1
    except CommandFailed as e:
        logger.error("Command %r failed: %s", e.command, e.error)
        return 1
    except WraithError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
