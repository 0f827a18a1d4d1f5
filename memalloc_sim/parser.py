# parser.py
# Reads the line-oriented command format:
#
#   1000
#   REQUEST P1 300
#   RELEASE P1

import logging
from collections import namedtuple

from .errors import CommandParseError
from .simulator import Release, Request

logger = logging.getLogger(__name__)

Workload = namedtuple('Workload', ['total_memory', 'commands'])


def _parse_int(token, what, lineno):
    try:
        return int(token)
    except ValueError:
        raise CommandParseError(f"{what} is not an integer: {token!r}", lineno) from None


def parse_lines(lines):
    """
    Parse an iterable of text lines into a Workload.
    The first non-blank line holds the total memory size; blank lines are skipped.
    """
    total_memory = None
    commands = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue

        if total_memory is None:
            total_memory = _parse_int(line, "total memory", lineno)
            continue

        parts = line.split()
        keyword = parts[0]
        if keyword == "REQUEST":
            if len(parts) != 3:
                raise CommandParseError("expected 'REQUEST <process> <size>'", lineno)
            commands.append(Request(parts[1], _parse_int(parts[2], "size", lineno)))
        elif keyword == "RELEASE":
            if len(parts) != 2:
                raise CommandParseError("expected 'RELEASE <process>'", lineno)
            commands.append(Release(parts[1]))
        else:
            logger.warning("line %d: skipping unknown command %r", lineno, keyword)

    if total_memory is None:
        raise CommandParseError("missing total memory size")
    return Workload(total_memory, commands)


def parse_file(path):
    with open(path, encoding="utf-8") as f:
        return parse_lines(f)


def format_commands(total_memory, commands):
    """Inverse of parse_lines: render a command stream in the text format."""
    lines = [str(total_memory)]
    for command in commands:
        if isinstance(command, Request):
            lines.append(f"REQUEST {command.process} {command.size}")
        else:
            lines.append(f"RELEASE {command.process}")
    return "\n".join(lines) + "\n"
