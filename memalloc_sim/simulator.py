# simulator.py
# Applies REQUEST / RELEASE commands to a BlockList, one at a time, in order.

import enum
import logging
from collections import namedtuple

from .blocks import BlockList

logger = logging.getLogger(__name__)


class CommandKind(enum.Enum):
    REQUEST = "REQUEST"
    RELEASE = "RELEASE"


class Outcome(enum.Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILED"


Request = namedtuple('Request', ['process', 'size'])
Release = namedtuple('Release', ['process'])

# size is None for RELEASE events, reason is None on success
CommandEvent = namedtuple('CommandEvent', ['kind', 'process', 'size', 'outcome', 'reason'])


class Simulator:
    """
    Drives one BlockList from a stream of parsed commands.

    total_memory: size of the address space
    strict: check the block list invariants after every command
    """
    def __init__(self, total_memory, strict=False):
        self.memory = BlockList(total_memory)
        self.strict = strict
        self.commands_applied = 0

    @property
    def total_memory(self):
        return self.memory.total_memory

    @property
    def successful_allocations(self):
        return self.memory.successful_allocations

    @property
    def failed_allocations(self):
        return self.memory.failed_allocations

    def apply(self, command):
        """Apply a single command and return the resulting CommandEvent."""
        if isinstance(command, Request):
            result = self.memory.allocate(command.process, command.size)
            event = CommandEvent(CommandKind.REQUEST, command.process, command.size,
                                 Outcome.SUCCESS if result.success else Outcome.FAILURE,
                                 result.reason)
        elif isinstance(command, Release):
            result = self.memory.release(command.process)
            event = CommandEvent(CommandKind.RELEASE, command.process, None,
                                 Outcome.SUCCESS if result.success else Outcome.FAILURE,
                                 result.reason)
        else:
            raise TypeError(f"unsupported command: {command!r}")

        self.commands_applied += 1
        if self.strict:
            self.memory.check_invariants()
        return event

    def iter_events(self, commands):
        for command in commands:
            yield self.apply(command)

    def run(self, commands):
        """Apply every command in order and return the list of events."""
        events = list(self.iter_events(commands))
        logger.info("applied %d commands: %d successful, %d failed allocations",
                    len(events), self.successful_allocations, self.failed_allocations)
        return events

    def snapshot(self):
        return self.memory.snapshot()

    def statistics(self):
        return self.memory.statistics()
