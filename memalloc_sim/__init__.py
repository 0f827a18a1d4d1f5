from .blocks import AllocResult, Block, BlockList, ReleaseResult, SimulationStats
from .errors import (CommandParseError, FailureReason, InvalidSizeError,
                     InvariantViolation, MemAllocError)
from .parser import Workload, parse_file, parse_lines
from .simulator import CommandEvent, CommandKind, Outcome, Release, Request, Simulator

__version__ = "0.1.0"

__all__ = [
    "AllocResult", "Block", "BlockList", "ReleaseResult", "SimulationStats",
    "CommandParseError", "FailureReason", "InvalidSizeError", "InvariantViolation",
    "MemAllocError", "Workload", "parse_file", "parse_lines",
    "CommandEvent", "CommandKind", "Outcome", "Release", "Request", "Simulator",
]
