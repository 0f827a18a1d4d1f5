# blocks.py
# Contiguous memory partitioned into an ordered list of blocks, First-Fit placement.

import logging
from collections import namedtuple

from .errors import FailureReason, InvalidSizeError, InvariantViolation

logger = logging.getLogger(__name__)


# ----------------------
# Block record
# ----------------------
class Block(namedtuple('Block', ['start', 'size', 'owner'])):
    """
    A contiguous address range [start, start + size).
    owner is None for a free block, otherwise the owning process name.
    """
    __slots__ = ()

    @property
    def end(self):
        """Inclusive last address."""
        return self.start + self.size - 1

    @property
    def is_free(self):
        return self.owner is None


AllocResult = namedtuple('AllocResult', ['success', 'reason', 'block'])
ReleaseResult = namedtuple('ReleaseResult', ['success', 'reason', 'block'])

SimulationStats = namedtuple('SimulationStats', [
    'total_memory',
    'allocated_memory',
    'free_memory',
    'process_count',
    'free_block_count',
    'largest_free_block',
    'external_fragmentation',   # percent of total memory
    'utilization',              # percent of total memory
    'successful_allocations',
    'failed_allocations',
])


def _check_size(value, what):
    # bool is an int subclass but never a meaningful size
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidSizeError(f"{what} must be a positive integer, got {value!r}")


# ----------------------
# Block list
# ----------------------
class BlockList:
    """
    Manages contiguous memory using the First Fit allocation strategy.
    Memory is tracked as a list of Block records ordered by start address,
    covering [0, total_memory) with no gaps and no overlaps.
    """
    def __init__(self, total_memory):
        self.total_memory = None
        self.blocks = []
        self.successful_allocations = 0
        self.failed_allocations = 0
        self.initialize(total_memory)

    def initialize(self, total_memory):
        """Reset to a single free block spanning the whole address space."""
        _check_size(total_memory, "total memory")
        self.total_memory = total_memory
        self.blocks = [Block(0, total_memory, None)]
        self.successful_allocations = 0
        self.failed_allocations = 0

    def __len__(self):
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)

    def find_owner(self, process):
        """Return (index, block) of the block owned by process, or (None, None)."""
        for i, block in enumerate(self.blocks):
            if block.owner is not None and block.owner == process:
                return i, block
        return None, None

    # ---------- allocation ----------
    def allocate(self, process, size):
        """Attempts to allocate a contiguous block using First Fit."""
        _check_size(size, "request size")

        if self.find_owner(process)[1] is not None:
            self.failed_allocations += 1
            logger.debug("REQUEST %s %d rejected: process already owns a block", process, size)
            return AllocResult(False, FailureReason.DUPLICATE_PROCESS, None)

        for i, block in enumerate(self.blocks):
            if not block.is_free or block.size < size:
                continue

            allocated = Block(block.start, size, process)
            self.blocks[i] = allocated
            if block.size > size:
                # split: the leftover stays free right after the allocated part
                self.blocks.insert(i + 1, Block(block.start + size, block.size - size, None))

            self.successful_allocations += 1
            logger.debug("REQUEST %s %d placed at [%d-%d]", process, size, allocated.start, allocated.end)
            return AllocResult(True, None, allocated)

        self.failed_allocations += 1
        logger.debug("REQUEST %s %d failed: no free block large enough", process, size)
        return AllocResult(False, FailureReason.INSUFFICIENT_MEMORY, None)

    # ---------- release ----------
    def release(self, process):
        """Frees the block owned by process and merges adjacent free blocks."""
        i, block = self.find_owner(process)
        if block is None:
            logger.debug("RELEASE %s failed: no such process", process)
            return ReleaseResult(False, FailureReason.PROCESS_NOT_FOUND, None)

        self.blocks[i] = Block(block.start, block.size, None)
        self.coalesce()
        logger.debug("RELEASE %s freed [%d-%d]", process, block.start, block.end)
        return ReleaseResult(True, None, block)

    def coalesce(self):
        """Merge adjacent free blocks until no two consecutive blocks are free."""
        i = 0
        while i < len(self.blocks) - 1:
            curr = self.blocks[i]
            nxt = self.blocks[i + 1]
            if curr.is_free and nxt.is_free:
                self.blocks[i] = Block(curr.start, curr.size + nxt.size, None)
                del self.blocks[i + 1]
                # stay on i: the merged block has a new right neighbour
            else:
                i += 1

    # ---------- reporting ----------
    def snapshot(self):
        """Read-only view of the blocks in address order."""
        return tuple(self.blocks)

    def statistics(self):
        """Calculates current memory usage and fragmentation stats."""
        total = 0
        allocated = 0
        processes = 0
        free_blocks = 0
        largest_free = 0
        for block in self.blocks:
            total += block.size
            if block.is_free:
                free_blocks += 1
                largest_free = max(largest_free, block.size)
            else:
                allocated += block.size
                processes += 1

        free = total - allocated
        fragmentation = 0.0
        if free > 0:
            fragmentation = (free - largest_free) / total * 100.0

        return SimulationStats(
            total_memory=total,
            allocated_memory=allocated,
            free_memory=free,
            process_count=processes,
            free_block_count=free_blocks,
            largest_free_block=largest_free,
            external_fragmentation=fragmentation,
            utilization=allocated / total * 100.0,
            successful_allocations=self.successful_allocations,
            failed_allocations=self.failed_allocations,
        )

    def check_invariants(self):
        """Raise InvariantViolation if the blocks no longer partition memory."""
        if not self.blocks:
            raise InvariantViolation("block list is empty")
        if self.blocks[0].start != 0:
            raise InvariantViolation(f"first block starts at {self.blocks[0].start}, not 0")
        if self.blocks[-1].end != self.total_memory - 1:
            raise InvariantViolation(
                f"last block ends at {self.blocks[-1].end}, not {self.total_memory - 1}")

        owners = set()
        for i, block in enumerate(self.blocks):
            if block.size <= 0:
                raise InvariantViolation(f"block {i} has non-positive size {block.size}")
            if block.owner is not None:
                if block.owner in owners:
                    raise InvariantViolation(f"process {block.owner} owns more than one block")
                owners.add(block.owner)
            if i == 0:
                continue
            prev = self.blocks[i - 1]
            if block.start != prev.end + 1:
                raise InvariantViolation(f"gap or overlap between blocks {i - 1} and {i}")
            if prev.is_free and block.is_free:
                raise InvariantViolation(f"adjacent free blocks {i - 1} and {i}")

        total = sum(block.size for block in self.blocks)
        if total != self.total_memory:
            raise InvariantViolation(f"block sizes sum to {total}, expected {self.total_memory}")
