# report.py
# Human readable output for a simulation run.

import sys

from .simulator import CommandKind, Outcome

RULE = "=" * 40


def format_event(event):
    if event.kind is CommandKind.REQUEST:
        head = f"REQUEST {event.process} {event.size} KB"
    else:
        head = f"RELEASE {event.process}"
    if event.outcome is Outcome.SUCCESS:
        return f"{head} → SUCCESS"
    return f"{head} → FAILED ({event.reason})"


def format_blocks(blocks):
    lines = []
    for i, b in enumerate(blocks, start=1):
        if b.is_free:
            lines.append(f"Block {i}: [{b.start}-{b.end}]  FREE ({b.size} KB)")
        else:
            lines.append(f"Block {i}: [{b.start}-{b.end}]  {b.owner} ({b.size} KB) - ALLOCATED")
    return lines


def format_statistics(stats):
    return [
        f"Total Memory:           {stats.total_memory} KB",
        f"Allocated Memory:       {stats.allocated_memory} KB",
        f"Free Memory:            {stats.free_memory} KB",
        f"Number of Processes:    {stats.process_count}",
        f"Number of Free Blocks:  {stats.free_block_count}",
        f"Largest Free Block:     {stats.largest_free_block} KB",
        f"External Fragmentation: {stats.external_fragmentation:.2f}%",
        f"Utilization:            {stats.utilization:.2f}%",
        "",
        f"Successful Allocations: {stats.successful_allocations}",
        f"Failed Allocations:     {stats.failed_allocations}",
    ]


def print_run(source, total_memory, events, blocks, stats, out=None):
    """Print the full report: header, one line per command, final state and stats."""
    out = out or sys.stdout

    def emit(line=""):
        print(line, file=out)

    emit(RULE)
    emit("Memory Allocation Simulator (First-Fit)")
    emit(RULE)
    emit()
    emit(f"Reading from: {source}")
    emit(f"Total Memory: {total_memory} KB")
    emit("-" * 40)
    emit()
    emit("Processing requests...")
    emit()
    for event in events:
        emit(format_event(event))

    emit()
    emit(RULE)
    emit("Final Memory State")
    emit(RULE)
    for line in format_blocks(blocks):
        emit(line)

    emit()
    emit(RULE)
    emit("Memory Statistics")
    emit(RULE)
    for line in format_statistics(stats):
        emit(line)
    emit(RULE)
