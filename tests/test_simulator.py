import random

import pytest

from memalloc_sim.errors import FailureReason
from memalloc_sim.simulator import (CommandEvent, CommandKind, Outcome, Release,
                                    Request, Simulator)


def test_request_events():
    sim = Simulator(1000)
    events = sim.run([Request("P1", 300), Request("P2", 800), Request("P2", 700)])
    assert events == [
        CommandEvent(CommandKind.REQUEST, "P1", 300, Outcome.SUCCESS, None),
        CommandEvent(CommandKind.REQUEST, "P2", 800, Outcome.FAILURE, FailureReason.INSUFFICIENT_MEMORY),
        CommandEvent(CommandKind.REQUEST, "P2", 700, Outcome.SUCCESS, None),
    ]
    assert sim.successful_allocations == 2
    assert sim.failed_allocations == 1
    assert [(b.start, b.end, b.owner) for b in sim.snapshot()] == [(0, 299, "P1"), (300, 999, "P2")]
    assert sim.statistics().free_block_count == 0


def test_release_events():
    sim = Simulator(1000)
    events = sim.run([Request("P1", 300), Release("P1"), Release("P9")])
    assert events[1] == CommandEvent(CommandKind.RELEASE, "P1", None, Outcome.SUCCESS, None)
    assert events[2].outcome is Outcome.FAILURE
    assert events[2].reason is FailureReason.PROCESS_NOT_FOUND
    assert [(b.start, b.end, b.owner) for b in sim.snapshot()] == [(0, 999, None)]
    assert sim.commands_applied == 3


def test_failed_command_does_not_stop_run():
    sim = Simulator(100)
    events = sim.run([Request("A", 200), Release("B"), Request("C", 100)])
    assert [e.outcome for e in events] == [Outcome.FAILURE, Outcome.FAILURE, Outcome.SUCCESS]


def test_independent_simulators_do_not_share_state():
    first = Simulator(100)
    second = Simulator(100)
    first.apply(Request("A", 50))
    assert second.statistics().allocated_memory == 0
    assert second.successful_allocations == 0


def test_unknown_command_type():
    sim = Simulator(100)
    with pytest.raises(TypeError):
        sim.apply(("REQUEST", "A", 10))


def test_iter_events_is_lazy():
    sim = Simulator(100)
    events = sim.iter_events([Request("A", 10), Request("B", 10)])
    assert sim.commands_applied == 0
    next(events)
    assert sim.commands_applied == 1


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_random_commands_keep_invariants(seed):
    rng = random.Random(seed)
    sim = Simulator(1024, strict=True)
    names = [f"P{i}" for i in range(12)]
    for _ in range(300):
        name = rng.choice(names)
        if rng.random() < 0.55:
            sim.apply(Request(name, rng.randint(1, 300)))
        else:
            sim.apply(Release(name))
        stats = sim.statistics()
        assert stats.total_memory == 1024
        assert stats.allocated_memory + stats.free_memory == 1024
        owners = [b.owner for b in sim.snapshot() if b.owner is not None]
        assert len(owners) == len(set(owners))
