# workload.py
# Stochastic workload for the First-Fit simulator (SimPy).
#
# Processes arrive with exponential inter-arrival times, request a block size
# drawn from a fixed list, hold the memory for an exponential time and release
# it. Every allocation attempt and release goes through a Simulator, so the
# recorded trace can be replayed with Simulator.run to reach the same state.

import logging
import math
import random
import statistics
from collections import namedtuple

import numpy as np
import simpy

from . import config
from .simulator import Outcome, Release, Request, Simulator

logger = logging.getLogger(__name__)

Sample = namedtuple('Sample', ['time', 'stats'])
WorkloadResult = namedtuple('WorkloadResult', [
    'trace',              # commands in the order they were applied
    'events',             # CommandEvent per command
    'samples',            # periodic Sample(time, SimulationStats)
    'final_stats',
    'blocks',             # final block snapshot
    'blocked_processes',  # processes whose first request failed
])


# ----------------------
# Helper: Confidence Interval (95%)
# ----------------------
def mean_ci_95(data):
    n = len(data)
    if n == 0:
        return (None, None, None)
    mean = statistics.mean(data)
    if n == 1:
        return (mean, mean, mean)
    stdev = statistics.stdev(data)
    # normal approximation
    z = 1.96
    se = stdev / math.sqrt(n)
    return (mean, mean - z*se, mean + z*se)


# ----------------------
# Workload system
# ----------------------
class WorkloadSystem:
    def __init__(self,
                 total_memory=config.TOTAL_MEMORY_SIZE,
                 block_sizes=None,
                 max_processes=config.MAX_PROCESSES,
                 avg_arrival_time=config.AVG_ARRIVAL_TIME,
                 avg_hold_time=config.AVG_HOLD_TIME,
                 retry_interval=config.RETRY_INTERVAL,
                 monitor_interval=config.MONITOR_INTERVAL,
                 sim_time=config.SIM_TIME,
                 seed=None):
        """
        total_memory: size of the simulated address space (KB)
        block_sizes: candidate request sizes, one is drawn per process
        retry_interval: wait between attempts after a failed request; None = give up
        monitor_interval: statistics sampling period (time units); None disables sampling
        """
        self.total_memory = total_memory
        self.block_sizes = list(block_sizes) if block_sizes is not None else list(config.BLOCK_SIZES)
        if not self.block_sizes:
            raise ValueError("block_sizes must not be empty")
        self.max_processes = max_processes
        self.avg_arrival_time = avg_arrival_time
        self.avg_hold_time = avg_hold_time
        self.retry_interval = retry_interval
        self.monitor_interval = monitor_interval
        self.sim_time = sim_time
        self.seed = seed

        # runtime structures (initialized in init)
        self.env = None
        self.simulator = None
        self.rng = None
        self.np_rng = None

        # records
        self.trace = []
        self.events = []
        self.samples = []
        self.blocked_processes = 0

    @classmethod
    def from_scenario(cls, scenario):
        defaults = config.default_scenario()
        return cls(**{key: scenario.get(key, value) for key, value in defaults.items()})

    # ---------- initialization ----------
    def init(self):
        self.rng = random.Random(self.seed)
        self.np_rng = np.random.default_rng(self.seed)
        self.env = simpy.Environment()
        self.simulator = Simulator(self.total_memory)
        self.trace = []
        self.events = []
        self.samples = []
        self.blocked_processes = 0

        self.env.process(self.arrival_generator())
        if self.monitor_interval:
            self.env.process(self.monitor())

    def _apply(self, command):
        self.trace.append(command)
        event = self.simulator.apply(command)
        self.events.append(event)
        return event

    # ---------- arrival generator ----------
    def arrival_generator(self):
        """Generates new process arrivals."""
        for i in range(1, self.max_processes + 1):
            inter_arrival_time = self.np_rng.exponential(self.avg_arrival_time)
            yield self.env.timeout(inter_arrival_time)
            self.env.process(self.process_runner(f"P{i}"))

    # ---------- process ----------
    def process_runner(self, name):
        """The process that requests, holds, and releases memory."""
        requested_size = self.rng.choice(self.block_sizes)
        logger.debug("[%5.1f] %s arrives, requesting %dKB", self.env.now, name, requested_size)

        first_attempt = True
        while True:
            event = self._apply(Request(name, requested_size))
            if event.outcome is Outcome.SUCCESS:
                break

            if first_attempt:
                first_attempt = False
                self.blocked_processes += 1
                stats = self.simulator.statistics()
                logger.info("[%5.1f] %s: allocation FAILED for %dKB (free %dKB, largest block %dKB)",
                            self.env.now, name, requested_size, stats.free_memory, stats.largest_free_block)
            if self.retry_interval is None:
                return
            # let other processes run and hopefully release memory
            yield self.env.timeout(self.retry_interval)

        hold_time = self.np_rng.exponential(self.avg_hold_time)
        logger.debug("[%5.1f] %s allocated %dKB, holding for %.2f", self.env.now, name, requested_size, hold_time)
        yield self.env.timeout(hold_time)

        self._apply(Release(name))
        logger.debug("[%5.1f] %s released %dKB", self.env.now, name, requested_size)

    # ---------- monitor ----------
    def monitor(self):
        """Samples memory usage and fragmentation at fixed time intervals."""
        while True:
            yield self.env.timeout(self.monitor_interval)
            self.samples.append(Sample(self.env.now, self.simulator.statistics()))

    # ---------- run ----------
    def run(self):
        if self.env is None:
            self.init()
        self.env.run(until=self.sim_time)
        return self.results()

    def results(self):
        return WorkloadResult(
            trace=list(self.trace),
            events=list(self.events),
            samples=list(self.samples),
            final_stats=self.simulator.statistics(),
            blocks=self.simulator.snapshot(),
            blocked_processes=self.blocked_processes,
        )


def run_workload(scenario=None, **overrides):
    """Run one stochastic workload; keyword overrides win over scenario keys."""
    scenario = dict(scenario or {})
    scenario.update(overrides)
    return WorkloadSystem.from_scenario(scenario).run()


def summarize_samples(samples):
    """Time-averaged figures over the monitor samples of one run."""
    if not samples:
        return {'mean_fragmentation': 0.0, 'max_fragmentation': 0.0,
                'mean_utilization': 0.0, 'mean_free_blocks': 0.0}
    frag = np.array([s.stats.external_fragmentation for s in samples], dtype=float)
    util = np.array([s.stats.utilization for s in samples], dtype=float)
    holes = np.array([s.stats.free_block_count for s in samples], dtype=float)
    return {
        'mean_fragmentation': float(frag.mean()),
        'max_fragmentation': float(frag.max()),
        'mean_utilization': float(util.mean()),
        'mean_free_blocks': float(holes.mean()),
    }


# ----------------------
# Runner to perform replications
# ----------------------
def run_replications(scenario=None, reps=config.REPLICATIONS):
    """
    Run independent replications (seed + r) of a scenario and aggregate
    per-run figures as {'mean': ..., '95ci': (lo, hi)}.
    """
    if reps <= 0:
        raise ValueError("reps must be positive")
    scenario = dict(scenario or {})
    base_seed = scenario.get('seed', config.SEED)

    results = []
    for r in range(reps):
        logger.info("--- Start replication: %d ---", r)
        seed = base_seed + r if base_seed is not None else None
        results.append(run_workload(scenario, seed=seed))

    def statistics_95(samples):
        mean, lo, hi = mean_ci_95(samples)
        return {'mean': mean, '95ci': (lo, hi)}

    per_run = [summarize_samples(res.samples) for res in results]
    agg = {
        'mean_fragmentation': statistics_95([p['mean_fragmentation'] for p in per_run]),
        'mean_utilization': statistics_95([p['mean_utilization'] for p in per_run]),
        'mean_free_blocks': statistics_95([p['mean_free_blocks'] for p in per_run]),
        'successful_allocations': statistics_95([res.final_stats.successful_allocations for res in results]),
        'failed_allocations': statistics_95([res.final_stats.failed_allocations for res in results]),
        'blocked_processes': statistics_95([res.blocked_processes for res in results]),
    }
    return {'agg': agg, 'results': results}
