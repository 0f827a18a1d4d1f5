# __main__.py
# Command line entry point: replay a command file or run a stochastic workload.

import argparse
import sys

from . import config
from .errors import MemAllocError
from .log import setup_logging
from .parser import format_commands, parse_file
from .report import print_run
from .simulator import Simulator
from .workload import run_replications, run_workload


def run_file(args):
    workload = parse_file(args.file)
    sim = Simulator(workload.total_memory, strict=args.strict)
    events = sim.run(workload.commands)
    print_run(args.file, workload.total_memory, events, sim.snapshot(), sim.statistics())


def fmt(stat, fmt_mean="{:.2f}", fmt_ci="({:.2f}, {:.2f})"):
    mean = stat.get('mean')
    lo, hi = stat.get('95ci', (None, None))
    if mean is None:
        return "N/A"
    if lo is None or hi is None:
        return fmt_mean.format(mean)
    return f"{fmt_mean.format(mean)} ± {fmt_ci.format(lo, hi)}"


def run_random(args):
    scenario = {
        'total_memory': args.memory,
        'sim_time': args.sim_time,
        'seed': args.seed,
        'max_processes': args.processes,
    }
    if args.no_retry:
        scenario['retry_interval'] = None

    print("\n--- Starting Contiguous Memory Allocation Simulation ---")
    print(f"Total Memory: {args.memory}KB | Block Sizes: {config.BLOCK_SIZES}KB")

    if args.reps > 1:
        out = run_replications(scenario, reps=args.reps)
        agg = out['agg']
        print(f"=== {args.reps} replications (mean ± 95%CI) ===")
        print(f"1. External fragmentation (%) : {fmt(agg['mean_fragmentation'])}")
        print(f"2. Utilization (%)            : {fmt(agg['mean_utilization'])}")
        print(f"3. Free blocks (holes)        : {fmt(agg['mean_free_blocks'])}")
        print(f"4. Successful allocations     : {fmt(agg['successful_allocations'])}")
        print(f"5. Failed allocations         : {fmt(agg['failed_allocations'])}")
        print(f"6. Blocked processes          : {fmt(agg['blocked_processes'])}")
        return

    res = run_workload(scenario)
    print("\n" + "="*90)
    print("TIME | Used (KB) | Free (KB) | Largest Free Block (KB) | # Holes (Fragments) | Failed Requests")
    print("="*90)
    for sample in res.samples:
        s = sample.stats
        print(f"{sample.time:4.1f} | {s.allocated_memory:9d} | {s.free_memory:9d} | {s.largest_free_block:23d} | {s.free_block_count:19d} | {s.failed_allocations:15d}")
    print("="*90)
    print("SIMULATION FINISHED.")
    final = res.final_stats
    print(f"Final Free Memory: {final.free_memory}KB | Final Holes: {final.free_block_count} | "
          f"Total Failed Requests: {final.failed_allocations} | Blocked Processes: {res.blocked_processes}")

    if args.save_trace:
        with open(args.save_trace, "w", encoding="utf-8") as f:
            f.write(format_commands(args.memory, res.trace))
        print(f"Trace written to {args.save_trace}")


def build_parser():
    parser = argparse.ArgumentParser(prog="memalloc-sim", description="First-Fit contiguous memory allocation simulator")
    parser.add_argument('--log-level', type=str, default=None, help="Logging level (default from MEMALLOC_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="Replay REQUEST/RELEASE commands from a file")
    p_run.add_argument('file', type=str, help="Command file, first line is the total memory size")
    p_run.add_argument('--strict', action='store_true', help="Check block list invariants after every command")
    p_run.set_defaults(func=run_file)

    p_wl = sub.add_parser("workload", help="Run a stochastic SimPy workload")
    p_wl.add_argument('--memory', type=int, default=config.TOTAL_MEMORY_SIZE, help="Total memory size (KB)")
    p_wl.add_argument('--processes', type=int, default=config.MAX_PROCESSES, help="Number of arriving processes")
    p_wl.add_argument('--sim-time', type=float, default=config.SIM_TIME, help="Simulated time to run")
    p_wl.add_argument('--seed', type=int, default=config.SEED, help="Random seed")
    p_wl.add_argument('--reps', type=int, default=1, help="Number of replications")
    p_wl.add_argument('--no-retry', action='store_true', help="Failed processes give up instead of retrying")
    p_wl.add_argument('--save-trace', type=str, default=None, help="Write the applied commands to this file")
    p_wl.set_defaults(func=run_random)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper() if args.log_level else None)
    try:
        args.func(args)
    except (MemAllocError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
