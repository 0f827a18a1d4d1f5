# config.py
# Default parameters for the simulator and the stochastic workload.

import os

# --- 1. MEMORY ---
TOTAL_MEMORY_SIZE = 2048  # M: Total Memory Size (KB)
BLOCK_SIZES = [256, 512, 768, 1024]  # request sizes drawn by the workload (KB)

# --- 2. WORKLOAD ---
MAX_PROCESSES = 25  # limit the number of arrivals to observe fragmentation
AVG_ARRIVAL_TIME = 5.0  # mean inter-arrival time (time units)
AVG_HOLD_TIME = 10.0    # mean time a process holds memory (time units)
RETRY_INTERVAL = 1.0    # None = a failed process gives up immediately
MONITOR_INTERVAL = 5.0
SIM_TIME = 150.0
SEED = 42
REPLICATIONS = 5

# --- 3. LOGGING ---
LOG_LEVEL = os.getenv("MEMALLOC_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def default_scenario():
    """Workload scenario as a plain dict; callers override keys they care about."""
    return {
        'total_memory': TOTAL_MEMORY_SIZE,
        'block_sizes': list(BLOCK_SIZES),
        'max_processes': MAX_PROCESSES,
        'avg_arrival_time': AVG_ARRIVAL_TIME,
        'avg_hold_time': AVG_HOLD_TIME,
        'retry_interval': RETRY_INTERVAL,
        'monitor_interval': MONITOR_INTERVAL,
        'sim_time': SIM_TIME,
        'seed': SEED,
    }
