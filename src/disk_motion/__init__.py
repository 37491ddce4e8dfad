"""DiskMotion — disk-head scheduling simulator.

Re-exports the engine's public symbols so callers can write::

    from disk_motion import generate, compute_total_seek

The web API lives in ``disk_motion.web.app`` and is not imported here,
so the engine can be used without Flask installed.
"""

from disk_motion.algorithms import (
    Algorithm,
    Direction,
    SchedulingError,
    parse_algorithm,
    parse_direction,
)
from disk_motion.config import DEFAULT_CONFIG, ConfigError, DiskConfig, load_config
from disk_motion.history import (
    POLICIES,
    FCFSPolicy,
    HistoryPolicy,
    SimulationRun,
    SSTFPolicy,
    Step,
    SweepPolicy,
    generate,
)
from disk_motion.requests import (
    RequestSet,
    normalize,
    parse_request_list,
    partition,
    random_workload,
    validate_run_inputs,
)
from disk_motion.stats import AlgorithmResult, average_seek, compare_all, compute_total_seek

__all__ = [
    "DEFAULT_CONFIG",
    "POLICIES",
    "Algorithm",
    "AlgorithmResult",
    "ConfigError",
    "Direction",
    "DiskConfig",
    "FCFSPolicy",
    "HistoryPolicy",
    "RequestSet",
    "SSTFPolicy",
    "SchedulingError",
    "SimulationRun",
    "Step",
    "SweepPolicy",
    "average_seek",
    "compare_all",
    "compute_total_seek",
    "generate",
    "load_config",
    "normalize",
    "parse_algorithm",
    "parse_direction",
    "parse_request_list",
    "partition",
    "random_workload",
    "validate_run_inputs",
]
