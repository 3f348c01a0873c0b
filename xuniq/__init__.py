from . import config
from .compactor import (
    CompactResult,
    build_output,
    compact,
    pad_output,
    uniquify,
    uniquify_batch,
    uniquify_inplace,
)
from .core import base_dataclass
from .exceptions import CapacityExceeded, XuniqError
from .probe_table import ProbeOutcome, ProbeTable, next_prime, plan_capacity

__all__ = [
    # compactor
    "CompactResult",
    "compact",
    "uniquify",
    "uniquify_batch",
    "uniquify_inplace",
    "build_output",
    "pad_output",
    # probe_table
    "ProbeTable",
    "ProbeOutcome",
    "next_prime",
    "plan_capacity",
    # core.dataclass
    "base_dataclass",
    # exceptions
    "CapacityExceeded",
    "XuniqError",
    # environment defaults
    "config",
]
