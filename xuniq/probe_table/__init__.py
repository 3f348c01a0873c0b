from .constants import MIN_AUTO_CAPACITY, ProbeOutcome
from .sizing import is_prime, next_prime, plan_capacity
from .table import ProbeTable

__all__ = [
    "MIN_AUTO_CAPACITY",
    "ProbeOutcome",
    "ProbeTable",
    "is_prime",
    "next_prime",
    "plan_capacity",
]
