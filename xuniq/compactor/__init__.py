from .compactor import CompactResult, compact, uniquify, uniquify_batch, uniquify_inplace
from .output import build_output, pad_output

__all__ = [
    "CompactResult",
    "compact",
    "uniquify",
    "uniquify_batch",
    "uniquify_inplace",
    "build_output",
    "pad_output",
]
