"""Import-time defaults read from the environment.

Every public entry point accepts explicit keyword arguments that override
these values; the environment only decides what happens when they are
omitted.
"""
from __future__ import annotations

import os


def _parse_int_env(
    name: str, default: int | None, *, minimum: int = 0, allow_auto: bool = False
) -> int | None:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if allow_auto and value in {"", "none", "auto"}:
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}.")
    return parsed


def _parse_float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number.") from exc
    if not 0.0 < parsed <= 1.0:
        raise ValueError(f"{name} must lie in (0, 1].")
    return parsed


def _parse_choice_env(name: str, default: str, choices: set[str]) -> str:
    value = os.environ.get(name, default).strip().lower()
    if value not in choices:
        raise ValueError(f"Invalid {name}. Expected one of: {', '.join(sorted(choices))}.")
    return value


HASH_NAMES = {"xxhash", "identity"}
VALUE_DTYPE_NAMES = {"uint8", "uint16", "uint32", "uint64"}

# None means the probe table is sized from the input length.
DEFAULT_CAPACITY = _parse_int_env("XUNIQ_CAPACITY", None, minimum=1, allow_auto=True)
DEFAULT_HASH = _parse_choice_env("XUNIQ_HASH", "xxhash", HASH_NAMES)
DEFAULT_SEED = _parse_int_env("XUNIQ_SEED", 0)
DEFAULT_MAX_LOAD_FACTOR = _parse_float_env("XUNIQ_MAX_LOAD_FACTOR", 1.0)
DEFAULT_VALUE_DTYPE = _parse_choice_env("XUNIQ_VALUE_DTYPE", "uint32", VALUE_DTYPE_NAMES)
