import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from xuniq import uniquify
from xuniq_benchmarks.common import jax_timer, print_results_table, python_timer


def make_values(size: int, duplicate_ratio: float, seed: int = 0) -> np.ndarray:
    """Random uint32 values where roughly ``duplicate_ratio`` of the entries repeat earlier ones."""
    rng = np.random.default_rng(seed)
    distinct = max(1, int(size * (1.0 - duplicate_ratio)))
    pool = rng.choice(np.iinfo(np.uint32).max, size=distinct, replace=False).astype(np.uint32)
    return pool[rng.integers(0, distinct, size=size)]


def benchmark_case(size: int, duplicate_ratio: float, trials: int) -> Dict[str, Any]:
    values = make_values(size, duplicate_ratio)
    as_list = values.tolist()

    x_median, x_iqr = jax_timer(lambda: uniquify(values), trials)
    p_median, p_iqr = python_timer(lambda: list(dict.fromkeys(as_list)), trials)

    def _rate(median, iqr):
        return {"median": size / median, "iqr": size * iqr / (median * median)}

    return {
        "size": size,
        "duplicate_ratio": duplicate_ratio,
        "xuniq": _rate(x_median, x_iqr),
        "python": _rate(p_median, p_iqr),
    }


def main(argv: List[str] = None):
    parser = argparse.ArgumentParser(description="Benchmark xuniq.uniquify against dict.fromkeys.")
    parser.add_argument("--max-size", type=int, default=100_000)
    parser.add_argument("--trials", type=int, default=10)
    parser.add_argument(
        "--duplicate-ratios", type=float, nargs="+", default=[0.0, 0.5, 0.9]
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(__file__).parent / "results" / "uniquify_results.json",
    )
    args = parser.parse_args(argv)

    sizes = []
    size = 1_000
    while size <= args.max_size:
        sizes.append(size)
        size *= 10

    rows = [
        benchmark_case(size, ratio, args.trials)
        for size in sizes
        for ratio in args.duplicate_ratios
    ]
    results = {"rows": rows}

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w") as f:
        json.dump(results, f, indent=2)

    print_results_table(results, "uniquify Performance")


if __name__ == "__main__":
    main()
