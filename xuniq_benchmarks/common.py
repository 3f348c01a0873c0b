import time
from typing import Any, Callable, Dict, Tuple

import jax
import numpy as np
from rich.console import Console
from rich.table import Table


def human_format(num, pos=None):
    num = float("{:.3g}".format(num))
    magnitude = 0
    while abs(num) >= 1000:
        magnitude += 1
        num /= 1000.0
    return "{}{}".format(
        "{:f}".format(num).rstrip("0").rstrip("."), ["", "K", "M", "B", "T"][magnitude]
    )


def _median_iqr(times) -> Tuple[float, float]:
    times = np.array(times)
    median_time = np.median(times)
    q75, q25 = np.percentile(times, [75, 25])
    return float(median_time), float(q75 - q25)


def jax_timer(func: Callable[[], Any], trials: int = 10) -> Tuple[float, float]:
    """
    Times a function returning JAX arrays, waiting for device work to finish.
    The first call is a warm-up so compilation is excluded.

    Returns:
        Tuple of (median_time, iqr_time) in seconds.
    """
    jax.block_until_ready(func())

    times = []
    for _ in range(trials):
        start_time = time.perf_counter()
        jax.block_until_ready(func())
        times.append(time.perf_counter() - start_time)
    return _median_iqr(times)


def python_timer(func: Callable[[], Any], trials: int = 10) -> Tuple[float, float]:
    """Times a plain Python function. Returns (median_time, iqr_time) in seconds."""
    times = []
    for _ in range(trials):
        start_time = time.perf_counter()
        func()
        times.append(time.perf_counter() - start_time)
    return _median_iqr(times)


def print_results_table(results: Dict[str, Any], title: str):
    """
    Displays benchmark results in a formatted table using the rich library.
    """
    console = Console()
    table = Table(title=title, show_header=True, header_style="bold magenta")

    table.add_column("Size", justify="right", style="cyan")
    table.add_column("Duplicate Ratio", justify="right", style="green")
    table.add_column("Implementation", style="yellow")
    table.add_column("Values/Sec (Median)", justify="right", style="bold blue")
    table.add_column("IQR", justify="right", style="dim blue")

    rows = results.get("rows", [])
    for i, row in enumerate(rows):
        for impl in ("xuniq", "python"):
            entry = row[impl]
            table.add_row(
                f"{row['size']:,}" if impl == "xuniq" else "",
                f"{row['duplicate_ratio']:.2f}" if impl == "xuniq" else "",
                impl,
                human_format(entry["median"]),
                f"±{human_format(entry['iqr'])}",
            )
        if i < len(rows) - 1:
            table.add_row("", "", "", "", "", end_section=True)

    console.print(table)
