# collector/display.py
import sys
from datetime import datetime
from typing import Optional, Sequence, TextIO

from .models import ContainerMetrics

CLEAR_SCREEN = "\033[2J\033[H"
ROW_FORMAT = "{:<15} {:<30} {:>10} {:>25} {:>10} {:>25} {:>25}"
_UNITS = "KMGTPE"


def format_bytes(n: int) -> str:
    unit = 1024
    if n < unit:
        return f"{n} B"
    div, exp = unit, 0
    m = n // unit
    while m >= unit:
        div *= unit
        exp += 1
        m //= unit
    return f"{n / div:.2f} {_UNITS[exp]}iB"


def _pair(a: int, b: int) -> str:
    return f"{format_bytes(a)} / {format_bytes(b)}"


def print_stats(stats: Sequence[ContainerMetrics], out: Optional[TextIO] = None, now: Optional[datetime] = None) -> None:
    out = out or sys.stdout
    now = now or datetime.now()
    out.write(CLEAR_SCREEN)
    out.write("Docker Container Monitor\n")
    out.write("========================\n")
    out.write(f"Time: {now:%Y-%m-%d %H:%M:%S}\n\n")

    if not stats:
        out.write("No running containers found.\n")
        out.flush()
        return

    header = ROW_FORMAT.format("CONTAINER ID", "NAME", "CPU %", "MEMORY", "MEM %", "NET I/O", "BLOCK I/O")
    out.write(header + "\n")
    out.write("-" * len(header) + "\n")
    for s in stats:
        out.write(
            ROW_FORMAT.format(
                s.id,
                s.name,
                f"{s.cpu_percent:.2f}%",
                _pair(s.memory_usage, s.memory_limit),
                f"{s.memory_percent:.2f}%",
                _pair(s.network_rx, s.network_tx),
                _pair(s.block_read, s.block_write),
            )
            + "\n"
        )
    out.flush()
