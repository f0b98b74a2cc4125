from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionBlock

PALETTE = ("red", "green", "yellow", "blue", "magenta", "cyan")

# (pid, start, end); pid is None for an idle gap.
Segment = Tuple[Optional[str], int, int]


def _segments(blocks: Sequence[ExecutionBlock]) -> List[Segment]:
    """
    The timeline from tick 0 with idle gaps made explicit.
    """
    segments: List[Segment] = []
    last_time = 0
    for block in blocks:
        if block.start_time > last_time:
            segments.append((None, last_time, block.start_time))
        segments.append((block.pid, block.start_time, block.end_time))
        last_time = block.end_time
    return segments


def _time_marks(segments: Sequence[Segment]) -> str:
    return " ".join(str(t) for t in [0] + [end for _, _, end in segments])


def render_gantt(blocks: Sequence[ExecutionBlock]) -> str:
    """
    Plain-text Gantt chart. Idle gaps are drawn with dots.
    """
    if not blocks:
        return "(no execution)"

    segments = _segments(blocks)
    line = "|"
    labels = " "
    for pid, start, end in segments:
        width = end - start
        if pid is None:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += pid[:width].ljust(width)
    line += "|"

    return "\n".join(["Gantt Chart:", line, labels.rstrip(), _time_marks(segments)])


def build_rich_gantt(blocks: Sequence[ExecutionBlock]) -> tuple[Panel, str]:
    """
    Rich Gantt chart: one column per segment, headed by its pid or ``idle``,
    with the bar width equal to the segment length. Returns the panel and the
    time marks at every segment boundary.
    """
    if not blocks:
        return Panel("No execution", title="Gantt Chart"), ""

    segments = _segments(blocks)
    colors: Dict[str, str] = {}

    chart = Table(box=box.SIMPLE, show_edge=False, pad_edge=False, padding=(0, 0))
    bars = []
    for pid, start, end in segments:
        width = end - start
        if pid is None:
            chart.add_column(Text("idle", style="dim"), min_width=width, no_wrap=True)
            bars.append(Text("·" * width, style="dim"))
        else:
            color = colors.setdefault(pid, PALETTE[len(colors) % len(PALETTE)])
            chart.add_column(Text(pid, style="bold"), min_width=width, no_wrap=True)
            bars.append(Text(" " * width, style=f"on {color}"))
    chart.add_row(*bars)

    return Panel.fit(chart, title="Gantt Chart"), _time_marks(segments)
