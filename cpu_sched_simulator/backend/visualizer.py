from __future__ import annotations

from typing import List, Optional, Dict
import os
import matplotlib.pyplot as plt

from .core import Process
from .utils import EventLogger


def ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def plot_gantt(processes: List[Process], logger: EventLogger, out_path: Optional[str] = None, title: Optional[str] = None) -> None:
    fig, ax = plt.subplots(figsize=(12, 2 + 0.4 * max(1, len(processes))))

    cmap = plt.get_cmap("tab20")
    y_positions: Dict[int, int] = {p.pid: i for i, p in enumerate(processes)}

    for seg in logger.timeline:
        pid = seg.get("pid")
        start = seg["start"]
        end = seg["end"]
        if pid is None:
            # idle stretch drawn as a shaded band across all rows
            ax.axvspan(start, end, color="#dddddd", alpha=0.5, zorder=0)
            continue
        ax.barh(y_positions[pid], end - start, left=start, color=cmap(pid % 20), edgecolor="black", alpha=0.9)

    # arrival markers
    for p in processes:
        ax.plot(p.arrival_time, y_positions[p.pid], marker="|", color="#444444", markersize=14)

    policy = logger.timeline[0]["policy"] if logger.timeline else ""
    ax.set_yticks([y_positions[p.pid] for p in processes])
    ax.set_yticklabels([f"P{p.pid}" for p in processes])
    ax.invert_yaxis()
    ax.set_xlabel("Tick")
    ax.set_title(title or f"Gantt Chart ({policy})")
    ax.grid(True, axis="x", linestyle=":", alpha=0.5)
    fig.tight_layout()

    if out_path:
        ensure_dir(out_path)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()
