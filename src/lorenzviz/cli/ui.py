from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import typer

from lorenzviz.io.config import FullConfig


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def _fmt_point(point) -> str:
    return f"({point[0]:.6f},{point[1]:.6f},{point[2]:.6f})"


def print_run_header(command: str, cfg: FullConfig, config_path: Path | None = None) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()} config={_abs_path(config_path)}")
    lz = cfg.lorenz
    typer.echo(f"[lorenz] sigma={lz.sigma} rho={lz.rho} beta={lz.beta:.6f} dt={lz.dt}")
    tr = cfg.trajectory
    typer.echo(
        f"[trajectory] capacity={tr.capacity} scale={tr.scale} initial={_fmt_point(tr.initial)}"
    )


def print_trajectory_summary(points: np.ndarray, ticks: int, state) -> None:
    typer.echo(f"[trajectory] ticks={ticks} points={len(points)} state={_fmt_point(state)}")
    if len(points):
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        typer.echo(f"[bounds] min={_fmt_point(lo)} max={_fmt_point(hi)}")
        typer.echo(f"[preview] oldest={_fmt_point(points[0])} newest={_fmt_point(points[-1])}")


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
