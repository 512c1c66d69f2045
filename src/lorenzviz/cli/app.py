from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Optional

import typer

from lorenzviz.core.errors import InvalidParameterError, NumericalInstabilityError
from lorenzviz.core.system.lorenz import LorenzParams
from lorenzviz.core.trajectory.integrator import TrajectoryIntegrator, TrajectoryParams
from lorenzviz.io.config import ConfigError, FullConfig, config_to_dict, load_config
from lorenzviz.io.formats import points_to_list, write_csv, write_json
from lorenzviz.cli.ui import print_done, print_io_write, print_run_header, print_trajectory_summary
from lorenzviz.utils.logging import resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help="Animated Lorenz attractor viewer")
config_app = typer.Typer(help="Configuration utilities (show)")

CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML config file")
SIGMA_OPTION = typer.Option(None, help="Lorenz sigma")
RHO_OPTION = typer.Option(None, help="Lorenz rho")
BETA_OPTION = typer.Option(None, help="Lorenz beta")
DT_OPTION = typer.Option(None, help="Time step for Euler integration")
CAPACITY_OPTION = typer.Option(None, help="Maximum number of trajectory points kept")
SCALE_OPTION = typer.Option(None, help="Display scale applied to trajectory points")


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _resolve(config: Optional[Path], **overrides) -> FullConfig:
    try:
        return load_config(config, **overrides)
    except ConfigError as exc:
        _fail(f"Config error: {exc}")


def _build_integrator(cfg: FullConfig) -> TrajectoryIntegrator:
    try:
        return TrajectoryIntegrator(lorenz=cfg.lorenz, trajectory=cfg.trajectory)
    except InvalidParameterError as exc:
        _fail(f"Invalid parameters: {exc}")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress (INFO)"),
    debug: bool = typer.Option(False, "--debug", help="Log integrator details (DEBUG)"),
):
    setup_logging(resolve_log_level(verbose, debug))


@app.command()
def show(
    config: Optional[Path] = CONFIG_OPTION,
    sigma: Optional[float] = SIGMA_OPTION,
    rho: Optional[float] = RHO_OPTION,
    beta: Optional[float] = BETA_OPTION,
    dt: Optional[float] = DT_OPTION,
    capacity: Optional[int] = CAPACITY_OPTION,
    scale: Optional[float] = SCALE_OPTION,
    fps: Optional[int] = typer.Option(None, help="Animation frames per second"),
):
    """Open the animated attractor window (runs until the window is closed)."""
    set_command_context("show")
    cfg = _resolve(config, sigma=sigma, rho=rho, beta=beta, dt=dt, capacity=capacity, scale=scale, fps=fps)
    integrator = _build_integrator(cfg)

    from lorenzviz.render.viewer import AttractorViewer

    viewer = AttractorViewer(integrator, cfg.view)
    try:
        viewer.show()
    except NumericalInstabilityError as exc:
        _fail(str(exc))


@app.command()
def simulate(
    ticks: int = typer.Option(..., "--ticks", "-n", help="Number of animation ticks to integrate"),
    config: Optional[Path] = CONFIG_OPTION,
    sigma: Optional[float] = SIGMA_OPTION,
    rho: Optional[float] = RHO_OPTION,
    beta: Optional[float] = BETA_OPTION,
    dt: Optional[float] = DT_OPTION,
    capacity: Optional[int] = CAPACITY_OPTION,
    scale: Optional[float] = SCALE_OPTION,
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="CSV output of the buffered points"),
    out_json: Optional[Path] = typer.Option(None, "--out-json", help="Optional JSON output path"),
    json_summary: bool = typer.Option(False, "--json", help="Print summary JSON to stdout"),
):
    """
    Integrate headless and export the buffered (display-scaled) trajectory.
    """
    set_command_context("simulate")
    if ticks < 0:
        _fail("ticks must be >= 0")
    cfg = _resolve(config, sigma=sigma, rho=rho, beta=beta, dt=dt, capacity=capacity, scale=scale)
    integrator = _build_integrator(cfg)

    if not json_summary:
        print_run_header("simulate", cfg, config)
    try:
        points = integrator.run(ticks)
    except NumericalInstabilityError as exc:
        _fail(str(exc))

    if out:
        if not json_summary:
            print_io_write(out)
        write_csv(out, points)
    if out_json:
        if not json_summary:
            print_io_write(out_json)
        write_json(
            out_json,
            {
                "config": config_to_dict(cfg),
                "ticks": integrator.ticks,
                "state": list(integrator.state),
                "points": points_to_list(points),
            },
        )

    if json_summary:
        summary = {
            "ticks": integrator.ticks,
            "points": len(points),
            "state": list(integrator.state),
            "csv": str(out) if out else None,
            "json": str(out_json) if out_json else None,
        }
        typer.echo(json.dumps(summary))
        return

    print_trajectory_summary(points, integrator.ticks, integrator.state)
    print_done(f"{integrator.ticks} ticks, {len(points)} points")


@app.command()
def snapshot(
    out: Path = typer.Option(..., "--out", "-o", help="Image output path (png, svg, pdf)"),
    ticks: int = typer.Option(2000, "--ticks", "-n", help="Ticks to integrate before rendering"),
    config: Optional[Path] = CONFIG_OPTION,
    dt: Optional[float] = DT_OPTION,
    capacity: Optional[int] = CAPACITY_OPTION,
    scale: Optional[float] = SCALE_OPTION,
    dpi: int = typer.Option(150, help="Image resolution"),
):
    """Render a still image of the attractor after a number of ticks."""
    set_command_context("snapshot")
    if ticks < 0:
        _fail("ticks must be >= 0")
    cfg = _resolve(config, dt=dt, capacity=capacity, scale=scale)
    integrator = _build_integrator(cfg)

    from lorenzviz.render.viewer import AttractorViewer

    viewer = AttractorViewer(integrator, cfg.view)
    try:
        viewer.snapshot(out, ticks=ticks, dpi=dpi)
    except NumericalInstabilityError as exc:
        _fail(str(exc))
    finally:
        viewer.close()
    typer.secho(f"Snapshot → {out}", fg=typer.colors.GREEN)


@config_app.command("show")
def config_show(config: Optional[Path] = CONFIG_OPTION):
    """Print the resolved configuration as JSON."""
    set_command_context("config")
    cfg = _resolve(config)
    typer.echo(json.dumps(config_to_dict(cfg), indent=2))


app.add_typer(config_app, name="config")


@app.command()
def selftest():
    """
    Run the built-in Golden Vector test (first Euler step and FIFO eviction).
    """
    set_command_context("selftest")
    integrator = TrajectoryIntegrator(
        lorenz=LorenzParams(sigma=10.0, rho=28.0, beta=8.0 / 3.0, dt=0.005),
        trajectory=TrajectoryParams(capacity=3, scale=0.3, initial=(0.1, 0.0, 0.0)),
        on_tick=None,
    )
    expected = (0.095, 0.014, 0.0)
    first_point = integrator.tick()
    first = integrator.state
    step_ok = all(math.isclose(a, b, abs_tol=1e-12) for a, b in zip(first, expected))

    for _ in range(3):
        integrator.tick()
    fifo_ok = len(integrator) == 3 and integrator.buffer.oldest != first_point

    if step_ok and fifo_ok:
        typer.secho("Selftest passed (Golden Vector).", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Selftest FAILED. first_state={first} buffer_len={len(integrator)}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
