from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from lorenzviz.core.scene.view import ViewParams, camera_angles
from lorenzviz.core.system.lorenz import LorenzParams
from lorenzviz.core.trajectory.integrator import TrajectoryParams


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class FullConfig:
    lorenz: LorenzParams = field(default_factory=LorenzParams)
    trajectory: TrajectoryParams = field(default_factory=TrajectoryParams)
    view: ViewParams = field(default_factory=ViewParams)


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when the viewer config is invalid."""


_NUMBER = (int, float)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    val = data.get(key)
    if val is None:
        return {}
    if not isinstance(val, dict):
        raise ConfigError(f"Section '{key}' must be a mapping, got {type(val)}")
    return val


def _optional(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...], default: Any):
    if key not in mapping:
        return default
    val = mapping[key]
    # bool is an int subclass; never accept it for numeric fields
    if isinstance(val, bool) and bool not in expected_type:
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _vector(mapping: Dict[str, Any], key: str, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    val = _optional(mapping, key, (list, tuple), default)
    if len(val) != 3 or not all(isinstance(v, _NUMBER) and not isinstance(v, bool) for v in val):
        raise ConfigError(f"Key '{key}' must be a list of three numbers, got {val!r}")
    return float(val[0]), float(val[1]), float(val[2])


def _check_view(view: ViewParams) -> None:
    if isinstance(view.fps, bool) or not isinstance(view.fps, int) or view.fps <= 0:
        raise ConfigError(f"view.fps must be a positive integer, got {view.fps!r}")
    if isinstance(view.extent, bool) or not isinstance(view.extent, int) or view.extent <= 0:
        raise ConfigError(f"view.extent must be a positive integer, got {view.extent!r}")
    try:
        camera_angles(view.camera)
    except ValueError as exc:
        raise ConfigError(f"view.camera: {exc}") from exc


def parse_mapping(data: Dict[str, Any] | None) -> FullConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    unknown = sorted(set(data) - {"lorenz", "trajectory", "view"})
    if unknown:
        raise ConfigError(f"Unknown sections {unknown}. Expected: lorenz, trajectory, view")

    lorenz = _section(data, "lorenz")
    trajectory = _section(data, "trajectory")
    view = _section(data, "view")
    defaults = FullConfig()

    lorenz_cfg = LorenzParams(
        sigma=float(_optional(lorenz, "sigma", _NUMBER, defaults.lorenz.sigma)),
        rho=float(_optional(lorenz, "rho", _NUMBER, defaults.lorenz.rho)),
        beta=float(_optional(lorenz, "beta", _NUMBER, defaults.lorenz.beta)),
        dt=float(_optional(lorenz, "dt", _NUMBER, defaults.lorenz.dt)),
    )

    trajectory_cfg = TrajectoryParams(
        capacity=_optional(trajectory, "capacity", (int,), defaults.trajectory.capacity),
        scale=float(_optional(trajectory, "scale", _NUMBER, defaults.trajectory.scale)),
        initial=_vector(trajectory, "initial", defaults.trajectory.initial),
        log_every=_optional(trajectory, "log_every", (int,), defaults.trajectory.log_every),
    )

    view_cfg = ViewParams(
        fps=_optional(view, "fps", (int,), defaults.view.fps),
        rotation_speed=float(_optional(view, "rotation_speed", _NUMBER, defaults.view.rotation_speed)),
        extent=_optional(view, "extent", (int,), defaults.view.extent),
        tick_size=float(_optional(view, "tick_size", _NUMBER, defaults.view.tick_size)),
        background=str(_optional(view, "background", (str,), defaults.view.background)),
        line_color=str(_optional(view, "line_color", (str,), defaults.view.line_color)),
        line_width=float(_optional(view, "line_width", _NUMBER, defaults.view.line_width)),
        camera=_vector(view, "camera", defaults.view.camera),
    )
    _check_view(view_cfg)

    return FullConfig(lorenz=lorenz_cfg, trajectory=trajectory_cfg, view=view_cfg)


def parse_config(path: Path) -> FullConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read YAML: {exc}") from exc
    return parse_mapping(data)


def load_config(path: Path | None = None, **overrides: Any) -> FullConfig:
    """
    Resolve the effective configuration.

    Defaults, then the YAML file (if any), then non-None keyword overrides.
    Override keys are the field names of the three sections; ``sigma`` or
    ``capacity`` land in the section that declares them.
    """
    cfg = parse_config(path) if path is not None else FullConfig()
    updates: Dict[str, Dict[str, Any]] = {"lorenz": {}, "trajectory": {}, "view": {}}
    for key, value in overrides.items():
        if value is None:
            continue
        for section in updates:
            if key in asdict(getattr(cfg, section)):
                updates[section][key] = value
                break
        else:
            raise ConfigError(f"Unknown override '{key}'")
    resolved = FullConfig(
        lorenz=replace(cfg.lorenz, **updates["lorenz"]),
        trajectory=replace(cfg.trajectory, **updates["trajectory"]),
        view=replace(cfg.view, **updates["view"]),
    )
    _check_view(resolved.view)
    return resolved


def config_to_dict(cfg: FullConfig) -> Dict[str, Any]:
    out = asdict(cfg)
    out["trajectory"]["initial"] = list(cfg.trajectory.initial)
    out["view"]["camera"] = list(cfg.view.camera)
    return out
