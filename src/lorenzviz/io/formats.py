from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict

import numpy as np

CSV_FIELDS = ["x", "y", "z"]


def points_to_list(points: np.ndarray) -> list[list[float]]:
    return [[float(v) for v in row] for row in points]


def write_csv(path: Path, points: np.ndarray) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_FIELDS)
        for row in points:
            writer.writerow([repr(float(v)) for v in row])


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
