# neuro_scoring/io.py
"""
Reading and writing landmark recordings and task results.

Landmark recordings are long-format TSV files, one row per landmark per
frame:

    frame   landmark    x       y       z
    0       0           0.512   0.488   0.0
    1       0           0.511   0.490   0.0
    3       0           0.513   0.489   0.0

Frames without rows (frame 2 above) had no detection.
"""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import pandas as pd

from .config import ValidationMessages
from .domain import Detection, Landmark, LandmarkKind, TaskResult, TaskType

REQUIRED_COLUMNS = ("frame", "landmark", "x", "y")

PathLike = Union[str, Path]


def read_landmark_tsv(path: PathLike) -> pd.DataFrame:
    """
    Read a long-format landmark TSV.

    Args:
        path: Path to the TSV file

    Returns:
        DataFrame sorted by frame and landmark, with a ``z`` column

    Raises:
        ValueError: If a required column is missing
    """
    df = pd.read_csv(path, sep="\t", low_memory=False)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{ValidationMessages.MISSING_LANDMARK_COLUMNS} (missing: {', '.join(missing)})")
    if "z" not in df.columns:
        df["z"] = 0.0
    df["frame"] = df["frame"].astype(int)
    df["landmark"] = df["landmark"].astype(int)
    return df.sort_values(["frame", "landmark"], kind="stable").reset_index(drop=True)


def write_landmark_tsv(df: pd.DataFrame, path: PathLike) -> None:
    df.to_csv(path, sep="\t", index=False)


def detections_to_frame(detections: Iterable[Optional[Detection]]) -> pd.DataFrame:
    """Long-format frame of a detection sequence; ``None`` entries leave a gap."""
    rows = []
    for frame, detection in enumerate(detections):
        if detection is None:
            continue
        for index, lm in sorted(detection.landmarks.items()):
            rows.append({"frame": frame, "landmark": index, "x": lm.x, "y": lm.y, "z": lm.z})
    return pd.DataFrame(rows, columns=["frame", "landmark", "x", "y", "z"])


def iter_detections(df: pd.DataFrame, kind: LandmarkKind) -> Iterator[Optional[Detection]]:
    """
    One detection per frame from the first to the last frame index.

    Args:
        df: Long-format landmark frame (see ``read_landmark_tsv``)
        kind: Landmark set the rows belong to

    Yields:
        Detection per frame, or None for frames without rows
    """
    if df.empty:
        return
    grouped = {frame: group for frame, group in df.groupby("frame", sort=True)}
    first, last = min(grouped), max(grouped)
    for frame in range(first, last + 1):
        group = grouped.get(frame)
        if group is None:
            yield None
            continue
        landmarks = {
            int(row.landmark): Landmark(float(row.x), float(row.y), _z(getattr(row, "z", 0.0)))
            for row in group.itertuples(index=False)
        }
        yield Detection(kind, landmarks)


def _z(value) -> float:
    z = float(value)
    return 0.0 if math.isnan(z) else z


def kind_for_task(task_type: TaskType) -> LandmarkKind:
    return LandmarkKind.HAND if task_type is TaskType.MOTOR else LandmarkKind.FACE


def result_series_frame(result: TaskResult) -> pd.DataFrame:
    """Charting series of a result as a DataFrame."""
    if result.task_type is TaskType.MOTOR:
        return pd.DataFrame(list(result.series), columns=["x", "y"])
    return pd.DataFrame({"delta": list(result.series)})


def write_result_json(result: TaskResult, path: PathLike) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)


def read_result_json(path: PathLike) -> TaskResult:
    with open(path, "r", encoding="utf-8") as f:
        return TaskResult.from_dict(json.load(f))


def results_frame(results: List[TaskResult]) -> pd.DataFrame:
    """Summary table of several results (series omitted)."""
    rows = []
    for r in results:
        row = r.to_dict()
        row.pop("series")
        aux = row.pop("aux_stats")
        row.update({f"aux_{k}": v for k, v in aux.items()})
        rows.append(row)
    return pd.DataFrame(rows)
