"""Result record produced when a task attempt reaches Done."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .enums import TaskType


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TaskResult:
    """Immutable outcome of one task attempt.

    ``series`` holds the trailing positions ``(x, y)`` for the motor task and
    the trailing deltas for the ocular task, for charting only.
    """

    task_type: TaskType
    score: float
    sample_count: int
    series: Tuple[Any, ...]
    aux_stats: Mapping[str, Any]
    was_skipped: bool
    restart_count: int
    on_target_percent: Optional[int] = None
    completed_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "aux_stats", MappingProxyType(dict(self.aux_stats)))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable mapping."""
        if self.task_type is TaskType.MOTOR:
            series = [list(p) for p in self.series]
        else:
            series = list(self.series)
        return {
            "task_type": self.task_type.value,
            "score": self.score,
            "sample_count": self.sample_count,
            "series": series,
            "aux_stats": dict(self.aux_stats),
            "on_target_percent": self.on_target_percent,
            "was_skipped": self.was_skipped,
            "restart_count": self.restart_count,
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TaskResult:
        task_type = TaskType(data["task_type"])
        if task_type is TaskType.MOTOR:
            series = tuple((float(p[0]), float(p[1])) for p in data["series"])
        else:
            series = tuple(float(d) for d in data["series"])
        return cls(
            task_type=task_type,
            score=float(data["score"]),
            sample_count=int(data["sample_count"]),
            series=series,
            aux_stats=data.get("aux_stats", {}),
            was_skipped=bool(data["was_skipped"]),
            restart_count=int(data["restart_count"]),
            on_target_percent=data.get("on_target_percent"),
            completed_at=datetime.fromisoformat(data["completed_at"]),
        )
