# neuro_scoring/config/config_builder.py
"""Build configuration objects from CLI arguments.

Separates configuration construction from argument parsing.
"""
from __future__ import annotations

import argparse
from typing import Any, Dict

from ..domain.enums import TaskType
from .config import ScoringPolicy, SessionConfig


class ConfigBuilder:
    """Builds configuration objects from parsed CLI arguments.

    Options left at ``None`` keep the canonical value for the task type.
    """

    @staticmethod
    def build_policy(args: argparse.Namespace) -> ScoringPolicy:
        """Build the scoring policy from CLI arguments."""
        policy = ScoringPolicy.for_task(TaskType(args.task))
        overrides: Dict[str, Any] = {}
        for option in (
            "statistic",
            "curve",
            "settling_fraction",
            "segment_size",
            "worst_fraction",
            "sigmoid_steepness",
            "sigmoid_midpoint",
            "linear_scale_factor",
        ):
            value = getattr(args, option, None)
            if value is not None:
                overrides[option] = value
        return policy.with_overrides(**overrides) if overrides else policy

    @classmethod
    def build_session_config(cls, args: argparse.Namespace) -> SessionConfig:
        """Build the session configuration from CLI arguments."""
        overrides: Dict[str, Any] = {"policy": cls.build_policy(args)}
        if getattr(args, "duration", None) is not None:
            overrides["duration_s"] = args.duration
        if getattr(args, "countdown", None) is not None:
            overrides["countdown_s"] = args.countdown
        if getattr(args, "radius", None) is not None:
            overrides["on_target_radius"] = args.radius
        if getattr(args, "no_target_penalty", False):
            overrides["on_target_penalty"] = False
        if getattr(args, "seed", None) is not None:
            overrides["seed"] = args.seed
        return SessionConfig.for_task(TaskType(args.task), **overrides)
