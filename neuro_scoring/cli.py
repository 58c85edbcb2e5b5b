# neuro_scoring/cli.py
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import ConfigBuilder
from .domain import TaskType
from .interpretation import clinical_classification, score_label
from .io import (
    iter_detections,
    kind_for_task,
    read_landmark_tsv,
    result_series_frame,
    write_result_json,
)
from .observers import LoggingReporter, ResultRecorder
from .replay import replay_session


def build_arg_parser() -> argparse.ArgumentParser:
    """
    CLI parser for offline scoring of a recorded landmark stream.

    Parsing and option descriptions only; configuration is built by
    ConfigBuilder.
    """
    parser = argparse.ArgumentParser(
        prog="neuro-scoring",
        description=(
            "Replay a recorded hand or face landmark stream through a task "
            "session and print the final stability score."
        ),
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Landmark TSV with frame, landmark, x, y and optional z columns.",
    )
    parser.add_argument(
        "--task",
        choices=[t.value for t in TaskType],
        required=True,
        help="motor: wrist steadiness from hand landmarks. ocular: gaze steadiness from face landmarks.",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=30.0,
        help="Frame rate of the recording (default: 30).",
    )
    parser.add_argument(
        "--output",
        required=False,
        help="Optional path of the result JSON.",
    )
    parser.add_argument(
        "--series-output",
        required=False,
        help="Optional TSV path for the charting series.",
    )
    parser.add_argument(
        "--log-file",
        required=False,
        help="Optional CSV file; one row per completed task is appended.",
    )

    # Session
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Tracking duration in seconds (default: 15).",
    )
    parser.add_argument(
        "--countdown",
        type=float,
        default=None,
        help="Countdown before tracking in seconds (default: 3 motor, 0 ocular).",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="On-target radius in normalized units (default: 0.15).",
    )
    parser.add_argument(
        "--no-target-penalty",
        action="store_true",
        help="Do not scale the ocular score by the on-target percentage.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for target relocation.",
    )

    # Scoring policy
    parser.add_argument(
        "--statistic",
        choices=["position_variance", "position_rms", "delta_rms", "delta_mean"],
        default=None,
        help="Dispersion statistic (default: position_rms motor, delta_rms ocular).",
    )
    parser.add_argument(
        "--curve",
        choices=["sigmoid", "linear", "log"],
        default=None,
        help="Response curve mapping the statistic to 0..100 (default: sigmoid).",
    )
    parser.add_argument("--settling-fraction", type=float, default=None)
    parser.add_argument("--segment-size", type=int, default=None)
    parser.add_argument("--worst-fraction", type=float, default=None)
    parser.add_argument("--sigmoid-steepness", type=float, default=None)
    parser.add_argument("--sigmoid-midpoint", type=float, default=None)
    parser.add_argument("--linear-scale-factor", type=float, default=None)

    parser.add_argument(
        "--plot",
        action="store_true",
        help="Plot the charting series (requires matplotlib).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigBuilder.build_session_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    # 1) Read landmarks
    df = read_landmark_tsv(args.input)
    detections = iter_detections(df, kind_for_task(config.task_type))

    # 2) Replay session
    observers = [LoggingReporter()]
    if args.log_file is not None:
        observers.append(ResultRecorder(args.log_file))
    result = replay_session(detections, config, fps=args.fps, observers=observers)

    # 3) Report
    print(
        f"[{result.task_type.value}] score={result.score:.1f} "
        f"({score_label(result.score)}, {clinical_classification(result.score)}), "
        f"samples={result.sample_count}"
        + (
            f", on_target={result.on_target_percent}%"
            if result.on_target_percent is not None
            else ""
        )
    )

    if args.output is not None:
        write_result_json(result, args.output)
    if args.series_output is not None:
        result_series_frame(result).to_csv(args.series_output, sep="\t", index_label="frame")

    if args.plot:
        from .plotting import plot_result_series

        plot_result_series(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
