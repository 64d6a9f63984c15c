"""Command-line argument definitions for activity preprocessing utilities.

The helpers centralize argument construction so flags stay consistent across
scripts and can be documented in one place.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .preprocessor import DEFAULT_GRADE_DISTANCE_M, DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M


def build_argument_parser() -> argparse.ArgumentParser:
    """Construct the argument parser used by ``analyze_activity.py``.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser ready for ``parse_args``.
    """

    parser = argparse.ArgumentParser(
        description=(
            "Preprocess a FIT activity (merge duplicate samples, impute distance "
            "and speed, smooth elevation, compute grade and pace) and plot the "
            "derived streams."
        ),
    )

    parser.add_argument(
        "--fit_file",
        type=Path,
        required=True,
        help="Path to the .fit file to analyze.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help=(
            "Optional path to save the generated figure instead of displaying it."
        ),
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not open the matplotlib window (useful for headless environments).",
    )
    parser.add_argument(
        "--sport",
        help=(
            "Override the sport recorded in the file when deciding whether a "
            "sample is moving (e.g. running, cycling)."
        ),
    )
    parser.add_argument(
        "--smoothing_distance",
        type=float,
        default=DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M,
        help=(
            "Trailing distance window (m) for elevation smoothing. Non-positive "
            "values fall back to the default (default: %(default)s)."
        ),
    )
    parser.add_argument(
        "--grade_distance",
        type=float,
        default=DEFAULT_GRADE_DISTANCE_M,
        help=(
            "Forward distance window (m) for grade calculation. Non-positive "
            "values fall back to the default (default: %(default)s)."
        ),
    )
    parser.add_argument(
        "--log-level",
        help="Logging level name; defaults to the LOG_LEVEL environment variable or INFO.",
    )

    return parser
