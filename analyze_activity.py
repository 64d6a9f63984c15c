"""Command line utility for preprocessing and visualizing FIT activities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.colors import Normalize

from activity_preprocessor.arguments import build_argument_parser
from activity_preprocessor.fit_parser import parse_activity_fit
from activity_preprocessor.logging_config import setup_logging
from activity_preprocessor.preprocessor import Preprocessor, preprocess_records
from activity_preprocessor.records import Record
from activity_preprocessor.series import ActivitySummary, extract_series, summarize

logger = logging.getLogger(__name__)


def _format_pace(seconds_per_km: Optional[float]) -> str:
    if seconds_per_km is None or not np.isfinite(seconds_per_km):
        return "n/a"
    minutes, seconds = divmod(int(round(seconds_per_km)), 60)
    return f"{minutes}:{seconds:02d} /km"


def _print_summary(source: Path, sport: str, summary: ActivitySummary) -> None:
    distance = (
        f"{summary.total_distance_m / 1000:.2f} km"
        if summary.total_distance_m is not None
        else "n/a"
    )
    max_grade = (
        f"{summary.max_grade_percent:.1f} %"
        if summary.max_grade_percent is not None
        else "n/a"
    )
    print(f"Activity: {source.name} ({sport})")
    print(f"  Records:       {summary.record_count}")
    print(f"  Distance:      {distance}")
    print(f"  Elapsed time:  {summary.elapsed_s / 60:.1f} min")
    print(f"  Total ascent:  {summary.total_ascent_m:.0f} m")
    print(f"  Average pace:  {_format_pace(summary.average_pace_s_per_km)}")
    print(f"  Max grade:     {max_grade}")


def _plot_route(ax, records: Sequence[Record]) -> None:
    lons: List[float] = []
    lats: List[float] = []
    grades: List[float] = []
    for record in records:
        if not record.has_position:
            continue
        lons.append(record.position_long)
        lats.append(record.position_lat)
        grades.append(record.grade if record.grade is not None else np.nan)

    if not lons:
        ax.text(0.5, 0.5, "No GPS data", ha="center", va="center")
        ax.set_axis_off()
        return

    grade_series = np.asarray(grades, dtype=float)
    if np.all(np.isnan(grade_series)) or len(lons) < 2:
        ax.plot(lons, lats, color="tab:blue", linewidth=2)
    else:
        coords = np.column_stack((lons, lats))
        segments = np.stack([coords[:-1], coords[1:]], axis=1)
        limit = max(float(np.nanmax(np.abs(grade_series))), 1.0)
        norm = Normalize(vmin=-limit, vmax=limit)
        lc = LineCollection(
            segments,
            cmap=plt.get_cmap("coolwarm"),
            norm=norm,
            linewidths=2.5,
        )
        lc.set_array(np.nan_to_num(grade_series[:-1]))
        line = ax.add_collection(lc)
        colorbar = ax.figure.colorbar(line, ax=ax, pad=0.02)
        colorbar.set_label("Grade (%)")

    ax.plot(lons, lats, color="black", linewidth=0.8, alpha=0.3)
    ax.set_xlabel("Longitude (°)")
    ax.set_ylabel("Latitude (°)")
    ax.set_title("Route (colored by grade)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True)


def _plot_stream(
    ax,
    records: Sequence[Record],
    attribute: str,
    label: str,
    transform: Callable[[np.ndarray], np.ndarray] | None = None,
) -> None:
    series = extract_series(records, attribute)
    if series.values.size == 0:
        ax.text(0.5, 0.5, f"No {label.lower()} data", ha="center", va="center")
        ax.set_axis_off()
        return

    values = transform(series.values) if transform else series.values
    ax.plot(series.times / 60, values, linewidth=1.2)
    ax.set_ylabel(label)
    ax.grid(True)


def _figure_output_path(base: Path, suffix: str) -> Path:
    if base.suffix:
        return base.with_name(f"{base.stem}_{suffix}{base.suffix}")
    return base.with_name(f"{base.name}_{suffix}.png")


def _plot_activity(
    source: Path, records: Sequence[Record], show: bool, output: Path | None
) -> None:
    plt.style.use("ggplot")

    figures: list[tuple[str, plt.Figure]] = []

    route_fig, route_ax = plt.subplots(figsize=(10, 8))
    route_fig.suptitle(f"GPS Route: {source.name}", fontsize=14)
    _plot_route(route_ax, records)
    route_fig.tight_layout(rect=[0, 0.03, 1, 0.95])
    figures.append(("route", route_fig))

    streams: List[Tuple[str, str, Callable[[np.ndarray], np.ndarray] | None]] = [
        ("altitude", "Smoothed altitude (m)", None),
        ("grade", "Grade (%)", None),
        ("speed", "Speed (km/h)", lambda values: values * 3.6),
        ("pace", "Pace (min/km)", lambda values: values / 60),
    ]
    streams_fig, stream_axes = plt.subplots(len(streams), 1, figsize=(12, 10), sharex=True)
    streams_fig.suptitle(f"Derived Streams: {source.name}", fontsize=14)
    for ax, (attribute, label, transform) in zip(stream_axes, streams):
        _plot_stream(ax, records, attribute, label, transform)
    stream_axes[-1].set_xlabel("Time (min)")
    streams_fig.tight_layout(rect=[0, 0.03, 1, 0.95])
    figures.append(("streams", streams_fig))

    if output:
        for suffix, fig in figures:
            target = _figure_output_path(output, suffix)
            target.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(target, dpi=150)
            print(f"Saved {suffix} visualization to {target}")

    if show:
        plt.show()
    else:
        for _, fig in figures:
            plt.close(fig)


def main() -> None:
    parser = build_argument_parser()
    args = parser.parse_args()
    setup_logging(args.log_level)

    fit_path = args.fit_file
    if not fit_path.exists():
        raise FileNotFoundError(f"FIT file not found: {fit_path}")

    activity = parse_activity_fit(fit_path)
    sport = args.sport or activity.sport

    preprocessor = Preprocessor(
        smoothing_elevation_distance=args.smoothing_distance,
        grade_distance=args.grade_distance,
    )
    logger.info(
        "Preprocessing with smoothing window %.1f m and grade window %.1f m",
        preprocessor.options.smoothing_elevation_distance,
        preprocessor.options.grade_distance,
    )
    records = preprocess_records(activity.records, sport, preprocessor)

    _print_summary(activity.source, sport, summarize(records))

    show_plot = not args.no_show and args.output is None
    _plot_activity(activity.source, records, show=show_plot, output=args.output)


if __name__ == "__main__":
    main()
