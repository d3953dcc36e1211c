"""
srs-insight command line.

Commands:
    srs-insight forecast        - Daily / weekly review workload forecast
    srs-insight level-forecast  - Level reached for a lessons/day budget
    srs-insight queue           - Reviews coming up in the next 24 hours
    srs-insight pace            - Level pace analysis and level 60 projection
    srs-insight level           - Progress on one level
    srs-insight grid            - SRS band distribution per level
    srs-insight leeches         - Ranked leeches, confusion pairs, root causes
    srs-insight accuracy        - Accuracy by answer kind, type and level
    srs-insight stability       - Solid vs fragile passed items
    srs-insight readiness       - Jōyō grade readiness and approximate JLPT level
    srs-insight milestones      - Achieved and upcoming milestones
    srs-insight burns           - Burn velocity and projection

Every command reads a JSON dataset via --data. Defaults come from
SRS_INSIGHT_* environment variables (see srs_insight.config).
"""
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from srs_insight.analytics.accuracy import calculate_accuracy_metrics, get_low_accuracy_items
from srs_insight.analytics.burn_velocity import Trend, calculate_burn_velocity
from srs_insight.analytics.jlpt_readiness import SrsThreshold, calculate_joyo_readiness, get_cumulative_counts
from srs_insight.analytics.kanji_grid import SrsBand, calculate_level_distribution
from srs_insight.analytics.leeches import (
    LeechThresholds,
    detect_leeches,
    find_confusion_pairs,
    find_root_cause_radicals,
)
from srs_insight.analytics.level_progress import calculate_level_progress
from srs_insight.analytics.milestones import calculate_milestones
from srs_insight.analytics.stability import calculate_knowledge_stability
from srs_insight.cli.loader import DatasetLoadError, load_dataset, load_joyo_kanji
from srs_insight.config import get_settings
from srs_insight.core.catalog import preferred_progression
from srs_insight.core.models import Dataset, SubjectType
from srs_insight.forecast.level_progression import calculate_level_progression_forecast
from srs_insight.forecast.review_queue import calculate_review_forecast
from srs_insight.forecast.weekly import aggregate_to_weekly
from srs_insight.forecast.workload import calculate_workload_forecast
from srs_insight.pace.analyzer import Pace
from srs_insight.pace.projection import project_level_completion, project_level_milestones

console = Console()

app = typer.Typer(
    name="srs-insight",
    help="SRS analytics - workload forecasts, pace projections, leeches and progress",
    no_args_is_help=True,
)

DATA_OPTION = typer.Option(..., "--data", "-f", help="Learner dataset (JSON)")

PACE_STYLES = {
    Pace.FAST: "green",
    Pace.GOOD: "cyan",
    Pace.SLOW: "yellow",
    Pace.VERY_SLOW: "red",
}

TREND_ARROWS = {Trend.UP: "[green]^[/green]", Trend.DOWN: "[red]v[/red]", Trend.STABLE: "[dim]=[/dim]"}

BAND_STYLES = {
    SrsBand.LOCKED: "dim",
    SrsBand.APPRENTICE: "magenta",
    SrsBand.GURU: "purple",
    SrsBand.MASTER: "blue",
    SrsBand.ENLIGHTENED: "cyan",
    SrsBand.BURNED: "yellow",
}


def _load(data: Path) -> Dataset:
    try:
        return load_dataset(data)
    except DatasetLoadError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _format_progress_bar(percent: float, width: int = 20) -> str:
    filled = int(max(0.0, min(percent, 100.0)) / 100 * width)
    return "#" * filled + "-" * (width - filled)


def _fmt_date(moment: datetime | None) -> str:
    return moment.strftime("%Y-%m-%d") if moment else "-"


def _accuracy_color(percent: float) -> str:
    return "green" if percent >= 90 else "yellow" if percent >= 75 else "red"


# =============================================================================
# Forecasts
# =============================================================================


@app.command("forecast")
def forecast(
    data: Path = DATA_OPTION,
    lessons: Optional[int] = typer.Option(None, "--lessons", "-l", help="Lessons per day"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Forecast horizon in days"),
    weekly: bool = typer.Option(False, "--weekly/--daily", help="Group the forecast by week"),
) -> None:
    """
    Forecast daily review workload.

    Simulates existing items plus new lessons starting tomorrow.
    """
    settings = get_settings()
    dataset = _load(data)
    lessons_per_day = settings.lessons_per_day if lessons is None else lessons
    forecast_days = settings.forecast_days if days is None else days

    try:
        result = calculate_workload_forecast(
            dataset.assignments,
            dataset.review_statistics,
            lessons_per_day=lessons_per_day,
            forecast_days=forecast_days,
            user_id=dataset.user.id,
        )
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if weekly:
        table = Table(title=f"Weekly Workload ({lessons_per_day} lessons/day)")
        table.add_column("Week", justify="right")
        table.add_column("Dates")
        table.add_column("Existing", justify="right")
        table.add_column("New", justify="right")
        table.add_column("Total", justify="right", style="bold")
        table.add_column("Avg/day", justify="right")
        for week in aggregate_to_weekly(result.daily_forecast, settings.week_start):
            table.add_row(
                str(week.week_number),
                f"{week.start_date:%b %d} - {week.end_date:%b %d}",
                str(week.existing_reviews),
                str(week.new_lesson_reviews),
                str(week.total_reviews),
                str(week.daily_average),
            )
    else:
        table = Table(title=f"Daily Workload ({lessons_per_day} lessons/day)")
        table.add_column("Date")
        table.add_column("Existing", justify="right")
        table.add_column("New", justify="right")
        table.add_column("Total", justify="right", style="bold")
        for day in result.daily_forecast:
            table.add_row(
                f"{day.date:%a %b %d}",
                str(day.existing_reviews),
                str(day.new_lesson_reviews),
                str(day.total_reviews),
            )
    console.print(table)

    metrics = result.metrics
    content = Text()
    content.append(f"Total reviews: {metrics.total_reviews}\n", style="bold")
    content.append(f"Average/day: {metrics.average_daily}  Min: {metrics.min_daily}  Max: {metrics.max_daily}\n")
    if metrics.peak_day is not None:
        content.append(f"Peak: {metrics.peak_day.count} on {metrics.peak_day.date:%b %d}\n", style="yellow")
    if metrics.stabilization_day is not None:
        content.append(f"Stabilizes from: {metrics.stabilization_day.date:%b %d}\n", style="green")
    else:
        content.append("Stabilizes from: not within horizon\n", style="dim")
    content.append(
        f"Existing {result.breakdown.existing_percentage}% / "
        f"New lessons {result.breakdown.new_lessons_percentage}%  "
        f"(accuracy {result.accuracy:.0%})"
    )
    console.print(Panel(content, title="[bold]Workload Metrics[/bold]", border_style="blue"))


@app.command("level-forecast")
def level_forecast(
    data: Path = DATA_OPTION,
    lessons: Optional[int] = typer.Option(None, "--lessons", "-l", help="Lessons per day"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Horizon in days"),
    include_vocabulary: Optional[bool] = typer.Option(
        None,
        "--include-vocabulary/--exclude-vocabulary",
        help="Count vocabulary toward level completion",
    ),
) -> None:
    """Project the level reached by spending the lesson budget."""
    settings = get_settings()
    dataset = _load(data)
    lessons_per_day = settings.lessons_per_day if lessons is None else lessons
    forecast_days = settings.forecast_days if days is None else days
    with_vocabulary = settings.forecast_include_vocabulary if include_vocabulary is None else include_vocabulary

    result = calculate_level_progression_forecast(
        dataset.subjects,
        dataset.assignments,
        current_level=dataset.user.level,
        lessons_per_day=lessons_per_day,
        forecast_days=forecast_days,
        include_vocabulary=with_vocabulary,
    )

    content = Text()
    content.append(f"{lessons_per_day} lessons/day for {forecast_days} days\n\n")
    content.append(f"Level {result.starting_level} -> Level {result.projected_level}", style="bold")
    content.append(f"  (+{result.levels_gained})\n")
    content.append(f"{_format_progress_bar(result.progress_in_final_level)} {result.progress_in_final_level}%\n")
    content.append(f"Lessons completed: {result.lessons_completed}\n")
    if result.completed_curriculum:
        content.append("Curriculum complete!", style="bold green")
    console.print(Panel(content, title="[bold]Level Forecast[/bold]", border_style="blue"))


@app.command("queue")
def queue(data: Path = DATA_OPTION) -> None:
    """Show reviews becoming available in the next 24 hours."""
    dataset = _load(data)
    result = calculate_review_forecast(dataset.assignments)

    rprint(f"\n[bold]Available now:[/bold] {result.current}")
    rprint(
        f"[dim]Next 2h:[/dim] {result.next_2h}  [dim]6h:[/dim] {result.next_6h}  "
        f"[dim]12h:[/dim] {result.next_12h}  [dim]24h:[/dim] {result.next_24h}"
    )
    if result.peak.count > 0:
        rprint(f"[yellow]Peak hour:[/yellow] {result.peak.time:%H:00} ({result.peak.count} reviews)")

    table = Table(title="Hourly Breakdown")
    table.add_column("Hour")
    table.add_column("Reviews", justify="right")
    for hour in result.hourly_breakdown:
        if hour.count:
            table.add_row(f"{hour.time:%a %H:00}", str(hour.count))
    console.print(table)


# =============================================================================
# Pace & Progress
# =============================================================================


@app.command("pace")
def pace(data: Path = DATA_OPTION) -> None:
    """
    Analyze level pace and project reaching level 60.

    Breaks (outlier levels) are excluded per SRS_INSIGHT_AUTO_EXCLUDE_BREAKS
    or a custom day threshold.
    """
    settings = get_settings()
    dataset = _load(data)
    options = settings.get_pace_options()

    projection = project_level_completion(dataset.user.level, dataset.level_progressions, options)

    if projection.is_complete:
        rprint("[bold green]Level 60 reached. Nothing left to project.[/bold green]")
        return

    analysis = projection.analysis
    if analysis is not None and analysis.included_levels:
        table = Table(title="Level Durations")
        table.add_column("Level", justify="right")
        table.add_column("Days", justify="right")
        table.add_column("Pace")
        for level in sorted(analysis.included_levels, key=lambda lvl: lvl.level):
            style = PACE_STYLES[level.pace]
            table.add_row(str(level.level), str(level.days), f"[{style}]{level.pace.value}[/{style}]")
        for excluded in projection.excluded_levels:
            table.add_row(str(excluded.level), str(excluded.days), f"[dim]excluded: {excluded.reason}[/dim]")
        console.print(table)
    else:
        rprint("[yellow]No completed levels yet, using default pace.[/yellow]")

    content = Text()
    content.append(f"Fast track:    {_fmt_date(projection.fast_track)}\n", style="green")
    content.append(
        f"Expected:      {_fmt_date(projection.expected)}  ({projection.days_per_level} days/level)\n",
        style="bold",
    )
    content.append(f"Conservative:  {_fmt_date(projection.conservative)}\n", style="yellow")
    content.append(
        f"All levels:    {_fmt_date(projection.expected_all_levels)}  "
        f"({projection.all_levels_days_per_level} days/level, no exclusions)\n",
        style="dim",
    )
    content.append(
        f"\nMedian {projection.median_days_per_level}d  |  "
        f"Fastest L{projection.fastest_level.level} ({projection.fastest_level.days}d)  |  "
        f"Slowest L{projection.slowest_level.level} ({projection.slowest_level.days}d)"
    )
    console.print(Panel(content, title="[bold]Level 60 Projection[/bold]", border_style="blue"))

    for milestone in project_level_milestones(dataset.user.level, projection.days_per_level):
        if milestone.status == "completed":
            rprint(f"  [green][OK][/green] Level {milestone.level}")
        else:
            rprint(f"  [cyan][>][/cyan] Level {milestone.level}: {_fmt_date(milestone.date)}")


@app.command("level")
def level(
    data: Path = DATA_OPTION,
    number: Optional[int] = typer.Option(None, "--level", "-n", help="Level (default: current)"),
) -> None:
    """Show started / guru progress on one level."""
    dataset = _load(data)
    selected = dataset.user.level if number is None else number
    progression = preferred_progression(dataset.level_progressions, selected)

    result = calculate_level_progress(
        dataset.assignments,
        dataset.subjects,
        level=selected,
        current_level=dataset.user.level,
        unlocked_at=progression.unlocked_at if progression else None,
        passed_at=progression.passed_at if progression else None,
    )

    title = f"Level {selected}" + (" (current)" if result.is_current_level else "")
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Started", justify="right")
    table.add_column("Guru+", justify="right")
    table.add_column("Progress")
    for subject_type, progress in result.by_type.items():
        table.add_row(
            subject_type.value.capitalize(),
            f"{progress.started}/{progress.total} ({progress.started_percentage}%)",
            f"{progress.guru}/{progress.total} ({progress.guru_percentage}%)",
            _format_progress_bar(progress.guru_percentage, 10),
        )
    console.print(table)

    if result.is_current_level and result.passed_at is None:
        rprint(f"[cyan]Kanji needed to level up:[/cyan] {result.kanji_needed_to_level_up}")
    if result.duration_compact:
        rprint(f"[dim]Time on level:[/dim] {result.duration_verbose or result.duration_compact}")


@app.command("grid")
def grid(
    data: Path = DATA_OPTION,
    kanji_only: bool = typer.Option(False, "--kanji-only/--all-types", help="Only count kanji"),
) -> None:
    """Show the SRS band distribution of every level."""
    dataset = _load(data)
    subject_types = [SubjectType.KANJI] if kanji_only else None
    levels = calculate_level_distribution(dataset.subjects, dataset.assignments, subject_types)

    if not levels:
        rprint("[yellow]No subjects in the dataset.[/yellow]")
        return

    table = Table(title="SRS Distribution by Level")
    table.add_column("Level", justify="right")
    for band in SrsBand:
        table.add_column(band.value.capitalize(), justify="right", style=BAND_STYLES[band])
    table.add_column("Total", justify="right", style="bold")
    for distribution in levels:
        table.add_row(
            str(distribution.level),
            *(str(distribution.counts[band]) for band in SrsBand),
            str(distribution.total),
        )
    console.print(table)


# =============================================================================
# Analytics
# =============================================================================


@app.command("leeches")
def leeches(
    data: Path = DATA_OPTION,
    min_reviews: Optional[int] = typer.Option(None, "--min-reviews", help="Minimum total reviews"),
    max_accuracy: Optional[int] = typer.Option(None, "--max-accuracy", help="Maximum accuracy %"),
    include_burned: Optional[bool] = typer.Option(
        None, "--include-burned/--exclude-burned", help="Include burned items"
    ),
    limit: int = typer.Option(20, "--limit", help="Leeches to show"),
) -> None:
    """List leeches ranked by severity."""
    settings = get_settings()
    dataset = _load(data)
    defaults = settings.get_leech_thresholds()
    thresholds = LeechThresholds(
        min_reviews=defaults.min_reviews if min_reviews is None else min_reviews,
        max_accuracy=defaults.max_accuracy if max_accuracy is None else max_accuracy,
        include_burned=defaults.include_burned if include_burned is None else include_burned,
    )

    items = detect_leeches(dataset.review_statistics, dataset.subjects, dataset.assignments, thresholds)
    if not items:
        rprint("[green][OK] No leeches found.[/green]")
        return

    table = Table(title=f"Leeches ({len(items)})")
    table.add_column("Item")
    table.add_column("Meaning")
    table.add_column("Type")
    table.add_column("Lvl", justify="right")
    table.add_column("Acc", justify="right")
    table.add_column("Reviews", justify="right")
    table.add_column("Severity", justify="right", style="bold")
    for item in items[:limit]:
        table.add_row(
            item.character,
            item.meaning,
            item.subject_type.value,
            str(item.level),
            f"[{_accuracy_color(item.accuracy)}]{item.accuracy}%[/]",
            str(item.total_reviews),
            str(item.severity),
        )
    console.print(table)

    pairs = find_confusion_pairs(items)
    if pairs:
        rprint("\n[bold]Confusion pairs[/bold]")
        for pair in pairs:
            rprint(f"  {pair.first.character} / {pair.second.character}  [dim]{pair.similarity:.0%}[/dim]")

    root_causes = find_root_cause_radicals(items, dataset.subjects)
    if root_causes:
        rprint("\n[bold]Root-cause radicals[/bold]")
        for cause in root_causes:
            rprint(f"  {cause.radical} ({cause.name}): {cause.affected_count} leeches")


@app.command("accuracy")
def accuracy(
    data: Path = DATA_OPTION,
    low_threshold: int = typer.Option(70, "--low-threshold", help="List items below this accuracy %"),
) -> None:
    """Show accuracy by answer kind, subject type and level."""
    dataset = _load(data)
    metrics = calculate_accuracy_metrics(dataset.review_statistics, dataset.subjects)

    rprint(f"\n[bold]Overall:[/bold] {metrics.overall}%  ({metrics.total_reviews} answers)")
    rprint(f"[dim]Meaning:[/dim] {metrics.meaning}%  [dim]Reading:[/dim] {metrics.reading}%")

    table = Table(title="By Type")
    table.add_column("Type")
    table.add_column("Overall", justify="right")
    table.add_column("Meaning", justify="right")
    table.add_column("Reading", justify="right")
    for subject_type, type_accuracy in metrics.by_type.items():
        table.add_row(
            subject_type.value.capitalize(),
            f"{type_accuracy.overall}%",
            f"{type_accuracy.meaning}%",
            "-" if type_accuracy.reading is None else f"{type_accuracy.reading}%",
        )
    console.print(table)

    if metrics.by_level:
        level_table = Table(title="By Level")
        level_table.add_column("Level", justify="right")
        level_table.add_column("Accuracy", justify="right")
        for lvl, percent in metrics.by_level.items():
            level_table.add_row(str(lvl), f"[{_accuracy_color(percent)}]{percent}%[/]")
        console.print(level_table)

    low = get_low_accuracy_items(dataset.review_statistics, low_threshold)
    if low:
        rprint(f"\n[yellow]{len(low)} items below {low_threshold}%[/yellow]")


@app.command("stability")
def stability(
    data: Path = DATA_OPTION,
    limit: int = typer.Option(20, "--limit", help="At-risk items to show"),
) -> None:
    """Show how much passed knowledge is holding."""
    dataset = _load(data)
    result = calculate_knowledge_stability(dataset.assignments, dataset.subjects)

    content = Text()
    content.append(f"Stability: {result.stability_ratio:.0%}\n", style="bold")
    content.append(f"{_format_progress_bar(result.stability_ratio * 100)}\n")
    content.append(f"Solid: {result.solid_items}  ", style="green")
    content.append(f"Fragile: {result.fragile_items}  ", style="red")
    content.append(f"Passed: {result.total_passed}")
    console.print(Panel(content, title="[bold]Knowledge Stability[/bold]", border_style="blue"))

    if result.at_risk_items:
        table = Table(title="At Risk")
        table.add_column("Item")
        table.add_column("Meaning")
        table.add_column("Lvl", justify="right")
        table.add_column("Stage", justify="right")
        table.add_column("Passed")
        for item in result.at_risk_items[:limit]:
            table.add_row(
                item.character or "?",
                item.meaning,
                str(item.level),
                str(item.current_srs_stage),
                _fmt_date(item.passed_at),
            )
        console.print(table)


@app.command("readiness")
def readiness(
    data: Path = DATA_OPTION,
    joyo: Optional[Path] = typer.Option(None, "--joyo", "-j", help="Jōyō kanji list (JSON, grade -> kanji)"),
    threshold: Optional[SrsThreshold] = typer.Option(None, "--threshold", "-t", help="Lowest stage that counts as known"),
) -> None:
    """Show Jōyō grade readiness and an approximate JLPT level."""
    settings = get_settings()
    joyo_path = joyo or settings.joyo_kanji_file
    if joyo_path is None:
        rprint("[red]Error:[/red] No Jōyō kanji list. Pass --joyo or set SRS_INSIGHT_JOYO_KANJI_FILE.")
        raise typer.Exit(code=1)

    dataset = _load(data)
    try:
        joyo_kanji = load_joyo_kanji(joyo_path)
    except DatasetLoadError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    result = calculate_joyo_readiness(
        joyo_kanji,
        dataset.subjects,
        dataset.assignments,
        settings.readiness_threshold if threshold is None else threshold,
    )

    table = Table(title=f"Jōyō Readiness ({result.threshold.value})")
    table.add_column("Grade")
    table.add_column("Ages", style="dim")
    table.add_column("Known", justify="right")
    table.add_column("Cumulative", justify="right")
    table.add_column("Progress")
    for grade in result.grades:
        cumulative = get_cumulative_counts(result, grade.grade)
        mark = " [green][OK][/green]" if grade.is_complete else ""
        table.add_row(
            grade.label,
            grade.age_range,
            f"{grade.known}/{grade.in_curriculum} ({grade.percentage}%)",
            f"{cumulative.known}/{cumulative.in_curriculum} ({cumulative.percentage}%)",
            _format_progress_bar(grade.percentage, 10) + mark,
        )
    console.print(table)

    content = Text()
    content.append(f"Kanji known: {result.total_known}/{result.total_in_curriculum}\n", style="bold")
    content.append(f"Current grade: {result.current_grade.label if result.current_grade else '-'}\n")
    content.append(f"Frequency coverage: ~{result.frequency_coverage}% of everyday text\n")
    content.append(
        f"Approximate JLPT: {result.approximate_jlpt.value if result.approximate_jlpt else 'too early to estimate'}",
        style="cyan",
    )
    console.print(Panel(content, title="[bold]Kanji Readiness[/bold]", border_style="blue"))


@app.command("milestones")
def milestones(data: Path = DATA_OPTION) -> None:
    """Show achieved and upcoming milestones."""
    dataset = _load(data)
    timeline = calculate_milestones(
        dataset.assignments,
        dataset.level_progressions,
        dataset.subjects,
        dataset.user.level,
    )

    rprint(f"\n[bold]Achieved ({timeline.total_achieved})[/bold]")
    for milestone in timeline.achieved:
        rprint(f"  [green][OK][/green] {milestone.label}  [dim]{_fmt_date(milestone.achieved_at)}[/dim]")

    rprint("\n[bold]Upcoming[/bold]")
    for milestone in timeline.upcoming:
        percent = milestone.progress * 100
        rprint(f"  {_format_progress_bar(percent, 10)} {milestone.label}  [dim]{milestone.current}/{milestone.target}[/dim]")


@app.command("burns")
def burns(data: Path = DATA_OPTION) -> None:
    """Show burn velocity and projected completion."""
    dataset = _load(data)
    result = calculate_burn_velocity(dataset.assignments, dataset.subjects)

    rprint(
        f"\n[bold]Burned:[/bold] {result.total_burned}/{result.total_items} "
        f"({result.burn_percentage:.1f}%)"
    )

    table = Table(title="Burn Velocity")
    table.add_column("Window")
    table.add_column("Burns", justify="right")
    table.add_column("Per day", justify="right")
    table.add_column("Trend")
    table.add_row("7 days", str(result.last_7_days.count), f"{result.last_7_days.rate:.1f}", TREND_ARROWS[result.trend_7_days])
    table.add_row("30 days", str(result.last_30_days.count), f"{result.last_30_days.rate:.1f}", TREND_ARROWS[result.trend_30_days])
    table.add_row("90 days", str(result.last_90_days.count), f"{result.last_90_days.rate:.1f}", "")
    console.print(table)

    if result.projected_burn_date is not None:
        rprint(f"[cyan]All burned by:[/cyan] {_fmt_date(result.projected_burn_date)} ({result.days_to_complete} days)")
    else:
        rprint("[dim]No burns in the last 30 days, no projection.[/dim]")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
