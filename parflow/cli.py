"""
Command-line interface for ParFlow.

This module provides CLI commands for decoding FIT files, extracting par maps
and scorecards, building the derived rounds document and printing reports.
"""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from parflow.analytics.interface import DateRange, DistanceUnits, RoundLength
from parflow.config import Settings, get_settings
from parflow.exceptions import ConfigurationError, InvalidParameterError
from parflow.processors.interface import BatchResult
from parflow.services.extraction_service import ExtractionService
from parflow.services.metrics_service import MetricsService, load_dataset
from parflow.services.summary_service import RoundSummaryService
from parflow.utils import LoggingConfig, setup_parflow_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--data-dir", type=click.Path(path_type=Path), default=None,
              help="DI-GOLF export directory (overrides PARFLOW_DATA_DIR)")
@click.pass_context
def cli(ctx: click.Context, debug: bool, data_dir: Optional[Path]) -> None:
    """ParFlow golf round metrics command-line interface."""
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    log_level = "DEBUG" if debug or settings.debug else settings.log_level
    setup_parflow_logging(log_level=log_level, log_dir=settings.log_dir)
    LoggingConfig.set_level(log_level)
    ctx.obj = settings


def _report_batch(batch: BatchResult, label: str) -> None:
    click.echo(f"✅ {label}: {len(batch.succeeded)}/{batch.total} file(s) OK")
    for source, error in batch.errors.items():
        click.echo(f"  ❌ {Path(source).name}: {error}", err=True)


def _csv_service(settings: Settings) -> ExtractionService:
    service = ExtractionService(settings)
    try:
        service.csv_decoder()
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(2)
    return service


@cli.command()
@click.pass_obj
def decode(settings: Settings) -> None:
    """Decode every .fit file of the data directory into fit-json/."""
    batch = ExtractionService(settings).decode_to_json()
    if batch.total == 0:
        click.echo("No .fit files found.")
        return
    _report_batch(batch, "Decoded")


@cli.command("extract-pars")
@click.pass_obj
def extract_pars(settings: Settings) -> None:
    """Extract per-round par maps with FitCSVTool."""
    batch = _csv_service(settings).extract_pars()
    if batch.total == 0:
        click.echo("No SCORECARD_RAWDATA .fit files found.")
        return
    _report_batch(batch, f"Par maps written to {settings.pars_dir}")


@cli.command("extract-scorecard")
@click.pass_obj
def extract_scorecard(settings: Settings) -> None:
    """Extract grouped scorecard sections with FitCSVTool."""
    batch = _csv_service(settings).extract_scorecards()
    if batch.total == 0:
        click.echo("No SCORECARD_RAWDATA .fit files found.")
        return
    _report_batch(batch, f"Scorecards written to {settings.scorecards_dir}")


@cli.command()
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Output file")
@click.pass_obj
def summarize(settings: Settings, output: Optional[Path]) -> None:
    """Build derived/rounds.json from the scorecard export and decoded files."""
    scorecard_path = settings.export_path(settings.scorecard_export)
    if not scorecard_path.is_file():
        click.echo(f"❌ No scorecard data found at {scorecard_path}", err=True)
        sys.exit(1)
    path = RoundSummaryService(settings).summarize(output)
    click.echo(f"✅ Wrote {path}")


def _date_range(date_from: Optional[str], date_to: Optional[str]) -> Optional[DateRange]:
    if not date_from and not date_to:
        return None
    try:
        return DateRange(start=date_from, end=date_to)
    except InvalidParameterError as e:
        raise click.BadParameter(str(e))


@cli.command()
@click.option("--from", "date_from", default=None, help="Only rounds starting on or after this date")
@click.option("--to", "date_to", default=None, help="Only rounds starting on or before this date")
@click.option("--round-length", type=click.Choice([r.value for r in RoundLength]), default="all",
              help="Putting summary round length")
@click.option("--units", type=click.Choice([u.value for u in DistanceUnits]), default="meters",
              help="Club distance units")
@click.option("--low", "low_percentile", type=float, default=None, help="Low trim percentile")
@click.option("--high", "high_percentile", type=float, default=None, help="High trim percentile")
@click.option("--ignore-course", "ignored_courses", type=int, multiple=True,
              help="Course global id to leave out of GIR (repeatable)")
@click.pass_obj
def report(settings: Settings, date_from: Optional[str], date_to: Optional[str], round_length: str,
           units: str, low_percentile: Optional[float], high_percentile: Optional[float],
           ignored_courses: Tuple[int, ...]) -> None:
    """Print putting, GIR, club distance, approach and par-3 tables."""
    scorecard_path = settings.export_path(settings.scorecard_export)
    if not scorecard_path.is_file():
        click.echo(f"❌ No scorecard data found at {scorecard_path}", err=True)
        sys.exit(1)

    date_range = _date_range(date_from, date_to)
    service = MetricsService(load_dataset(settings), settings)

    putting = service.putting(date_range, RoundLength(round_length))
    click.echo("\n⛳ Putting")
    click.echo(f"  Rounds: {putting.rounds}  Putts: {putting.total_putts}  "
               f"Avg/round: {putting.average_per_round:.2f}  Avg/hole: {putting.average_per_hole:.3f}")
    b = putting.buckets
    click.echo(f"  1 putt: {b.one}  2 putts: {b.two}  3 putts: {b.three}  4+: {b.four_plus}")

    views = service.gir(date_range, ignored_courses)
    click.echo("\n🟢 Greens in regulation")
    for title, rows in (("All holes", views.all_holes), ("Full/half rounds", views.full_rounds)):
        totals = views.totals(rows)
        click.echo(f"  {title}: {totals['gir']}/{totals['holes']} ({totals['gir_pct']:.1f}%) "
                   f"over {totals['rounds']} round(s)")
    for row in views.full_rounds:
        course = row.course_name or (str(row.course_global_id) if row.course_global_id is not None else "")
        click.echo(f"    {row.round_id} {row.date_label} {course}: "
                   f"{row.gir_holes}/{row.holes_considered} ({row.gir_pct:.1f}%)")

    try:
        distances = service.club_distances(date_range, DistanceUnits(units), low_percentile, high_percentile)
    except InvalidParameterError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(2)
    unit = "m" if distances.units == DistanceUnits.METERS else "yd"
    click.echo(f"\n🏌️ Club distances ({unit})")
    for row in distances.rows:
        line = (f"  {row.label:<20} avg {row.average:6.1f}  max {row.maximum:6.1f}  "
                f"trim [{row.p_low:.1f}, {row.p_high:.1f}]  n={row.samples}")
        if row.full_swing is not None:
            line += f"  full swing {row.full_swing:.1f}"
        click.echo(line)

    approach = service.approach(date_range)
    click.echo("\n🎯 Approach from the fairway")
    for row in approach.rows:
        click.echo(f"  {row.label:<20} green {row.pct('green'):5.1f}%  fairway {row.pct('fairway'):5.1f}%  "
                   f"other {row.pct('other'):5.1f}%  n={row.total}")

    par3 = service.par3(date_range)
    click.echo("\n3️⃣  Par-3 tee shots")
    for row in par3.rows:
        click.echo(f"  {row.label:<20} GIR {row.pct('gir'):5.1f}%  ({row.counts['gir']}/{row.total})")


if __name__ == "__main__":
    cli()
