"""Typer CLI entrypoint and command definitions for ringclock."""

import logging
import warnings
from pathlib import Path

import typer

from ringclock.core.defaults import (
    DEFAULT_CHART_FILENAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_HOST,
    DEFAULT_OUT_DIR,
    DEFAULT_PORT,
)
from ringclock.core.types import NormalizedActivity

logger = logging.getLogger(__name__)

app = typer.Typer()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Render a daily schedule as a 24-hour dual-ring clock chart."""
    from ringclock.core.logging import install_sanitizing_filter

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    install_sanitizing_filter(handler_level=True)


def _load_activities(file: str) -> list[NormalizedActivity]:
    """Read and normalize a schedule file, exiting with code 1 on any failure."""
    from ringclock.schedule.ingest import read_schedule_file
    from ringclock.schedule.normalize import EmptyScheduleWarning, normalize

    path = Path(file)
    logger.debug("Loading schedule file_name=%r", path.name)
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        rows = read_schedule_file(path)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", EmptyScheduleWarning)
            activities = normalize(rows)
    except ValueError as exc:
        typer.echo(f"Error parsing {path.name}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not activities:
        typer.echo(f"No activities found in {path.name}", err=True)
    return activities


@app.command("render")
def render_cmd(
    file: str = typer.Option(..., "--file", help="Schedule file (.csv, .xlsx, .xls) with start, end, activity columns"),
    out: str = typer.Option(f"{DEFAULT_OUT_DIR}/{DEFAULT_CHART_FILENAME}", "--out", help="Destination SVG path"),
    full_width: bool | None = typer.Option(None, "--full-width/--compact", help="Override the saved display width"),
    legend: bool = typer.Option(True, "--legend/--no-legend", help="Draw the colour legend"),
    config_dir: str = typer.Option(DEFAULT_CONFIG_DIR, help="Directory holding config.json"),
) -> None:
    """Render a schedule file to an SVG clock chart."""
    from ringclock.core.config import ChartConfig
    from ringclock.render.export import write_chart_svg
    from ringclock.render.svg import render_chart_svg

    activities = _load_activities(file)
    cfg = ChartConfig(config_dir)
    svg = render_chart_svg(
        activities,
        full_width=cfg.full_width if full_width is None else full_width,
        legend=legend,
        label_max_chars=cfg.label_max_chars,
    )
    out_path = write_chart_svg(svg, Path(out))
    typer.echo(f"Processed {len(activities)} activities")
    typer.echo(f"Wrote chart to {out_path}")


@app.command("show")
def show_cmd(
    file: str = typer.Option(..., "--file", help="Schedule file (.csv, .xlsx, .xls)"),
) -> None:
    """Print the normalized activities grouped by ring."""
    from ringclock.core.time import format_minutes
    from ringclock.core.types import Zone
    from ringclock.schedule.normalize import group_by_zone

    activities = _load_activities(file)
    groups = group_by_zone(activities)
    for zone, title in ((Zone.INNER, "Inner ring (06:00-18:00)"), (Zone.OUTER, "Outer ring (18:00-06:00)")):
        typer.echo(f"{title}: {len(groups[zone])}")
        for a in groups[zone]:
            typer.echo(
                f"  [{a.index}] {format_minutes(a.start_minutes)}-{format_minutes(a.end_minutes)} "
                f"{a.duration:>4} min  {a.color}  {a.name}"
            )


@app.command("export")
def export_cmd(
    file: str = typer.Option(..., "--file", help="Schedule file (.csv, .xlsx, .xls)"),
    out: str = typer.Option(..., "--out", help="Destination .json, .csv or .parquet path"),
) -> None:
    """Export normalized activities and their slice geometry."""
    from ringclock.render.export import export_activities

    activities = _load_activities(file)
    try:
        out_path = export_activities(activities, Path(out))
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Exported {len(activities)} activities to {out_path}")


@app.command("validate")
def validate_cmd(
    file: str = typer.Option(..., "--file", help="Schedule file (.csv, .xlsx, .xls)"),
) -> None:
    """Report overlapping activities and other soft schedule issues."""
    from ringclock.core.validation import validate_schedule

    activities = _load_activities(file)
    report = validate_schedule(activities)
    for finding in report.findings:
        typer.echo(f"{finding.severity.value.upper()} [{finding.check}] {finding.message}")
    typer.echo(f"{len(activities)} activities, {len(report.warnings)} warning(s)")
    if not report.ok:
        raise typer.Exit(code=1)


# -- config -------------------------------------------------------------------
config_app = typer.Typer()
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show_cmd(
    config_dir: str = typer.Option(DEFAULT_CONFIG_DIR, help="Directory holding config.json"),
) -> None:
    """Print the current display settings."""
    from ringclock.core.config import ChartConfig

    cfg = ChartConfig(config_dir)
    for key, value in cfg.as_dict().items():
        typer.echo(f"{key} = {value}")


@config_app.command("set")
def config_set_cmd(
    full_width: bool | None = typer.Option(None, "--full-width/--compact", help="Default chart width"),
    label_max_chars: int | None = typer.Option(None, help="Truncate slice labels longer than this"),
    config_dir: str = typer.Option(DEFAULT_CONFIG_DIR, help="Directory holding config.json"),
) -> None:
    """Update display settings."""
    from ringclock.core.config import ChartConfig

    patch: dict[str, object] = {}
    if full_width is not None:
        patch["full_width"] = full_width
    if label_max_chars is not None:
        patch["label_max_chars"] = label_max_chars
    if not patch:
        typer.echo("Nothing to update", err=True)
        raise typer.Exit(code=1)

    cfg = ChartConfig(config_dir)
    try:
        updated = cfg.update(patch)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Saved {cfg.path}")
    for key, value in updated.items():
        typer.echo(f"{key} = {value}")


# -- ui -----------------------------------------------------------------------
ui_app = typer.Typer()
app.add_typer(ui_app, name="ui")


@ui_app.command("serve")
def ui_serve_cmd(
    host: str = typer.Option(DEFAULT_HOST, help="Bind address"),
    port: int = typer.Option(DEFAULT_PORT, help="Bind port"),
    config_dir: str = typer.Option(DEFAULT_CONFIG_DIR, help="Directory holding config.json"),
) -> None:
    """Serve the upload/chart HTTP API."""
    import uvicorn

    from ringclock.ui.server import create_app

    typer.echo(f"Serving on http://{host}:{port}")
    uvicorn.run(create_app(config_dir=Path(config_dir)), host=host, port=port, log_level="info")


if __name__ == "__main__":
    app()
