"""Command line entry point for the resto-dash application."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import click
import marshmallow as ma
import structlog

from resto_dash.aggregate import (
    ChartKind,
    Comparison,
    Metric,
    chart_spec,
    collect_records,
    compare_periods,
)
from resto_dash.aggregate.buckets import DEFAULT_INTERVAL_MINUTES
from resto_dash.aggregate.charts import collect_intervals
from resto_dash.breakdown import (
    BreakdownRow,
    assign_palette,
    breakdown_by_category,
    items_sold,
    share_of_total,
    top_items,
)
from resto_dash.data import (
    DEFAULT_CATALOG,
    InMemoryMetricSource,
    MenuCatalog,
    MetricSource,
    SyntheticMetricSource,
    integrity_errors,
    load_catalog,
    load_daily_metrics,
    load_intervals,
)
from resto_dash.data.models import CATEGORIES, DailyMetric, metric_to_dict
from resto_dash.data.source import DEFAULT_YEARS, generate_daily_metrics
from resto_dash.errors import RestoDashError
from resto_dash.logging import bind_command_context, configure_logging
from resto_dash.math import compare_summaries, summarize_period
from resto_dash.output import export_rows, format_currency, format_percent, format_value
from resto_dash.timeline import WEEKDAYS_MONDAY_FIRST, DateRange

DATA_HELP = (
    "Daily metrics file (.csv or .json). May also be set via the RESTO_DASH_DATA env var; "
    "without it the built-in synthetic dataset is used."
)
CATALOG_HELP = (
    "Menu catalog JSON used to spread orders over items. May also be set via the "
    "RESTO_DASH_CATALOG env var."
)
INTERVALS_HELP = (
    "Intraday slots JSON served with --data for time-of-day views. May also be set via "
    "the RESTO_DASH_INTERVALS env var."
)
PERIOD_HELP = "Date range as START..END (ISO dates) or a single day."

LOG_FORMAT_CHOICES = ("console", "json")
LOG_LEVEL_CHOICES = ("critical", "error", "warning", "info", "debug")
OUTPUT_FORMAT_CHOICES = ("table", "json")
METRIC_CHOICES = tuple(metric.value for metric in Metric)
ITEM_METRIC_CHOICES = (Metric.ITEM_COUNT.value, Metric.ORDER_COUNT.value, Metric.REVENUE.value)

logger = structlog.get_logger(__name__)


def _parse_period(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> DateRange | None:
    """Click callback turning ``START..END`` into a :class:`DateRange`."""
    if value is None:
        return None
    try:
        return DateRange.parse(value)
    except RestoDashError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def _resolve_catalog(ctx: click.Context) -> MenuCatalog:
    """Return the menu catalog for this invocation, loading it once."""
    ctx.ensure_object(dict)
    catalog = ctx.obj.get("catalog")
    if catalog is not None:
        return catalog
    catalog_path: Path | None = ctx.obj.get("catalog_path")
    if catalog_path is None:
        catalog = DEFAULT_CATALOG
    else:
        try:
            catalog = load_catalog(catalog_path)
        except (ValueError, KeyError) as exc:
            raise click.ClickException(f"Could not read {catalog_path}: {exc}") from exc
    ctx.obj["catalog"] = catalog
    return catalog


def _resolve_source(ctx: click.Context) -> MetricSource:
    """Return the metric source for this invocation, loading it once."""
    ctx.ensure_object(dict)
    source = ctx.obj.get("source")
    if source is not None:
        return source
    data_path: Path | None = ctx.obj.get("data_path")
    if data_path is None:
        source = SyntheticMetricSource(catalog=_resolve_catalog(ctx))
        logger.debug("source.synthetic_selected", years=list(DEFAULT_YEARS))
    else:
        try:
            records = load_daily_metrics(data_path)
        except (ValueError, KeyError, ma.ValidationError) as exc:
            raise click.ClickException(f"Could not read {data_path}: {exc}") from exc
        intervals_path: Path | None = ctx.obj.get("intervals_path")
        try:
            intervals = load_intervals(intervals_path) if intervals_path else {}
        except (ValueError, KeyError) as exc:
            raise click.ClickException(f"Could not read {intervals_path}: {exc}") from exc
        source = InMemoryMetricSource(records, intervals)
        logger.info(
            "source.records_loaded",
            path=str(data_path),
            records=len(records),
            interval_days=len(intervals),
        )

    ctx.obj["source"] = source
    return source


def _all_records(source: MetricSource) -> list[DailyMetric]:
    """Return every daily record a source holds."""
    return list(getattr(source, "records", []))


def _label_width(labels: Sequence[str], minimum: int = 10) -> int:
    return max([minimum, *(len(label) for label in labels)])


def _emit_comparison(
    comparison: Comparison,
    *,
    output_format: str,
    export_path: Path | None,
) -> None:
    """Print comparison rows as a table or JSON and optionally export them."""
    if export_path is not None:
        export_rows(comparison.rows, export_path)
        click.echo(f"Wrote {len(comparison.rows)} rows to {export_path}", err=True)

    if output_format == "json":
        payload = {
            "chart": comparison.kind.value,
            "metric": comparison.metric.value,
            "granularity": comparison.granularity.value,
            "rows": [row.to_dict() for row in comparison.rows],
            "notice": comparison.notice.message if comparison.notice else None,
        }
        click.echo(json.dumps(payload, indent=2))
        return

    comparing = comparison.buckets_b is not None
    width = _label_width([row.label for row in comparison.rows])
    header = f"{'':<{width}}  {'Period A':>12}"
    if comparing:
        header += f"  {'Period B':>12}"
    click.echo(header)
    for row in comparison.rows:
        line = f"{row.label:<{width}}  {format_value(row.value_a, comparison.metric):>12}"
        if comparing:
            line += f"  {format_value(row.value_b, comparison.metric):>12}"
            if row.label_b and row.label_b != row.label:
                line += f"  ({row.label_b})"
        click.echo(line)
    if comparison.notice is not None:
        click.echo(f"Note: {comparison.notice.message}")


def _run_comparison(
    ctx: click.Context,
    kind: ChartKind,
    *,
    metric: str,
    period_a: DateRange,
    period_b: DateRange | None,
    granularity: str | None = None,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> Comparison:
    source = _resolve_source(ctx)
    try:
        resolved = chart_spec(kind).resolve_granularity(granularity)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--granularity") from exc
    comparison = compare_periods(
        source,
        kind,
        period_a,
        period_b,
        metric,
        granularity=resolved,
        interval_minutes=interval_minutes,
    )
    buckets = [*comparison.buckets_a, *(comparison.buckets_b or ())]
    if all(bucket.is_empty for bucket in buckets):
        raise click.ClickException("No data in the selected period(s).")
    return comparison


def _period_options(func):
    """Attach the shared ``--period-a``/``--period-b`` options."""
    func = click.option(
        "--period-b",
        callback=_parse_period,
        default=None,
        help=f"Optional comparison period. {PERIOD_HELP}",
    )(func)
    func = click.option(
        "--period-a",
        callback=_parse_period,
        required=True,
        help=f"Primary period. {PERIOD_HELP}",
    )(func)
    return func


def _output_options(func):
    """Attach ``--format`` and ``--export`` options."""
    func = click.option(
        "--export",
        "export_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Also write the rows to a .csv or .json file.",
    )(func)
    func = click.option(
        "--format",
        "output_format",
        type=click.Choice(OUTPUT_FORMAT_CHOICES, case_sensitive=False),
        default="table",
        show_default=True,
        help="Render results as a text table or JSON.",
    )(func)
    return func


@click.group()
@click.option(
    "--data",
    "data_path",
    envvar="RESTO_DASH_DATA",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=DATA_HELP,
)
@click.option(
    "--catalog",
    "catalog_path",
    envvar="RESTO_DASH_CATALOG",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=CATALOG_HELP,
)
@click.option(
    "--intervals",
    "intervals_path",
    envvar="RESTO_DASH_INTERVALS",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=INTERVALS_HELP,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="RESTO_DASH_LOG_LEVEL",
    default="warning",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="RESTO_DASH_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_path: Path | None,
    catalog_path: Path | None,
    intervals_path: Path | None,
    log_level: str,
    log_format: str,
) -> None:
    """Compare restaurant revenue, orders and menu sales across periods."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    ctx.ensure_object(dict)
    if intervals_path is not None and data_path is None:
        raise click.UsageError("--intervals requires --data.", ctx=ctx)
    ctx.obj.update(
        {"data_path": data_path, "catalog_path": catalog_path, "intervals_path": intervals_path}
    )
    logger.bind(command_group="resto-dash").debug(
        "cli.initialized",
        data=str(data_path) if data_path else None,
        catalog=str(catalog_path) if catalog_path else None,
        intervals=str(intervals_path) if intervals_path else None,
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("compare")
@click.option(
    "--chart",
    type=click.Choice([ChartKind.DYNAMIC_AGGREGATED.value, ChartKind.PERIOD_BUCKETS.value]),
    default=ChartKind.DYNAMIC_AGGREGATED.value,
    show_default=True,
    help="'dynamic' aligns by calendar key; 'buckets' pairs day N of A with day N of B.",
)
@click.option(
    "--granularity",
    "--mode",
    "granularity",
    type=click.Choice(["day", "week", "month", "year"]),
    default=None,
    help="Bucket size; defaults to the chart's own default.",
)
@click.option(
    "--metric",
    type=click.Choice(METRIC_CHOICES),
    default=Metric.REVENUE.value,
    show_default=True,
)
@_period_options
@_output_options
@click.pass_context
def compare(
    ctx: click.Context,
    *,
    chart: str,
    granularity: str | None,
    metric: str,
    period_a: DateRange,
    period_b: DateRange | None,
    output_format: str,
    export_path: Path | None,
) -> None:
    """Compare two periods bucketed by day, week, month or year."""
    bind_command_context(
        "compare", chart=chart, granularity=granularity, metric=metric, period_a=period_a, period_b=period_b
    )
    logger.info("command.start")
    comparison = _run_comparison(
        ctx,
        ChartKind(chart),
        metric=metric,
        period_a=period_a,
        period_b=period_b,
        granularity=granularity,
    )
    _emit_comparison(comparison, output_format=output_format.lower(), export_path=export_path)
    logger.info("command.completed", rows=len(comparison.rows))


@cli.command("weekday")
@click.option(
    "--metric",
    type=click.Choice(METRIC_CHOICES),
    default=Metric.REVENUE.value,
    show_default=True,
)
@click.option(
    "--items-on",
    type=click.Choice(WEEKDAYS_MONDAY_FIRST, case_sensitive=False),
    default=None,
    help="Also list the items sold on this weekday in period A.",
)
@_period_options
@_output_options
@click.pass_context
def weekday(
    ctx: click.Context,
    *,
    metric: str,
    items_on: str | None,
    period_a: DateRange,
    period_b: DateRange | None,
    output_format: str,
    export_path: Path | None,
) -> None:
    """Show the typical Monday..Sunday of each period."""
    bind_command_context("weekday", metric=metric, period_a=period_a, period_b=period_b)
    logger.info("command.start")
    comparison = _run_comparison(
        ctx, ChartKind.WEEKDAY, metric=metric, period_a=period_a, period_b=period_b
    )
    _emit_comparison(comparison, output_format=output_format.lower(), export_path=export_path)
    if items_on is not None:
        index = [name.lower() for name in WEEKDAYS_MONDAY_FIRST].index(items_on.lower())
        rows = items_sold(collect_intervals(_resolve_source(ctx), period_a), weekday=index)
        _echo_item_rows(rows, f"Items sold on {WEEKDAYS_MONDAY_FIRST[index]}s")
    logger.info("command.completed", rows=len(comparison.rows))


@cli.command("time-of-day")
@click.option(
    "--metric",
    type=click.Choice(METRIC_CHOICES),
    default=Metric.ITEM_COUNT.value,
    show_default=True,
)
@click.option(
    "--interval",
    "interval_minutes",
    type=click.IntRange(min=1),
    default=DEFAULT_INTERVAL_MINUTES,
    show_default=True,
    help="Slot length in minutes.",
)
@click.option(
    "--items-between",
    nargs=2,
    type=str,
    default=None,
    metavar="START END",
    help="Also list items sold in period A between two HH:MM times (end exclusive).",
)
@_period_options
@_output_options
@click.pass_context
def time_of_day(
    ctx: click.Context,
    *,
    metric: str,
    interval_minutes: int,
    items_between: tuple[str, str] | None,
    period_a: DateRange,
    period_b: DateRange | None,
    output_format: str,
    export_path: Path | None,
) -> None:
    """Profile a typical day in fixed time-of-day slots."""
    bind_command_context(
        "time-of-day", interval=interval_minutes, metric=metric, period_a=period_a, period_b=period_b
    )
    logger.info("command.start")
    comparison = _run_comparison(
        ctx,
        ChartKind.TIME_OF_DAY,
        metric=metric,
        period_a=period_a,
        period_b=period_b,
        interval_minutes=interval_minutes,
    )
    _emit_comparison(comparison, output_format=output_format.lower(), export_path=export_path)
    if items_between:
        start, end = items_between
        try:
            rows = items_sold(
                collect_intervals(_resolve_source(ctx), period_a), time_start=start, time_end=end
            )
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--items-between") from exc
        _echo_item_rows(rows, f"Items sold {start}-{end}")
    logger.info("command.completed", rows=len(comparison.rows))


def _echo_item_rows(rows: Sequence[BreakdownRow], title: str) -> None:
    click.echo("")
    click.echo(title)
    if not rows:
        click.echo("  (none)")
        return
    width = _label_width([row.name for row in rows])
    for row in rows:
        click.echo(f"  {row.name:<{width}}  {row.qty:>6}  {format_currency(row.revenue):>10}")


def _breakdown_rows(
    ctx: click.Context, period: DateRange, metric: str, categories: Sequence[str]
) -> list[BreakdownRow]:
    records = collect_records(_resolve_source(ctx), period)
    if not records:
        raise click.ClickException(f"No data for {period}.")
    catalog = _resolve_catalog(ctx)
    rows: list[BreakdownRow] = []
    for category in categories:
        rows.extend(breakdown_by_category(records, metric, category, catalog=catalog))
    return rows


@cli.command("breakdown")
@click.option("--period", callback=_parse_period, required=True, help=PERIOD_HELP)
@click.option(
    "--category",
    type=click.Choice(CATEGORIES),
    default="dish",
    show_default=True,
)
@click.option(
    "--metric",
    type=click.Choice(ITEM_METRIC_CHOICES),
    default=Metric.ITEM_COUNT.value,
    show_default=True,
)
@click.option(
    "--palette",
    type=click.Choice(["A", "B"]),
    default="A",
    show_default=True,
    help="Colour palette to attach (green for A, blue for B).",
)
@_output_options
@click.pass_context
def breakdown(
    ctx: click.Context,
    *,
    period: DateRange,
    category: str,
    metric: str,
    palette: str,
    output_format: str,
    export_path: Path | None,
) -> None:
    """Break a period's sales down by menu item."""
    bind_command_context("breakdown", category=category, metric=metric, period_a=period)
    logger.info("command.start")
    rows = assign_palette(_breakdown_rows(ctx, period, metric, [category]), palette)
    shares = share_of_total(rows, metric)
    if export_path is not None:
        export_rows(rows, export_path)
        click.echo(f"Wrote {len(rows)} rows to {export_path}", err=True)
    if output_format.lower() == "json":
        payload = [dict(row.to_dict(), share=shares[row.name]) for row in rows]
        click.echo(json.dumps(payload, indent=2))
    else:
        width = _label_width([row.name for row in rows])
        for row in rows:
            click.echo(
                f"{row.name:<{width}}  {row.qty:>7}  {format_currency(row.revenue):>10}  "
                f"{format_percent(shares[row.name] / 100, digits=1):>6}  {row.color}"
            )
    logger.info("command.completed", rows=len(rows))


@cli.command("top-items")
@click.option("--period", callback=_parse_period, required=True, help=PERIOD_HELP)
@click.option(
    "--metric",
    type=click.Choice(ITEM_METRIC_CHOICES),
    default=Metric.ITEM_COUNT.value,
    show_default=True,
)
@click.option(
    "--direction",
    type=click.Choice(["most", "least"]),
    default="most",
    show_default=True,
)
@click.option("--limit", type=click.IntRange(min=1), default=5, show_default=True)
@click.option(
    "--category",
    type=click.Choice(CATEGORIES),
    default=None,
    help="Restrict the ranking to one category (default: dishes and drinks).",
)
@click.pass_context
def top_items_command(
    ctx: click.Context,
    *,
    period: DateRange,
    metric: str,
    direction: str,
    limit: int,
    category: str | None,
) -> None:
    """List the best or worst selling items of a period."""
    bind_command_context(
        "top-items", category=category, direction=direction, metric=metric, period_a=period
    )
    categories = [category] if category else list(CATEGORIES)
    rows = top_items(
        _breakdown_rows(ctx, period, metric, categories), metric, direction=direction, limit=limit
    )
    for rank, row in enumerate(rows, start=1):
        click.echo(f"{rank}. {row.name} ({row.category}): {row.qty} sold, {format_currency(row.revenue)}")
    logger.info("command.completed", rows=len(rows))


def _format_change(indicator) -> str:
    sign = "+" if indicator.trend == "up" else ""
    return f"{sign}{format_percent(indicator.signed / 100, digits=1)}"


@cli.command("summary")
@_period_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMAT_CHOICES, case_sensitive=False),
    default="table",
    show_default=True,
)
@click.pass_context
def summary(
    ctx: click.Context,
    *,
    period_a: DateRange,
    period_b: DateRange | None,
    output_format: str,
) -> None:
    """Headline totals of one period, with changes against a second one."""
    bind_command_context("summary", period_a=period_a, period_b=period_b)
    source = _resolve_source(ctx)
    summary_a = summarize_period(collect_records(source, period_a))
    summary_b = summarize_period(collect_records(source, period_b)) if period_b else None
    if summary_a.days == 0:
        raise click.ClickException(f"No data for {period_a}.")
    changes = compare_summaries(summary_a, summary_b) if summary_b else {}

    if output_format.lower() == "json":
        payload = {
            "period_a": dict(summary_a.to_dict(), range=str(period_a)),
            "period_b": dict(summary_b.to_dict(), range=str(period_b)) if summary_b else None,
            "changes": {
                name: {"percentage": change.percentage, "trend": change.trend}
                for name, change in changes.items()
            },
        }
        click.echo(json.dumps(payload, indent=2))
        return

    figures = [
        ("Total revenue", "revenue", format_currency),
        ("Total orders", "orders", lambda value: f"{value:,}"),
        ("Avg order size", "avg_items_per_order", lambda value: f"{value:.2f} items"),
        ("Avg order amount", "avg_order_value", lambda value: f"€{value:,.2f}"),
    ]
    for title, name, render in figures:
        line = f"{title:<18} {render(getattr(summary_a, name)):>14}"
        if summary_b is not None:
            line += f"  {render(getattr(summary_b, name)):>14}  {_format_change(changes[name]):>8}"
        click.echo(line)


@cli.command("validate")
@click.option("--period", callback=_parse_period, default=None, help=f"Only check this range. {PERIOD_HELP}")
@click.pass_context
def validate(ctx: click.Context, *, period: DateRange | None) -> None:
    """Check stored revenue against orders x order value and realistic ranges."""
    bind_command_context("validate", period_a=period)
    source = _resolve_source(ctx)
    records = collect_records(source, period) if period else _all_records(source)
    errors = integrity_errors(records)
    for message in errors:
        click.echo(message)
    if errors:
        raise click.ClickException(f"{len(errors)} integrity problem(s) in {len(records)} records.")
    click.echo(f"All {len(records)} records passed integrity checks.")


@cli.command("generate")
@click.option(
    "--year",
    "years",
    type=int,
    multiple=True,
    help="Calendar year to generate; repeatable (default: 2023-2025).",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Destination .json or .csv file.",
)
def generate(*, years: tuple[int, ...], output_path: Path) -> None:
    """Write the deterministic synthetic dataset to a file."""
    bind_command_context("generate", years=list(years) or None)
    selected = years or DEFAULT_YEARS
    rows = []
    for year in selected:
        rows.extend(metric_to_dict(record) for record in generate_daily_metrics(year))
    try:
        export_rows(rows, output_path)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--output") from exc
    click.echo(f"Wrote {len(rows)} daily records for {', '.join(map(str, selected))} to {output_path}")


if __name__ == "__main__":
    cli()
