"""
factual-query Command Line Interface.

Builds Read API query strings from the command line and decodes existing
ones for inspection.

Usage:
    factual-query build --search pizza --limit 10 --sort rating:desc
    factual-query build --filter '{"region":{"$in":["CA","NV"]}}' --circle 34.06,-118.42,5000 --url
    factual-query build -f '{"name":{"$bw":"Star"}}' -f '{"name":{"$bw":"Coffee"}}' --match any
    factual-query decode 'q=pizza&limit=10'

For detailed help on any command:
    factual-query <command> --help
"""

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from factual_query.errors import FactualQueryError, FilterParseError, InvalidArgumentError
from factual_query.logging import TimedOperation, get_logger, log_error, setup_logging
from factual_query.query import (
    Circle,
    Query,
    Rectangle,
    decode_query_string,
    parse_row_filter,
    read_url,
)
from factual_query.query.params import ParamKey, SortDirection, get_valid_values

logger = get_logger(__name__)

app = typer.Typer(
    name="factual-query",
    help="Build and inspect Factual Read API query strings",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: from config)",
    ),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log format: 'text' or 'json' (default: from config)",
    ),
):
    """Build and inspect Factual Read API query strings."""
    setup_logging(level=log_level, format=log_format)


# ============================================================================
# OPTION PARSING
# ============================================================================


def _parse_numbers(raw: str, count: int, option: str) -> List[float]:
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != count:
        raise InvalidArgumentError(f"{option} expects {count} comma-separated numbers, got '{raw}'")
    try:
        return [float(part) for part in parts]
    except ValueError as e:
        raise InvalidArgumentError(f"{option} expects numbers, got '{raw}'") from e


def _apply_sort(query: Query, token: str) -> None:
    field, _, direction = token.partition(":")
    direction = (direction or SortDirection.ASC.value).lower()
    if direction == SortDirection.ASC.value:
        query.sort_asc(field)
    elif direction == SortDirection.DESC.value:
        query.sort_desc(field)
    else:
        raise InvalidArgumentError(f"Sort direction must be 'asc' or 'desc', got '{direction}'")


def _parse_filter(raw: str):
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise FilterParseError(f"Filter is not valid JSON: {e}", details={"filter": raw}) from e
    return parse_row_filter(data)


def build_query(
    search: Optional[str] = None,
    exact: bool = False,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sort: Optional[List[str]] = None,
    select: Optional[List[str]] = None,
    filters: Optional[List[str]] = None,
    circle: Optional[str] = None,
    rect: Optional[str] = None,
    match: Optional[str] = None,
    include_count: bool = False,
    threshold: Optional[str] = None,
) -> Query:
    """
    Assemble a Query from command line option values.

    Raises:
        FactualQueryError: On malformed option values
    """
    query = Query()

    if search is not None and exact:
        query.search_exact(search)
    elif search is not None:
        query.search(search)
    for row_filter in filters or []:
        query.add_filter(_parse_filter(row_filter))
    if circle:
        query.within(Circle(*_parse_numbers(circle, 3, "--circle")))
    if rect:
        query.within(Rectangle(*_parse_numbers(rect, 4, "--rect")))

    if match == "all":
        query.and_()
    elif match == "any":
        query.or_()
    elif match is not None:
        raise InvalidArgumentError(f"--match must be 'all' or 'any', got '{match}'")

    for token in sort or []:
        _apply_sort(query, token)
    for fields in select or []:
        query.only([field.strip() for field in fields.split(",") if field.strip()])
    if limit is not None:
        query.limit(limit)
    if offset is not None:
        query.offset(offset)
    if include_count:
        query.include_row_count()
    if threshold is not None:
        valid = get_valid_values(ParamKey.THRESHOLD)
        if threshold not in valid:
            logger.warning(f"Threshold '{threshold}' is not one of {valid}, passing it through")
        query.threshold(threshold)

    return query


# ============================================================================
# BUILD COMMAND
# ============================================================================


@app.command(
    help="""
    Build a query string from options.

    Examples:
        factual-query build --search pizza --limit 10
        factual-query build --filter '{"locality":{"$eq":"los angeles"}}' --sort name
        factual-query build --circle 34.06,-118.42,5000 --url --table restaurants-us
    """
)
def build(
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Full text search term"),
    exact: bool = typer.Option(False, "--exact", help="Match the search term exactly"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum rows"),
    offset: Optional[int] = typer.Option(None, "--offset", help="Page offset"),
    sort: List[str] = typer.Option([], "--sort", "-s", help="field[:asc|:desc] (repeatable)"),
    select: List[str] = typer.Option([], "--select", help="Fields to return, comma-separated (repeatable)"),
    filters: List[str] = typer.Option([], "--filter", "-f", help="Row filter as JSON (repeatable)"),
    circle: Optional[str] = typer.Option(None, "--circle", help="lat,lon,meters"),
    rect: Optional[str] = typer.Option(None, "--rect", help="top_left_lat,top_left_lon,bottom_right_lat,bottom_right_lon"),
    match: Optional[str] = typer.Option(None, "--match", "-m", help="Group all row filters: 'all' ($and) or 'any' ($or)"),
    include_count: bool = typer.Option(False, "--include-count", help="Request the total row count"),
    threshold: Optional[str] = typer.Option(None, "--threshold", help="Existence threshold"),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Table for --url (default: from config)"),
    url: bool = typer.Option(False, "--url", help="Print the full request URL"),
    json_out: bool = typer.Option(False, "--json", help="Print the decoded parameters as JSON"),
):
    """Build a query string."""
    try:
        with TimedOperation("build_query", logger, table=table):
            query = build_query(
                search=search,
                exact=exact,
                limit=limit,
                offset=offset,
                sort=sort,
                select=select,
                filters=filters,
                circle=circle,
                rect=rect,
                match=match,
                include_count=include_count,
                threshold=threshold,
            )
            query_string = query.to_url_query()
    except FactualQueryError as e:
        log_error(logger, e, {"table": table})
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if json_out:
        typer.echo(json.dumps(decode_query_string(query_string), indent=2, ensure_ascii=False))
    elif url:
        typer.echo(read_url(query, table=table))
    else:
        typer.echo(query_string)


# ============================================================================
# DECODE COMMAND
# ============================================================================


@app.command(
    help="""
    Decode a query string into its parameters.

    Examples:
        factual-query decode 'q=pizza&limit=10'
        factual-query decode "$(factual-query build -q pizza)" --json
    """
)
def decode(
    query_string: str = typer.Argument(..., help="Query string, with or without a leading '?'"),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Decode a query string."""
    try:
        params = decode_query_string(query_string)
    except FactualQueryError as e:
        log_error(logger, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if json_out:
        typer.echo(json.dumps(params, indent=2, ensure_ascii=False))
        return

    _display_params_table(params)


def _display_params_table(params):
    """Display decoded parameters in a formatted table."""
    table = Table(title="Query Parameters", show_header=True, header_style="bold")
    table.add_column("Parameter", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for key, value in params.items():
        if key == ParamKey.FILTERS:
            value = json.dumps(value, indent=2, ensure_ascii=False)
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print(f"\n[green]Total parameters: {len(params)}[/green]")


if __name__ == "__main__":
    app()
