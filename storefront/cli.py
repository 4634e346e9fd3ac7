from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Tuple

import typer

from storefront.config.settings import Settings
from storefront.facets.query_params import decode_query, encode_query
from storefront.facets.tracker import FacetFilterTracker
from storefront.search.result import load_search_result

app = typer.Typer(help="Storefront facet filter tools")

ResultFile = typer.Argument(..., exists=True, dir_okay=False, help="JSON search result")
QueryOption = typer.Option("", "--query", "-q", help="Current URL query string, e.g. 'q=shoes&fvid=3'")


def _tracker(result_file: Path, query: str, drop_hidden: bool) -> Tuple[FacetFilterTracker, Settings]:
    settings = Settings.load()
    if drop_hidden:
        settings.retain_hidden_selections = False
    tracker = FacetFilterTracker.from_query(load_search_result(result_file), query, settings)
    return tracker, settings


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )


@app.command()
def filters(result_file: Path = ResultFile, query: str = QueryOption) -> None:
    """Print the selection-annotated facets as JSON."""
    tracker, _ = _tracker(result_file, query, drop_hidden=False)
    out = {
        "facets": [f.to_dict() for f in tracker.facets_with_values],
        "hiddenSelectedIds": list(tracker.hidden_selected_ids),
    }
    typer.echo(json.dumps(out, indent=2))


@app.command()
def toggle(
    result_file: Path = ResultFile,
    facet_value_id: str = typer.Argument(..., help="Facet value id to flip"),
    query: str = QueryOption,
    drop_hidden: bool = typer.Option(False, "--drop-hidden", help="Drop selected ids missing from the result"),
) -> None:
    """Print the query string that follows toggling FACET_VALUE_ID."""
    tracker, settings = _tracker(result_file, query, drop_hidden)
    state = tracker.toggle(facet_value_id)
    typer.echo(encode_query(state, settings.query_param, settings.facet_value_param))


@app.command()
def gui(result_file: Path = ResultFile, query: str = QueryOption) -> None:
    """Launch the filter window over a JSON search result."""
    from storefront.gui.app import run_gui

    settings = Settings.load()
    run_gui(result_file, decode_query(query, settings.query_param, settings.facet_value_param), settings)


if __name__ == "__main__":
    sys.exit(app())
