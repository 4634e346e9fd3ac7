from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from PySide6 import QtWidgets

from storefront.config.settings import Settings
from storefront.facets.query_params import QueryState
from storefront.search.result import load_search_result
from .views.main_window import MainWindow


log = logging.getLogger(__name__)


def file_source(path: Path):
    """Search source that re-reads ``path`` on every search."""

    def search(state: QueryState) -> Any:
        log.info("Searching %s with %d filters", path.name, len(state.facet_value_ids))
        return load_search_result(path)

    return search


def run_gui(result_path: Path, initial: QueryState | None = None, settings: Settings | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    app.setOrganizationName("Storefront")
    app.setApplicationName("Storefront")

    settings = settings or Settings.load()
    win = MainWindow(source=file_source(result_path), initial=initial, settings=settings)
    win.queryChanged.connect(lambda q: log.info("Navigate to ?%s", q))
    win.resize(420, 640)
    win.show()

    app.exec()
