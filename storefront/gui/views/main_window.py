from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6 import QtCore, QtWidgets

from storefront.config.settings import Settings
from storefront.facets.query_params import QueryState, encode_query
from storefront.facets.tracker import FacetFilterTracker
from .facets_panel import FacetsPanel, MobileFiltersDialog


log = logging.getLogger(__name__)

SearchSource = Callable[[QueryState], Any]


class MainWindow(QtWidgets.QMainWindow):
    """Search field plus two filter panels fed from one tracker."""

    queryChanged = QtCore.Signal(str)

    def __init__(self, source: SearchSource, initial: QueryState | None = None,
                 settings: Settings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Storefront filters")
        self.source = source
        self.settings = settings or Settings()
        self.tracker = FacetFilterTracker(
            retain_hidden_selections=self.settings.retain_hidden_selections,
        )

        toolbar = QtWidgets.QToolBar()
        toolbar.setMovable(False)
        self.addToolBar(toolbar)
        self.search_edit = QtWidgets.QLineEdit()
        self.search_edit.setPlaceholderText("Search products…")
        self.search_edit.textEdited.connect(self._schedule_search)
        toolbar.addWidget(self.search_edit)
        toolbar.addSeparator()
        self.filters_btn = QtWidgets.QToolButton()
        self.filters_btn.setText("Filters")
        self.filters_btn.clicked.connect(self._show_mobile_filters)
        toolbar.addWidget(self.filters_btn)

        self.facets_panel = FacetsPanel()
        self.setCentralWidget(self.facets_panel)
        self.mobile_filters = MobileFiltersDialog(self)

        self.status = self.statusBar()
        self._status_label = QtWidgets.QLabel("Ready")
        self.status.addPermanentWidget(self._status_label)

        self.facets_panel.valueToggled.connect(self.toggle_value)
        self.mobile_filters.panel.valueToggled.connect(self.toggle_value)

        # Debounce typing in the search field
        self._timer = QtCore.QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(200)
        self._timer.timeout.connect(self._search_from_edit)

        initial = initial or QueryState()
        self.search_edit.setText(" ".join(initial.terms))
        self.run_search(initial)

    def run_search(self, state: QueryState) -> None:
        try:
            result = self.source(state)
        except Exception:
            log.exception("Search failed for %s", encode_query(state))
            result = None
        self.tracker.update(result, state.facet_value_ids, state.terms)
        self._apply_tracker()
        query = encode_query(state, self.settings.query_param, self.settings.facet_value_param)
        self.queryChanged.emit(query)

    def toggle_value(self, facet_value_id: str) -> None:
        self.run_search(self.tracker.toggle(facet_value_id))

    def _apply_tracker(self) -> None:
        facets = self.tracker.facets_with_values
        self.facets_panel.set_facets(facets)
        self.mobile_filters.panel.set_facets(facets)
        hidden = len(self.tracker.hidden_selected_ids)
        text = f"{len(self.tracker.selected_ids)} filters active"
        if hidden:
            text += f" ({hidden} not in current results)"
        self._status_label.setText(text)

    def _schedule_search(self) -> None:
        self._timer.start()

    def _search_from_edit(self) -> None:
        current = self.tracker.query_state.terms
        text = self.search_edit.text().strip()
        if text == " ".join(current).strip():
            # unchanged text keeps repeated q terms as they came in
            terms = current
        else:
            terms = (text,) if text else ()
        self.run_search(QueryState(terms=terms, facet_value_ids=self.tracker.query_state.facet_value_ids))

    def _show_mobile_filters(self) -> None:
        self.mobile_filters.show()
        self.mobile_filters.raise_()
