from __future__ import annotations

from typing import Dict, List, Sequence

from PySide6 import QtCore, QtWidgets

from storefront.facets.models import FacetWithValues


class _FacetGroup(QtWidgets.QGroupBox):
    valueToggled = QtCore.Signal(str)

    def __init__(self, facet: FacetWithValues, id_prefix: str) -> None:
        super().__init__(facet.name.upper())
        self.facet_id = facet.id
        self.setLayout(QtWidgets.QVBoxLayout())
        self._checks: Dict[str, QtWidgets.QCheckBox] = {}
        layout = self.layout()
        for idx, value in enumerate(facet.values):
            label = value.name if value.count is None else f"{value.name} ({value.count})"
            cb = QtWidgets.QCheckBox(label)
            cb.setObjectName(f"{id_prefix}-{facet.id}-{idx}")
            cb.setProperty("facet_value_id", value.id)
            cb.setChecked(value.selected)
            # clicked fires on user interaction only, not on setChecked above
            cb.clicked.connect(lambda _checked=False, vid=value.id: self.valueToggled.emit(vid))
            layout.addWidget(cb)
            self._checks[value.id] = cb

    def checkbox(self, facet_value_id: str) -> QtWidgets.QCheckBox | None:
        return self._checks.get(facet_value_id)

    def checked_ids(self) -> List[str]:
        return [k for k, cb in self._checks.items() if cb.isChecked()]


class FacetsPanel(QtWidgets.QScrollArea):
    """Checkbox rendering of a tracker's view model.

    Holds no selection state of its own; every toggle is emitted as the
    facet-value id and the owner rebuilds the panel from the next tracker.
    """

    valueToggled = QtCore.Signal(str)

    def __init__(self, id_prefix: str = "filter") -> None:
        super().__init__()
        self.setWidgetResizable(True)
        self._id_prefix = id_prefix
        self._groups: List[_FacetGroup] = []

    def set_facets(self, facets: Sequence[FacetWithValues]) -> None:
        inner = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(inner)
        self._groups = []
        for facet in facets:
            group = _FacetGroup(facet, self._id_prefix)
            group.valueToggled.connect(self.valueToggled.emit)
            layout.addWidget(group)
            self._groups.append(group)
        layout.addStretch(1)
        # the old widget may own the checkbox whose click got us here
        old = self.takeWidget()
        if old is not None:
            old.hide()
            old.setParent(self)
            old.deleteLater()
        self.setWidget(inner)

    def facet_ids(self) -> List[str]:
        return [g.facet_id for g in self._groups]

    def checkbox(self, facet_value_id: str) -> QtWidgets.QCheckBox | None:
        for group in self._groups:
            cb = group.checkbox(facet_value_id)
            if cb is not None:
                return cb
        return None

    def checked_ids(self) -> List[str]:
        return [vid for g in self._groups for vid in g.checked_ids()]


class MobileFiltersDialog(QtWidgets.QDialog):
    """Overlay variant of the filter panel for narrow windows."""

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Filters")
        layout = QtWidgets.QVBoxLayout(self)
        header = QtWidgets.QHBoxLayout()
        header.addWidget(QtWidgets.QLabel("Filters"))
        header.addStretch(1)
        close_btn = QtWidgets.QToolButton()
        close_btn.setText("Close")
        close_btn.clicked.connect(self.hide)
        header.addWidget(close_btn)
        layout.addLayout(header)
        self.panel = FacetsPanel(id_prefix="filter-mobile")
        layout.addWidget(self.panel)
