from __future__ import annotations

import logging
from typing import Any, FrozenSet, Iterable, List, Optional, Tuple, TYPE_CHECKING

from storefront.search.result import parse_facets
from .models import FacetValueWithSelection, FacetWithValues
from .query_params import QueryInput, QueryState, decode_query, unique_ids

if TYPE_CHECKING:  # pragma: no cover
    from storefront.config.settings import Settings


log = logging.getLogger(__name__)


class FacetFilterTracker:
    """Reconciles the facets of the latest search with the ids active in the URL.

    The view only lists values the current result returned. Ids selected in
    the URL but absent from the result stay in ``query_state`` and, unless
    ``retain_hidden_selections`` is off, are carried into the next query by
    :meth:`toggle` until the user unchecks them.
    """

    def __init__(
        self,
        result: Any = None,
        selected_ids: Iterable[object] = (),
        terms: Iterable[str] = (),
        retain_hidden_selections: bool = True,
    ) -> None:
        self.retain_hidden_selections = retain_hidden_selections
        self._facets_with_values: Tuple[FacetWithValues, ...] = ()
        self._state = QueryState()
        self.update(result, selected_ids, terms)

    @classmethod
    def from_query(
        cls,
        result: Any,
        query: QueryInput | QueryState,
        settings: Optional["Settings"] = None,
    ) -> "FacetFilterTracker":
        if isinstance(query, QueryState):
            state = query
        elif settings is not None:
            state = decode_query(query, settings.query_param, settings.facet_value_param)
        else:
            state = decode_query(query)
        retain = settings.retain_hidden_selections if settings is not None else True
        return cls(result, state.facet_value_ids, state.terms, retain_hidden_selections=retain)

    def update(self, result: Any, selected_ids: Iterable[object] = (), terms: Iterable[str] = ()) -> None:
        self._state = QueryState(terms=tuple(terms), facet_value_ids=unique_ids(selected_ids))
        try:
            facets = parse_facets(result)
        except Exception:
            log.exception("Failed to read facets from search result")
            facets = []
        selected = self._state.selected
        self._facets_with_values = tuple(
            FacetWithValues(
                id=facet.id,
                name=facet.name,
                code=facet.code,
                values=tuple(
                    FacetValueWithSelection(id=v.id, name=v.name, selected=v.id in selected, count=v.count)
                    for v in facet.values
                ),
            )
            for facet in facets
        )
        log.debug(
            "Tracker holds %d facets, %d selected ids (%d hidden)",
            len(self._facets_with_values), len(selected), len(self.hidden_selected_ids),
        )

    @property
    def facets_with_values(self) -> List[FacetWithValues]:
        return list(self._facets_with_values)

    @property
    def query_state(self) -> QueryState:
        return self._state

    @property
    def selected_ids(self) -> FrozenSet[str]:
        return self._state.selected

    @property
    def visible_ids(self) -> FrozenSet[str]:
        return frozenset(v.id for f in self._facets_with_values for v in f.values)

    @property
    def hidden_selected_ids(self) -> Tuple[str, ...]:
        visible = self.visible_ids
        return tuple(i for i in self._state.facet_value_ids if i not in visible)

    def is_selected(self, facet_value_id: str) -> bool:
        return str(facet_value_id) in self._state.selected

    def toggle(self, facet_value_id: object) -> QueryState:
        """Query state with ``facet_value_id`` flipped in the selected set."""
        target = str(facet_value_id).strip()
        current = self._state.facet_value_ids
        if not self.retain_hidden_selections:
            visible = self.visible_ids
            current = tuple(i for i in current if i in visible)
        if target in current:
            next_ids = tuple(i for i in current if i != target)
        else:
            next_ids = current + (target,)
        return self._state.with_facet_value_ids(next_ids)
