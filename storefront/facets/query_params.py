from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, List, Mapping, Set, Tuple, Union
from urllib.parse import parse_qsl, urlencode


QUERY_PARAM = "q"
FACET_VALUE_PARAM = "fvid"

QueryInput = Union[str, Mapping[str, Any], Iterable[Tuple[str, str]], None]


def unique_ids(ids: Iterable[object]) -> Tuple[str, ...]:
    """Blank-free, first-seen-order copy of ``ids`` with duplicates removed."""
    seen: Set[str] = set()
    out: List[str] = []
    for raw in ids:
        if raw is None:
            continue
        value = str(raw).strip()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return tuple(out)


@dataclass(frozen=True)
class QueryState:
    """Search terms plus the active facet-value ids, as carried by the URL."""

    terms: Tuple[str, ...] = ()
    facet_value_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(t for t in map(str, self.terms) if t.strip()))
        object.__setattr__(self, "facet_value_ids", unique_ids(self.facet_value_ids))

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self.facet_value_ids)

    def with_facet_value_ids(self, ids: Iterable[str]) -> "QueryState":
        return QueryState(terms=self.terms, facet_value_ids=tuple(ids))

    def to_params(
        self,
        query_param: str = QUERY_PARAM,
        facet_value_param: str = FACET_VALUE_PARAM,
    ) -> List[Tuple[str, str]]:
        params = [(query_param, term) for term in self.terms]
        params.extend((facet_value_param, fvid) for fvid in self.facet_value_ids)
        return params


def _pairs(query: QueryInput) -> List[Tuple[str, str]]:
    if query is None:
        return []
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=False)
    if isinstance(query, Mapping):
        pairs: List[Tuple[str, str]] = []
        for key, value in query.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, str(v)) for v in value if v is not None)
            elif value is not None:
                pairs.append((key, str(value)))
        return pairs
    return [(str(k), str(v)) for k, v in query]


def decode_query(
    query: QueryInput,
    query_param: str = QUERY_PARAM,
    facet_value_param: str = FACET_VALUE_PARAM,
) -> QueryState:
    terms: List[str] = []
    fvids: List[str] = []
    for key, value in _pairs(query):
        if key == query_param:
            terms.append(value)
        elif key == facet_value_param:
            fvids.append(value)
    return QueryState(terms=tuple(terms), facet_value_ids=tuple(fvids))


def encode_query(
    state: QueryState,
    query_param: str = QUERY_PARAM,
    facet_value_param: str = FACET_VALUE_PARAM,
) -> str:
    return urlencode(state.to_params(query_param, facet_value_param))

