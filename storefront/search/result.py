from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from storefront.facets.models import Facet, FacetValue


log = logging.getLogger(__name__)


def _unwrap(payload: Any) -> Any:
    # GraphQL responses arrive as {"data": {"search": {...}}}
    if isinstance(payload, Mapping) and isinstance(payload.get("data"), Mapping):
        data = payload["data"]
        return data.get("search", data)
    return payload


def _as_id(raw: Any) -> Optional[str]:
    if raw is None or isinstance(raw, (dict, list)):
        return None
    value = str(raw).strip()
    return value or None


def _as_count(raw: Any) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class _FacetAccumulator:
    """Groups facet values under their facet, keeping first-seen order."""

    def __init__(self) -> None:
        self._facets: Dict[str, Dict[str, Any]] = {}

    def add_facet(self, facet_id: str, name: str, code: Optional[str]) -> Dict[str, Any]:
        entry = self._facets.get(facet_id)
        if entry is None:
            entry = {"name": name, "code": code, "values": {}}
            self._facets[facet_id] = entry
        return entry

    def add_value(self, entry: Dict[str, Any], value: FacetValue) -> None:
        values: Dict[str, FacetValue] = entry["values"]
        if value.id in values:
            log.debug("Dropping duplicate facet value %s", value.id)
            return
        values[value.id] = value

    def build(self) -> List[Facet]:
        return [
            Facet(
                id=facet_id,
                name=entry["name"],
                code=entry["code"],
                values=tuple(entry["values"].values()),
            )
            for facet_id, entry in self._facets.items()
        ]


def _read_value(raw: Any, count: Any = None) -> Optional[FacetValue]:
    if not isinstance(raw, Mapping):
        return None
    value_id = _as_id(raw.get("id"))
    if value_id is None:
        log.debug("Skipping facet value without id: %r", raw)
        return None
    name = str(raw.get("name") or value_id)
    return FacetValue(id=value_id, name=name, count=_as_count(raw.get("count", count)))


def _from_grouped(facets: Iterable[Any]) -> List[Facet]:
    acc = _FacetAccumulator()
    for raw in facets:
        if not isinstance(raw, Mapping):
            continue
        facet_id = _as_id(raw.get("id"))
        if facet_id is None:
            log.debug("Skipping facet without id: %r", raw)
            continue
        entry = acc.add_facet(facet_id, str(raw.get("name") or facet_id), raw.get("code"))
        values = raw.get("values") or []
        if not isinstance(values, list):
            continue
        for raw_value in values:
            value = _read_value(raw_value)
            if value is not None:
                acc.add_value(entry, value)
    return acc.build()


def _from_flat(facet_values: Iterable[Any]) -> List[Facet]:
    acc = _FacetAccumulator()
    for item in facet_values:
        if not isinstance(item, Mapping):
            continue
        raw_value = item.get("facetValue")
        if not isinstance(raw_value, Mapping):
            continue
        raw_facet = raw_value.get("facet")
        facet_id = _as_id(raw_facet.get("id")) if isinstance(raw_facet, Mapping) else None
        if facet_id is None:
            log.debug("Skipping facet value without facet: %r", raw_value)
            continue
        value = _read_value(raw_value, item.get("count"))
        if value is None:
            continue
        entry = acc.add_facet(facet_id, str(raw_facet.get("name") or facet_id), raw_facet.get("code"))
        acc.add_value(entry, value)
    return acc.build()


def parse_facets(payload: Any) -> List[Facet]:
    """Read the facets of a search-service payload.

    Accepts an already parsed list of ``Facet``, the grouped shape
    ``{"facets": [{"id", "name", "values": [...]}]}`` and the flat commerce
    shape ``{"facetValues": [{"count", "facetValue": {..., "facet": {...}}}]}``.
    Anything else yields an empty list.
    """
    if payload is None:
        return []
    if isinstance(payload, (list, tuple)) and all(isinstance(f, Facet) for f in payload):
        return list(payload)
    payload = _unwrap(payload)
    if not isinstance(payload, Mapping):
        log.warning("Ignoring search result of type %s", type(payload).__name__)
        return []
    if isinstance(payload.get("facets"), list):
        return _from_grouped(payload["facets"])
    if isinstance(payload.get("facetValues"), list):
        return _from_flat(payload["facetValues"])
    log.warning("Search result carries no facet data")
    return []


def load_search_result(path: Path | str) -> Optional[Any]:
    try:
        return json.loads(Path(path).read_text("utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Could not read search result %s: %s", path, exc)
        return None
