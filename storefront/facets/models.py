from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class FacetValue:
    id: str
    name: str
    count: Optional[int] = None  # passed through from the search service


@dataclass(frozen=True)
class Facet:
    id: str
    name: str
    values: Tuple[FacetValue, ...] = ()
    code: Optional[str] = None


@dataclass(frozen=True)
class FacetValueWithSelection:
    id: str
    name: str
    selected: bool = False
    count: Optional[int] = None


@dataclass(frozen=True)
class FacetWithValues:
    """A facet annotated with the selection state of each of its values."""

    id: str
    name: str
    values: Tuple[FacetValueWithSelection, ...] = ()
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "values": [
                {"id": v.id, "name": v.name, "selected": v.selected, "count": v.count}
                for v in self.values
            ],
        }
