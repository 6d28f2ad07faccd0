from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from buildview.core.ports.store import Store

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class Query:
    """Lookups for one resource type, bound to one request's parameters."""

    resource_type: ClassVar[str]

    def __init__(self, store: Store, params: Mapping[str, Any], main_type: str) -> None:
        self.store = store
        self.params = params
        self.main_type = main_type

    def param(self, key: str) -> Any:
        """Return ``<type>.<key>``, falling back to plain ``key`` for the request's main type."""
        value = self.params.get(f"{self.resource_type}.{key}")
        if value is None and self.main_type == self.resource_type:
            value = self.params.get(key)
        return value

    def bool_param(self, key: str) -> bool | None:
        value = self.param(key)
        if isinstance(value, list):
            value = value[-1] if value else None
        if value is None:
            return None
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        return None

    def list_param(self, key: str) -> list[str]:
        value = self.param(key)
        if value is None:
            return []
        chunks = value if isinstance(value, list) else [value]
        return [part.strip() for chunk in chunks for part in str(chunk).split(",") if part.strip()]

    async def find(self, **lookup: Any) -> Any | None:
        return None

    async def _first(self, kind: str, **criteria: Any) -> Any | None:
        rows = await self.store.select(kind, **criteria)
        return rows[0] if rows else None


def parse_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class QueryRegistry(Mapping[str, type[Query]]):
    """Read-only map from resource type tag to its query class."""

    def __init__(self, queries: Iterable[type[Query]]) -> None:
        self._queries = MappingProxyType({q.resource_type: q for q in queries})

    def __getitem__(self, key: str) -> type[Query]:
        return self._queries[key]

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._queries)

    def __len__(self) -> int:
        return len(self._queries)
