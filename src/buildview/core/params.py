"""Whitelisting of query-string parameters per service."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

DEFAULT_PARAMS = ("include", "@type")
PAGINATION_PARAMS = ("limit", "offset")


@dataclass(frozen=True)
class ParameterScope:
    """The set of parameter keys a service accepts."""

    result_type: str
    keys: frozenset[str]

    @classmethod
    def declare(
        cls,
        result_type: str,
        *,
        fields: Iterable[str] = (),
        keys: Iterable[str] = (),
        prefix: str | None = None,
        paginated: bool = False,
    ) -> ParameterScope:
        """Build a scope.

        ``fields`` register both the plain key and ``"<prefix>.<field>"``
        (the prefix defaults to ``result_type``); ``keys`` register only
        themselves.
        """
        accepted = set(DEFAULT_PARAMS)
        accepted.update(keys)
        for field in fields:
            accepted.add(field)
            accepted.add(f"{prefix or result_type}.{field}")
        if paginated:
            accepted.update(PAGINATION_PARAMS)
        return cls(result_type=result_type, keys=frozenset(accepted))

    def accepts(self, key: str) -> bool:
        return key in self.keys

    def filter(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in params.items() if key in self.keys}


def build_href(path: str, params: Mapping[str, Any]) -> str:
    """Render ``path`` plus a query string with keys in sorted order."""
    items = sorted((key, value) for key, value in params.items() if key != "@type" and value is not None)
    if not items:
        return path
    return f"{path}?{urlencode(items, doseq=True, safe=',')}"
