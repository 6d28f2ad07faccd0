"""Offset-based pagination of collection results.

Invisible items are dropped before slicing, so counts and links only ever
describe what the caller is allowed to see.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from buildview.core.params import build_href
from buildview.core.ports.access import AccessGate
from buildview.core.result import Result


def _as_int(value: Any) -> int | None:
    if isinstance(value, list):
        value = value[-1] if value else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class PageInfo:
    limit: int
    offset: int
    count: int
    path: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_first(self) -> bool:
        return self.offset == 0

    @property
    def is_last(self) -> bool:
        return self.offset + self.limit >= self.count

    def link(self, offset: int) -> dict[str, Any]:
        params = {**self.params, "limit": str(self.limit), "offset": str(offset)}
        return {"@href": build_href(self.path, params), "offset": offset, "limit": self.limit}

    def to_document(self) -> dict[str, Any]:
        last_offset = max(0, ((self.count - 1) // self.limit) * self.limit) if self.count else 0
        return {
            "limit": self.limit,
            "offset": self.offset,
            "count": self.count,
            "is_first": self.is_first,
            "is_last": self.is_last,
            "next": None if self.is_last else self.link(self.offset + self.limit),
            "prev": None if self.is_first else self.link(max(0, self.offset - self.limit)),
            "first": self.link(0),
            "last": self.link(last_offset),
        }


@dataclass(frozen=True)
class Paginator:
    default_limit: int = 25
    max_limit: int = 100

    def limit_for(self, raw: Any) -> int:
        limit = _as_int(raw)
        if limit is None or limit < 1:
            return self.default_limit
        return min(limit, self.max_limit)

    @staticmethod
    def offset_for(raw: Any) -> int:
        offset = _as_int(raw)
        if offset is None:
            return 0
        return max(0, offset)

    def paginate(
        self,
        result: Result,
        limit: Any,
        offset: Any,
        access: AccessGate,
        path: str = "",
        params: Mapping[str, Any] | None = None,
    ) -> Result:
        visible = [item for item in result.value if access.visible(item)]
        applied_limit = self.limit_for(limit)
        applied_offset = self.offset_for(offset)
        # links carry their own limit/offset
        link_params = {k: v for k, v in (params or {}).items() if k not in ("limit", "offset")}
        info = PageInfo(
            limit=applied_limit,
            offset=applied_offset,
            count=len(visible),
            path=path,
            params=link_params,
        )
        return replace(result, value=visible[applied_offset : applied_offset + applied_limit], pagination=info)
