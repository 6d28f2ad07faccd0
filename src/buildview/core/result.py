from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from buildview.core.pagination import PageInfo


@dataclass(frozen=True)
class Result:
    """What a service hands to the renderer."""

    type: str
    value: Any
    status: int = 200
    href: str | None = None
    pagination: PageInfo | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def many(self) -> bool:
        return isinstance(self.value, list)

    @property
    def accepted(self) -> bool:
        return self.type == "accepted"
