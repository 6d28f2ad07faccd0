"""Rendering of results into nested documents.

Top-level objects render at the standard level. Nested associations render at
the minimal level unless the ``include`` directive names them as
``<parent type>.<field>``, in which case they render at the standard level.
A nested object collapses to a link-only stub (``{"@href": ...}``) when the
caller may not see it, when it is already being rendered further up the
current path, or when the render depth limit is reached.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from buildview.core.errors import WrongParams
from buildview.core.registry import Level, Registry, ResourceType
from buildview.core.result import Result

if TYPE_CHECKING:
    from buildview.core.service import Service

ILLEGAL_INCLUDE = "illegal format for include parameter"

_INCLUDE_TOKEN = re.compile(r"^[a-z_]+\.[a-z_]+$")


def parse_include(value: Any, registry: Registry) -> frozenset[str]:
    """Validate an ``include`` parameter and return its ``type.field`` tokens."""
    if value is None:
        return frozenset()
    chunks = value if isinstance(value, list) else [value]
    tokens: list[str] = []
    for chunk in chunks:
        for token in str(chunk).split(","):
            token = token.strip()
            if not token:
                continue
            if not _INCLUDE_TOKEN.match(token):
                raise WrongParams(ILLEGAL_INCLUDE)
            type_name, field = token.split(".")
            declared = registry.get(type_name)
            if declared is None or not declared.has_field(field):
                raise WrongParams(f'no field "{token}" to include')
            tokens.append(token)
    return frozenset(tokens)


def format_value(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value


class Renderer:
    def __init__(self, service: Service, *, api_version: str = "v3", max_depth: int = 4) -> None:
        self.service = service
        self.registry = service.registry
        self.access = service.access
        self.prefix = f"/{api_version}"
        self.max_depth = max_depth

    def href(self, obj: Any) -> str:
        return self.prefix + self.registry.for_object(obj).href(obj)

    async def render(self, result: Result) -> dict[str, Any]:
        if result.accepted:
            return await self._render_accepted(result)
        if result.many:
            return await self._render_collection(result)
        return await self.render_model(result.value, Level.STANDARD)

    async def render_model(
        self,
        obj: Any,
        level: Level,
        path: frozenset[str] = frozenset(),
        depth: int = 0,
    ) -> dict[str, Any]:
        declared = self.registry.for_object(obj)
        href = self.href(obj)
        document: dict[str, Any] = {
            "@type": declared.name,
            "@href": href,
            "@representation": level.value,
        }
        if declared.permissions and level is Level.STANDARD:
            document["@permissions"] = {name: self.access.allowed(name, obj) for name in declared.permissions}

        path = path | {href}
        for field in self._fields(declared, level):
            association = declared.associations.get(field)
            if association is None:
                document[field] = format_value(getattr(obj, field))
                continue
            value = await association.resolve(obj, self.service)
            if association.many:
                document[field] = [
                    await self._render_nested(item, declared, field, path, depth, association.depth) for item in value
                ]
            elif value is None:
                document[field] = None
            else:
                document[field] = await self._render_nested(value, declared, field, path, depth, association.depth)
        return document

    def _fields(self, declared: ResourceType, level: Level) -> list[str]:
        wanted = set(declared.fields_for(level))
        wanted.update(field for field in declared.standard if f"{declared.name}.{field}" in self.service.includes)
        return [field for field in declared.standard if field in wanted]

    async def _render_nested(
        self,
        obj: Any,
        parent: ResourceType,
        field: str,
        path: frozenset[str],
        depth: int,
        limit: int | None = None,
    ) -> dict[str, Any]:
        href = self.href(obj)
        max_depth = self.max_depth if limit is None else min(limit, self.max_depth)
        if not self.access.visible(obj) or href in path or depth >= max_depth:
            return {"@href": href}
        level = Level.STANDARD if self.service.params_for(f"{parent.name}.{field}") else Level.MINIMAL
        return await self.render_model(obj, level, path, depth + 1)

    async def _render_collection(self, result: Result) -> dict[str, Any]:
        document: dict[str, Any] = {
            "@type": result.type,
            "@href": result.href,
            "@representation": Level.STANDARD.value,
        }
        if result.pagination is not None:
            document["@pagination"] = result.pagination.to_document()
        document[result.type] = [await self.render_model(item, Level.STANDARD) for item in result.value]
        return document

    async def _render_accepted(self, result: Result) -> dict[str, Any]:
        document: dict[str, Any] = {"@type": "pending"}
        for key, value in result.payload.items():
            if key == "resource_type":
                continue
            if isinstance(value, str | int | float | bool) or value is None:
                document[key] = value
            elif self.access.visible(value):
                document[key] = await self.render_model(value, Level.MINIMAL)
            else:
                document[key] = {"@href": self.href(value)}
        document["resource_type"] = result.payload["resource_type"]
        return document
