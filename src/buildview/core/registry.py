"""Static resource type declarations.

A ``Registry`` is built once at startup and never mutated afterwards; lookups
go by type tag, by model class, or by collection name.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from buildview.core.service import Service


class Level(str, enum.Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"


Resolver = Callable[[Any, "Service"], Awaitable[Any]]


@dataclass(frozen=True)
class Association:
    resolve: Resolver
    many: bool = False
    # nested objects deeper than this render as stubs; the renderer's limit still applies
    depth: int | None = None


@dataclass(frozen=True)
class ResourceType:
    name: str
    model: type
    collection: str
    href: Callable[[Any], str]
    minimal: tuple[str, ...]
    standard: tuple[str, ...]
    associations: Mapping[str, Association] = field(default_factory=dict)
    permissions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        missing = [name for name in self.minimal if name not in self.standard]
        if missing:
            raise ValueError(f"{self.name}: minimal fields {missing} not in standard representation")
        undeclared = [name for name in self.associations if name not in self.standard]
        if undeclared:
            raise ValueError(f"{self.name}: associations {undeclared} are not declared fields")
        object.__setattr__(self, "associations", MappingProxyType(dict(self.associations)))

    def fields_for(self, level: Level) -> tuple[str, ...]:
        return self.minimal if level is Level.MINIMAL else self.standard

    def has_field(self, name: str) -> bool:
        return name in self.standard


class Registry:
    def __init__(self, types: Iterable[ResourceType]) -> None:
        types = list(types)
        self._by_name = MappingProxyType({t.name: t for t in types})
        self._by_model = MappingProxyType({t.model: t for t in types})
        self._by_collection = MappingProxyType({t.collection: t for t in types})

    def __getitem__(self, name: str) -> ResourceType:
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._by_name.values())

    def get(self, name: str) -> ResourceType | None:
        return self._by_name.get(name)

    def for_object(self, obj: Any) -> ResourceType:
        try:
            return self._by_model[type(obj)]
        except KeyError:
            raise TypeError(f"no resource type declared for {type(obj).__name__}") from None

    def for_collection(self, name: str) -> ResourceType | None:
        return self._by_collection.get(name)
