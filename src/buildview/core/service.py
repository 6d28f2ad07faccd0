"""Per-request orchestration: parameter filtering, lookups, access checks, pagination."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any, NoReturn

from buildview.core.errors import EntityMissing, LoginRequired, NotFound, NotImplementedOperation
from buildview.core.pagination import Paginator
from buildview.core.params import ParameterScope, build_href
from buildview.core.ports.access import AccessGate
from buildview.core.ports.store import Store
from buildview.core.query import Query
from buildview.core.registry import Registry
from buildview.core.renderer import Renderer, parse_include
from buildview.core.result import Result

logger = logging.getLogger(__name__)

RunFunction = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ServiceDefinition:
    name: str
    resource_type: str
    scope: ParameterScope
    run: RunFunction | None = None
    many: bool = False
    paginator: Paginator | None = None

    @property
    def paginated(self) -> bool:
        return self.paginator is not None


class Service:
    """State for one call of one service. Never shared between requests."""

    def __init__(
        self,
        definition: ServiceDefinition,
        access: AccessGate,
        params: Mapping[str, Any],
        store: Store,
        registry: Registry,
        queries: Mapping[str, type[Query]],
        *,
        includes: frozenset[str] = frozenset(),
        path: str = "",
    ) -> None:
        self.definition = definition
        self.access = access
        self.params = definition.scope.filter(params)
        self.store = store
        self.registry = registry
        self.includes = includes
        self.path = path
        self._query_classes = queries
        self._queries: dict[str, Query] = {}

    @property
    def resource_type(self) -> str:
        return self.definition.resource_type

    @property
    def result_type(self) -> str:
        if self.definition.many:
            declared = self.registry.get(self.resource_type)
            return declared.collection if declared else self.resource_type
        return self.resource_type

    def query(self, type: str | None = None) -> Query:
        type = type or self.resource_type
        if type not in self._queries:
            self._queries[type] = self._query_classes[type](self.store, self.params, self.resource_type)
        return self._queries[type]

    async def find(self, type: str | None = None, **lookup: Any) -> Any:
        type = type or self.resource_type
        obj = await self.query(type).find(**lookup)
        if obj is None:
            self.not_found(type, actually_missing=True)
        if not self.access.visible(obj):
            self.not_found(type)
        return obj

    def not_found(self, type: str | None = None, *, actually_missing: bool = False) -> NoReturn:
        type = type or self.resource_type
        if actually_missing:
            raise EntityMissing(type)
        raise NotFound(type)

    def require_login(self) -> None:
        if not self.access.logged_in:
            raise LoginRequired()

    def result(self, type: str, value: Any, status: int = 200) -> Result:
        href = build_href(self.path, self.params) if isinstance(value, list) else None
        return Result(type=type, value=value, status=status, href=href)

    async def run(self, **lookup: Any) -> Result:
        if self.definition.run is None:
            raise NotImplementedOperation()
        value = await self.definition.run(self, **lookup)
        if value is None:
            self.not_found()
        result = value if isinstance(value, Result) else self.result(self.result_type, value)
        if not result.many:
            return result
        if self.definition.paginated:
            return self.paginate(result)
        return replace(result, value=[item for item in result.value if self.access.visible(item)])

    def paginate(self, result: Result) -> Result:
        assert self.definition.paginator is not None
        return self.definition.paginator.paginate(
            result,
            limit=self.params.get("limit"),
            offset=self.params.get("offset"),
            access=self.access,
            path=self.path,
            params=self.params,
        )

    def params_for(self, prefix: str) -> bool:
        """Whether the request explicitly asks for more of ``prefix``."""
        if self.params.get("@type") == prefix:
            return True
        if isinstance(self.params.get(prefix), Mapping):
            return True
        if prefix in self.includes:
            return True
        return any(key.startswith(f"{prefix}.") for key in self.params)

    def accepted(self, **payload: Any) -> Result:
        payload.setdefault("resource_type", self.resource_type)
        return Result(type="accepted", value=None, status=202, payload=payload)


class Dispatcher:
    """Entry point used by the transport: one ``call`` per inbound request."""

    def __init__(
        self,
        registry: Registry,
        queries: Mapping[str, type[Query]],
        services: Mapping[str, ServiceDefinition],
        *,
        api_version: str = "v3",
        max_depth: int = 4,
    ) -> None:
        self.registry = registry
        self.queries = queries
        self.services = services
        self.api_version = api_version
        self.max_depth = max_depth

    def definition(self, name: str) -> ServiceDefinition:
        try:
            return self.services[name]
        except KeyError:
            raise NotImplementedOperation() from None

    async def call(
        self,
        service_name: str,
        *,
        access: AccessGate,
        params: Mapping[str, Any],
        store: Store,
        path: str = "",
        **lookup: Any,
    ) -> tuple[int, dict[str, Any]]:
        definition = self.definition(service_name)
        scoped = definition.scope.filter(params)
        includes = parse_include(scoped.get("include"), self.registry)
        service = Service(
            definition,
            access,
            scoped,
            store,
            self.registry,
            self.queries,
            includes=includes,
            path=path,
        )
        logger.debug("Calling %s with params %s", service_name, sorted(service.params))
        try:
            result = await service.run(**lookup)
        except NotFound as exc:
            logger.info("%s: %s not found (%s)", service_name, exc.resource_type, exc.reason.value)
            raise
        renderer = Renderer(service, api_version=self.api_version, max_depth=self.max_depth)
        return result.status, await renderer.render(result)
