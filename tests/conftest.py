"""Shared fixtures and helpers for tests."""

from typing import Any

import pytest

from buildview.access import AnonymousAccess, UserAccess
from buildview.core.service import Dispatcher, Service, ServiceDefinition
from buildview.db import InMemoryStore, seed_demo
from buildview.queries import QUERIES
from buildview.resources import REGISTRY
from buildview.services import SERVICES


# ---------------------------------------------------------------------------
# Auto-marker: tag every test as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryStore:
    """Return an in-memory store seeded with the demo data set."""
    return seed_demo(InMemoryStore())


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher(REGISTRY, QUERIES, SERVICES)


@pytest.fixture
def anonymous() -> AnonymousAccess:
    return AnonymousAccess()


@pytest.fixture
def sven(store: InMemoryStore) -> UserAccess:
    """Access gate for svenfuchs: admin on repo 1, pull on private repo 3."""
    user = store.tables["user"][1]
    permissions = [p for p in store.tables["permission"].values() if p.user_id == 1]
    return UserAccess(user, permissions)


def make_service(
    store: InMemoryStore,
    access: Any,
    name: str = "repository.find",
    params: dict[str, Any] | None = None,
    includes: frozenset[str] = frozenset(),
    path: str = "",
) -> Service:
    definition: ServiceDefinition = SERVICES[name]
    return Service(
        definition,
        access,
        params or {},
        store,
        REGISTRY,
        QUERIES,
        includes=includes,
        path=path,
    )


@pytest.fixture
def service_factory(store: InMemoryStore) -> Any:
    """Return ``make_service`` bound to the seeded store."""

    def _factory(access: Any, name: str = "repository.find", **kwargs: Any) -> Service:
        return make_service(store, access, name, **kwargs)

    return _factory
