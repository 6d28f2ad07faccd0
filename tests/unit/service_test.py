"""Tests for per-request services and the dispatcher."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from buildview.access import AnonymousAccess, UserAccess
from buildview.core.errors import (
    EntityMissing,
    LoginRequired,
    NotFound,
    NotFoundReason,
    NotImplementedOperation,
    WrongParams,
)
from buildview.core.service import Dispatcher
from buildview.db import InMemoryStore


class TestQueryMemoization:
    def test_same_query_instance_per_type(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous)
        assert service.query("build") is service.query("build")
        assert service.query() is service.query("repository")
        assert service.query("build") is not service.query("job")

    def test_queries_are_not_shared_between_services(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        assert service_factory(anonymous).query("build") is not service_factory(anonymous).query("build")

    def test_queries_see_filtered_params(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous, params={"repository.id": "1", "evil": "x"})
        assert service.query().params == {"repository.id": "1"}
        assert service.query().main_type == "repository"


class TestFind:
    @pytest.mark.asyncio
    async def test_missing_object(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        with pytest.raises(EntityMissing) as excinfo:
            await service_factory(anonymous).find("repository", id=99)
        assert excinfo.value.reason is NotFoundReason.ABSENT

    @pytest.mark.asyncio
    async def test_invisible_object(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        with pytest.raises(NotFound) as excinfo:
            await service_factory(anonymous).find("repository", id=3)
        assert excinfo.value.reason is NotFoundReason.ACCESS_DENIED
        assert not isinstance(excinfo.value, EntityMissing)

    @pytest.mark.asyncio
    async def test_visible_object(self, sven: UserAccess, service_factory: Any) -> None:
        repository = await service_factory(sven).find("repository", id=3)
        assert repository.slug == "travis-ci/internal"

    @pytest.mark.asyncio
    async def test_both_errors_render_the_same(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous)
        with pytest.raises(NotFound) as missing:
            await service.find("repository", id=99)
        with pytest.raises(NotFound) as hidden:
            await service.find("repository", id=3)
        assert missing.value.to_document() == hidden.value.to_document()


class TestRun:
    @pytest.mark.asyncio
    async def test_unimplemented_service(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        with pytest.raises(NotImplementedOperation):
            await service_factory(anonymous, "repository.update").run(id=1)

    @pytest.mark.asyncio
    async def test_login_required(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        with pytest.raises(LoginRequired):
            await service_factory(anonymous, "repositories.for_current_user").run()

    @pytest.mark.asyncio
    async def test_single_result(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        result = await service_factory(anonymous, "build.find").run(id="2")
        assert result.type == "build"
        assert result.value.id == 2
        assert not result.many

    @pytest.mark.asyncio
    async def test_collection_result_is_paginated(self, sven: UserAccess, service_factory: Any) -> None:
        service = service_factory(sven, "repositories.for_current_user", path="/v3/repos")
        result = await service.run()
        assert result.type == "repositories"
        assert [r.id for r in result.value] == [1, 3]
        assert result.href == "/v3/repos"
        assert result.pagination is not None
        assert result.pagination.count == 2

    @pytest.mark.asyncio
    async def test_unpaginated_collection_drops_invisible(
        self, store: InMemoryStore, anonymous: AnonymousAccess, service_factory: Any
    ) -> None:
        result = await service_factory(anonymous, "jobs.for_build").run(build_id="3")
        assert [j.id for j in result.value] == [5, 6, 7, 8]
        assert result.pagination is None

    @pytest.mark.asyncio
    async def test_restart_records_pending_request(
        self, store: InMemoryStore, sven: UserAccess, service_factory: Any
    ) -> None:
        result = await service_factory(sven, "job.restart").run(id="5")
        assert result.accepted
        assert result.status == 202
        assert result.payload["state_change"] == "restart"
        assert result.payload["resource_type"] == "job"
        [request] = store.tables["request"].values()
        assert (request.resource_id, request.state_change, request.user_id) == (5, "restart", 1)

    @pytest.mark.asyncio
    async def test_restart_without_permission_looks_missing(
        self, store: InMemoryStore, service_factory: Any
    ) -> None:
        jose = UserAccess(store.tables["user"][2])
        with pytest.raises(NotFound) as excinfo:
            await service_factory(jose, "job.cancel").run(id="5")
        assert excinfo.value.resource_type == "job"
        assert store.tables["request"] == {}


class TestParamsFor:
    def test_include_counts_as_request(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous, includes=frozenset({"repository.last_build"}))
        assert service.params_for("repository.last_build")
        assert not service.params_for("repository.owner")

    def test_type_param(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous, params={"@type": "repository.owner"})
        assert service.params_for("repository.owner")

    def test_nested_key(self, anonymous: AnonymousAccess, service_factory: Any) -> None:
        service = service_factory(anonymous, "repositories.for_owner", params={"repository.private.x": "1"})
        assert not service.params_for("repository.private")
        service = service_factory(anonymous, "repositories.for_owner", params={"repository.private": "1"})
        assert service.params_for("repository")


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_unknown_service(
        self, dispatcher: Dispatcher, store: InMemoryStore, anonymous: AnonymousAccess
    ) -> None:
        with pytest.raises(NotImplementedOperation):
            await dispatcher.call("widget.find", access=anonymous, params={}, store=store)

    @pytest.mark.asyncio
    async def test_include_is_validated_before_running(
        self, dispatcher: Dispatcher, store: InMemoryStore, anonymous: AnonymousAccess
    ) -> None:
        with pytest.raises(WrongParams):
            await dispatcher.call(
                "repository.find",
                access=anonymous,
                params={"include": "repository.last_build.branch"},
                store=store,
                id=99,
            )

    @pytest.mark.asyncio
    async def test_unaccepted_params_are_ignored(
        self, dispatcher: Dispatcher, store: InMemoryStore, anonymous: AnonymousAccess
    ) -> None:
        status, document = await dispatcher.call(
            "repository.find", access=anonymous, params={"limit": "nope"}, store=store, id=1
        )
        assert status == 200
        assert document["@type"] == "repository"

    @pytest.mark.asyncio
    async def test_not_found_reason_is_logged(
        self,
        dispatcher: Dispatcher,
        store: InMemoryStore,
        anonymous: AnonymousAccess,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="buildview.core.service"):
            with pytest.raises(NotFound):
                await dispatcher.call("repository.find", access=anonymous, params={}, store=store, id=99)
            with pytest.raises(NotFound):
                await dispatcher.call("repository.find", access=anonymous, params={}, store=store, id=3)
        messages = [record.getMessage() for record in caplog.records]
        assert "repository.find: repository not found (absent)" in messages
        assert "repository.find: repository not found (access_denied)" in messages
