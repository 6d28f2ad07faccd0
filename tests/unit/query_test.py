"""Tests for query objects and per-request memoization."""

from __future__ import annotations

import pytest

from buildview.core.query import parse_id
from buildview.db import InMemoryStore
from buildview.queries import QUERIES, BranchQuery, BroadcastQuery, BuildQuery, RepositoryQuery


class TestParams:
    def test_qualified_key_wins(self, store: InMemoryStore) -> None:
        query = RepositoryQuery(store, {"repository.private": "true", "private": "false"}, "repository")
        assert query.bool_param("private") is True

    def test_plain_key_only_for_main_type(self, store: InMemoryStore) -> None:
        assert RepositoryQuery(store, {"private": "true"}, "repository").bool_param("private") is True
        assert RepositoryQuery(store, {"private": "true"}, "build").bool_param("private") is None

    def test_unparseable_bool_is_ignored(self, store: InMemoryStore) -> None:
        assert RepositoryQuery(store, {"private": "maybe"}, "repository").bool_param("private") is None

    def test_list_param_splits_commas_and_repeats(self, store: InMemoryStore) -> None:
        query = BuildQuery(store, {"build.state": ["passed,failed", "errored"]}, "build")
        assert query.list_param("state") == ["passed", "failed", "errored"]

    def test_parse_id(self) -> None:
        assert parse_id("12") == 12
        assert parse_id("abc") is None
        assert parse_id(None) is None


class TestRepositoryQuery:
    @pytest.mark.asyncio
    async def test_find_by_id_and_slug(self, store: InMemoryStore) -> None:
        query = RepositoryQuery(store, {}, "repository")
        assert (await query.find(id="1")).name == "minimal"
        assert (await query.find(slug="josevalim/enginex")).id == 2
        assert await query.find(id="nope") is None
        assert await query.find(slug="svenfuchs") is None
        assert await query.find() is None

    @pytest.mark.asyncio
    async def test_for_owner_separates_users_and_organizations(self, store: InMemoryStore) -> None:
        query = RepositoryQuery(store, {}, "repository")
        user = store.tables["user"][1]
        organization = store.tables["organization"][1]
        assert [r.id for r in await query.for_owner(user)] == [1]
        assert [r.id for r in await query.for_owner(organization)] == [3]

    @pytest.mark.asyncio
    async def test_for_member_filters_by_privacy(self, store: InMemoryStore) -> None:
        user = store.tables["user"][1]
        assert [r.id for r in await RepositoryQuery(store, {}, "repository").for_member(user)] == [1, 3]
        private = RepositoryQuery(store, {"repository.private": "true"}, "repository")
        assert [r.id for r in await private.for_member(user)] == [3]


class TestBuildQuery:
    @pytest.mark.asyncio
    async def test_for_repository_newest_first(self, store: InMemoryStore) -> None:
        repository = store.tables["repository"][1]
        builds = await BuildQuery(store, {}, "build").for_repository(repository)
        assert [b.id for b in builds] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_for_repository_filters_state(self, store: InMemoryStore) -> None:
        repository = store.tables["repository"][1]
        builds = await BuildQuery(store, {"state": "configured"}, "build").for_repository(repository)
        assert [b.id for b in builds] == [3]


class TestBranchQuery:
    @pytest.mark.asyncio
    async def test_default_branch_first(self, store: InMemoryStore) -> None:
        repository = store.tables["repository"][1]
        branches = await BranchQuery(store, {}, "branch").for_repository(repository)
        assert [b.name for b in branches] == ["master", "dev"]

    @pytest.mark.asyncio
    async def test_find_needs_both_keys(self, store: InMemoryStore) -> None:
        query = BranchQuery(store, {}, "branch")
        assert (await query.find(repository_id="1", name="dev")).last_build_id == 2
        assert await query.find(repository_id="1") is None


class TestBroadcastQuery:
    @pytest.mark.asyncio
    async def test_active_broadcasts_by_default(self, store: InMemoryStore) -> None:
        user = store.tables["user"][1]
        assert [b.id for b in await BroadcastQuery(store, {}, "broadcast").for_user(user)] == [1, 2]

    @pytest.mark.asyncio
    async def test_inactive_on_request(self, store: InMemoryStore) -> None:
        user = store.tables["user"][1]
        query = BroadcastQuery(store, {"broadcast.active": "false"}, "broadcast")
        assert [b.id for b in await query.for_user(user)] == [3]

    @pytest.mark.asyncio
    async def test_other_users_only_see_global(self, store: InMemoryStore) -> None:
        user = store.tables["user"][2]
        assert [b.id for b in await BroadcastQuery(store, {}, "broadcast").for_user(user)] == [1]


def test_query_registry_is_keyed_by_resource_type() -> None:
    assert QUERIES["repository"] is RepositoryQuery
    assert "owner" in QUERIES
    assert len(QUERIES) == 9
