from __future__ import annotations

from typing import Any

from buildview.core.query import Query, QueryRegistry, parse_id
from buildview.models import Branch, Broadcast, Build, Job, Organization, Repository, User


class RepositoryQuery(Query):
    resource_type = "repository"

    async def find(self, id: Any = None, slug: str | None = None, **lookup: Any) -> Repository | None:
        if id is not None:
            repository_id = parse_id(id)
            return None if repository_id is None else await self.store.get("repository", repository_id)
        if slug:
            owner_name, _, name = slug.partition("/")
            if not name:
                return None
            return await self._first("repository", owner_name=owner_name, name=name)
        return None

    async def for_owner(self, owner: User | Organization) -> list[Repository]:
        owner_type = "Organization" if isinstance(owner, Organization) else "User"
        rows = await self.store.select("repository", owner_id=owner.id, owner_type=owner_type)
        return self._filter(rows)

    async def for_member(self, user: User) -> list[Repository]:
        permissions = await self.store.select("permission", user_id=user.id)
        rows = []
        for permission in permissions:
            repository = await self.store.get("repository", permission.repository_id)
            if repository is not None:
                rows.append(repository)
        return self._filter(rows)

    def _filter(self, rows: list[Repository]) -> list[Repository]:
        private = self.bool_param("private")
        active = self.bool_param("active")
        if private is not None:
            rows = [r for r in rows if r.private == private]
        if active is not None:
            rows = [r for r in rows if r.active == active]
        return sorted(rows, key=lambda r: r.id)


class BuildQuery(Query):
    resource_type = "build"

    async def find(self, id: Any = None, **lookup: Any) -> Build | None:
        build_id = parse_id(id)
        return None if build_id is None else await self.store.get("build", build_id)

    async def for_repository(self, repository: Repository) -> list[Build]:
        rows = await self.store.select("build", repository_id=repository.id)
        states = self.list_param("state")
        event_types = self.list_param("event_type")
        if states:
            rows = [b for b in rows if b.state in states]
        if event_types:
            rows = [b for b in rows if b.event_type in event_types]
        return sorted(rows, key=lambda b: b.id, reverse=True)


class JobQuery(Query):
    resource_type = "job"

    async def find(self, id: Any = None, **lookup: Any) -> Job | None:
        job_id = parse_id(id)
        return None if job_id is None else await self.store.get("job", job_id)

    async def for_build(self, build: Build) -> list[Job]:
        rows = await self.store.select("job", build_id=build.id)
        return sorted(rows, key=lambda j: j.id)


class BranchQuery(Query):
    resource_type = "branch"

    async def find(self, repository_id: Any = None, name: str | None = None, **lookup: Any) -> Branch | None:
        key = parse_id(repository_id)
        if key is None or not name:
            return None
        return await self.store.get("branch", (key, name))

    async def for_repository(self, repository: Repository) -> list[Branch]:
        rows = await self.store.select("branch", repository_id=repository.id)
        exists = self.bool_param("exists_on_github")
        if exists is not None:
            rows = [b for b in rows if b.exists_on_github == exists]
        # default branch first
        return sorted(rows, key=lambda b: (not b.default_branch, b.name))


class UserQuery(Query):
    resource_type = "user"

    async def find(self, id: Any = None, login: str | None = None, **lookup: Any) -> User | None:
        if id is not None:
            user_id = parse_id(id)
            return None if user_id is None else await self.store.get("user", user_id)
        if login:
            return await self._first("user", login=login)
        return None


class OrganizationQuery(Query):
    resource_type = "organization"

    async def find(self, id: Any = None, login: str | None = None, **lookup: Any) -> Organization | None:
        if id is not None:
            organization_id = parse_id(id)
            return None if organization_id is None else await self.store.get("organization", organization_id)
        if login:
            return await self._first("organization", login=login)
        return None


class OwnerQuery(Query):
    resource_type = "owner"

    async def find(self, login: str | None = None, **lookup: Any) -> User | Organization | None:
        if not login:
            return None
        owner = await self._first("user", login=login)
        if owner is None:
            owner = await self._first("organization", login=login)
        return owner

    async def by_reference(self, owner_type: str, owner_id: int) -> User | Organization | None:
        kind = "organization" if owner_type == "Organization" else "user"
        return await self.store.get(kind, owner_id)


class CommitQuery(Query):
    resource_type = "commit"

    async def find(self, id: Any = None, **lookup: Any) -> Any | None:
        commit_id = parse_id(id)
        return None if commit_id is None else await self.store.get("commit", commit_id)


class BroadcastQuery(Query):
    resource_type = "broadcast"

    async def find(self, id: Any = None, **lookup: Any) -> Broadcast | None:
        broadcast_id = parse_id(id)
        return None if broadcast_id is None else await self.store.get("broadcast", broadcast_id)

    async def recipients_for(self, user: User) -> set[tuple[str | None, int | None]]:
        """Recipient references a broadcast may carry to reach ``user``."""
        memberships = await self.store.select("membership", user_id=user.id)
        permissions = await self.store.select("permission", user_id=user.id)
        recipients: set[tuple[str | None, int | None]] = {(None, None), ("User", user.id)}
        recipients.update(("Organization", m.organization_id) for m in memberships)
        recipients.update(("Repository", p.repository_id) for p in permissions)
        return recipients

    async def for_user(self, user: User) -> list[Broadcast]:
        recipients = await self.recipients_for(user)
        active = self.bool_param("active")
        if active is None:
            active = True
        rows = await self.store.select("broadcast", active=active)
        rows = [b for b in rows if (b.recipient_type, b.recipient_id) in recipients]
        return sorted(rows, key=lambda b: b.id)

    async def recipient(self, broadcast: Broadcast) -> Any | None:
        if broadcast.recipient_type is None or broadcast.recipient_id is None:
            return None
        kind = {"User": "user", "Organization": "organization", "Repository": "repository"}.get(
            broadcast.recipient_type
        )
        return None if kind is None else await self.store.get(kind, broadcast.recipient_id)


QUERIES = QueryRegistry(
    [
        RepositoryQuery,
        BuildQuery,
        JobQuery,
        BranchQuery,
        UserQuery,
        OrganizationQuery,
        OwnerQuery,
        CommitQuery,
        BroadcastQuery,
    ]
)
