"""Resource type declarations for the v3 API."""

from __future__ import annotations

from typing import Any

from buildview.core.registry import Association, Registry, ResourceType
from buildview.core.service import Service
from buildview.models import Branch, Broadcast, Build, Commit, Job, Organization, Repository, User


async def _repository(obj: Any, service: Service) -> Repository | None:
    return await service.query("repository").find(id=obj.repository_id)


async def _commit(obj: Any, service: Service) -> Commit | None:
    if obj.commit_id is None:
        return None
    return await service.query("commit").find(id=obj.commit_id)


async def _last_build(obj: Any, service: Service) -> Build | None:
    if obj.last_build_id is None:
        return None
    return await service.query("build").find(id=obj.last_build_id)


async def _repository_owner(repository: Repository, service: Service) -> User | Organization | None:
    return await service.query("owner").by_reference(repository.owner_type, repository.owner_id)


async def _job_owner(job: Job, service: Service) -> User | Organization | None:
    return await service.query("owner").by_reference(job.owner_type, job.owner_id)


async def _default_branch(repository: Repository, service: Service) -> Branch | None:
    return await service.query("branch").find(repository_id=repository.id, name=repository.default_branch_name)


async def _build_branch(build: Build, service: Service) -> Branch | None:
    if build.branch_name is None:
        return None
    return await service.query("branch").find(repository_id=build.repository_id, name=build.branch_name)


async def _build_jobs(build: Build, service: Service) -> list[Job]:
    return await service.query("job").for_build(build)


async def _job_build(job: Job, service: Service) -> Build | None:
    return await service.query("build").find(id=job.build_id)


async def _recipient(broadcast: Broadcast, service: Service) -> Any | None:
    return await service.query("broadcast").recipient(broadcast)


REPOSITORY = ResourceType(
    name="repository",
    model=Repository,
    collection="repositories",
    href=lambda r: f"/repo/{r.id}",
    minimal=("id", "name", "slug"),
    standard=(
        "id",
        "name",
        "slug",
        "description",
        "github_language",
        "active",
        "private",
        "owner",
        "last_build",
        "default_branch",
    ),
    associations={
        "owner": Association(_repository_owner),
        "last_build": Association(_last_build),
        "default_branch": Association(_default_branch),
    },
    permissions=("read", "enable", "disable", "create_request"),
)

BUILD = ResourceType(
    name="build",
    model=Build,
    collection="builds",
    href=lambda b: f"/build/{b.id}",
    minimal=("id",),
    standard=(
        "id",
        "number",
        "state",
        "duration",
        "event_type",
        "previous_state",
        "started_at",
        "finished_at",
        "repository",
        "branch",
        "commit",
        "jobs",
    ),
    associations={
        "repository": Association(_repository),
        "branch": Association(_build_branch),
        "commit": Association(_commit),
        "jobs": Association(_build_jobs, many=True),
    },
    permissions=("read", "restart", "cancel"),
)

JOB = ResourceType(
    name="job",
    model=Job,
    collection="jobs",
    href=lambda j: f"/job/{j.id}",
    minimal=("id",),
    standard=(
        "id",
        "number",
        "state",
        "started_at",
        "finished_at",
        "build",
        "queue",
        "repository",
        "commit",
        "owner",
    ),
    associations={
        "build": Association(_job_build),
        "repository": Association(_repository),
        "commit": Association(_commit),
        "owner": Association(_job_owner),
    },
    permissions=("read", "restart", "cancel"),
)

BRANCH = ResourceType(
    name="branch",
    model=Branch,
    collection="branches",
    href=lambda b: f"/repo/{b.repository_id}/branch/{b.name}",
    minimal=("name",),
    standard=("name", "repository", "default_branch", "exists_on_github", "last_build"),
    associations={
        "repository": Association(_repository),
        "last_build": Association(_last_build),
    },
)

USER = ResourceType(
    name="user",
    model=User,
    collection="users",
    href=lambda u: f"/user/{u.id}",
    minimal=("id", "login"),
    standard=("id", "login", "name", "github_id", "avatar_url", "is_syncing", "synced_at"),
)

ORGANIZATION = ResourceType(
    name="organization",
    model=Organization,
    collection="organizations",
    href=lambda o: f"/org/{o.id}",
    minimal=("id", "login"),
    standard=("id", "login", "name", "github_id", "avatar_url"),
)

COMMIT = ResourceType(
    name="commit",
    model=Commit,
    collection="commits",
    href=lambda c: f"/commit/{c.id}",
    minimal=("id", "sha"),
    standard=("id", "sha", "ref", "message", "compare_url", "committed_at"),
)

BROADCAST = ResourceType(
    name="broadcast",
    model=Broadcast,
    collection="broadcasts",
    href=lambda b: f"/broadcast/{b.id}",
    minimal=("id", "message"),
    standard=("id", "message", "created_at", "category", "active", "recipient"),
    associations={"recipient": Association(_recipient)},
)

REGISTRY = Registry([REPOSITORY, BUILD, JOB, BRANCH, USER, ORGANIZATION, COMMIT, BROADCAST])
