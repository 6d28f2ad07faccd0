"""Service catalogue for the v3 API."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from buildview.core.pagination import Paginator
from buildview.core.params import ParameterScope
from buildview.core.result import Result
from buildview.core.service import RunFunction, Service, ServiceDefinition
from buildview.models import Build, Job, PendingRequest, Repository


async def find_repository(service: Service, id: Any = None, slug: str | None = None) -> Repository:
    return await service.find("repository", id=id, slug=slug)


async def repositories_for_owner(service: Service, login: str) -> list[Repository]:
    owner = await service.find("owner", login=login)
    return await service.query("repository").for_owner(owner)


async def repositories_for_current_user(service: Service) -> list[Repository]:
    service.require_login()
    return await service.query("repository").for_member(service.access.user)


async def find_build(service: Service, id: Any) -> Build:
    return await service.find("build", id=id)


async def builds_for_repository(service: Service, repository_id: Any) -> list[Build]:
    repository = await service.find("repository", id=repository_id)
    return await service.query("build").for_repository(repository)


async def find_job(service: Service, id: Any) -> Job:
    return await service.find("job", id=id)


async def jobs_for_build(service: Service, build_id: Any) -> list[Job]:
    build = await service.find("build", id=build_id)
    return await service.query("job").for_build(build)


def _job_state_change(state_change: str) -> RunFunction:
    async def run(service: Service, id: Any) -> Result:
        service.require_login()
        job = await service.find("job", id=id)
        if not service.access.allowed(state_change, job):
            service.not_found("job")
        user = service.access.user
        await service.store.add(
            "request",
            PendingRequest(
                id=0,
                resource_type="job",
                resource_id=job.id,
                state_change=state_change,
                user_id=user.id if user is not None else None,
            ),
        )
        return service.accepted(job=job, state_change=state_change)

    return run


async def find_branch(service: Service, repository_id: Any, name: str) -> Any:
    await service.find("repository", id=repository_id)
    return await service.find("branch", repository_id=repository_id, name=name)


async def branches_for_repository(service: Service, repository_id: Any) -> list[Any]:
    repository = await service.find("repository", id=repository_id)
    return await service.query("branch").for_repository(repository)


async def find_user(service: Service, id: Any) -> Any:
    return await service.find("user", id=id)


async def current_user(service: Service) -> Any:
    service.require_login()
    return service.access.user


async def find_organization(service: Service, id: Any) -> Any:
    return await service.find("organization", id=id)


async def find_owner(service: Service, login: str) -> Any:
    return await service.find("owner", login=login)


async def find_commit(service: Service, id: Any) -> Any:
    return await service.find("commit", id=id)


async def broadcasts_for_current_user(service: Service) -> list[Any]:
    service.require_login()
    return await service.query("broadcast").for_user(service.access.user)


async def find_broadcast(service: Service, id: Any) -> Any:
    service.require_login()
    query = service.query("broadcast")
    broadcast = await query.find(id=id)
    if broadcast is None:
        service.not_found("broadcast", actually_missing=True)
    # only broadcasts addressed to the caller
    if (broadcast.recipient_type, broadcast.recipient_id) not in await query.recipients_for(service.access.user):
        service.not_found("broadcast")
    return broadcast


_DEFAULT_PAGINATOR = Paginator(default_limit=25, max_limit=100)

_DEFINITIONS = [
    ServiceDefinition(
        "repository.find",
        "repository",
        ParameterScope.declare("repository", fields=("id", "slug")),
        run=find_repository,
    ),
    ServiceDefinition(
        "repository.update",
        "repository",
        ParameterScope.declare("repository", fields=("id", "description", "active")),
    ),
    ServiceDefinition(
        "repositories.for_owner",
        "repository",
        ParameterScope.declare("repository", fields=("private", "active"), paginated=True),
        run=repositories_for_owner,
        many=True,
        paginator=_DEFAULT_PAGINATOR,
    ),
    ServiceDefinition(
        "repositories.for_current_user",
        "repository",
        ParameterScope.declare("repository", fields=("private", "active"), paginated=True),
        run=repositories_for_current_user,
        many=True,
        paginator=_DEFAULT_PAGINATOR,
    ),
    ServiceDefinition(
        "build.find",
        "build",
        ParameterScope.declare("build", fields=("id",)),
        run=find_build,
    ),
    ServiceDefinition(
        "builds.for_repository",
        "build",
        ParameterScope.declare("build", fields=("state", "event_type"), paginated=True),
        run=builds_for_repository,
        many=True,
        paginator=_DEFAULT_PAGINATOR,
    ),
    ServiceDefinition(
        "job.find",
        "job",
        ParameterScope.declare("job", fields=("id",)),
        run=find_job,
    ),
    ServiceDefinition(
        "jobs.for_build",
        "job",
        ParameterScope.declare("job"),
        run=jobs_for_build,
        many=True,
    ),
    ServiceDefinition(
        "job.restart",
        "job",
        ParameterScope.declare("job", fields=("id",)),
        run=_job_state_change("restart"),
    ),
    ServiceDefinition(
        "job.cancel",
        "job",
        ParameterScope.declare("job", fields=("id",)),
        run=_job_state_change("cancel"),
    ),
    ServiceDefinition(
        "branch.find",
        "branch",
        ParameterScope.declare("branch", fields=("name",)),
        run=find_branch,
    ),
    ServiceDefinition(
        "branches.for_repository",
        "branch",
        ParameterScope.declare("branch", fields=("exists_on_github",), paginated=True),
        run=branches_for_repository,
        many=True,
        paginator=_DEFAULT_PAGINATOR,
    ),
    ServiceDefinition(
        "user.find",
        "user",
        ParameterScope.declare("user", fields=("id",)),
        run=find_user,
    ),
    ServiceDefinition(
        "user.current",
        "user",
        ParameterScope.declare("user"),
        run=current_user,
    ),
    ServiceDefinition(
        "organization.find",
        "organization",
        ParameterScope.declare("organization", fields=("id",)),
        run=find_organization,
    ),
    ServiceDefinition(
        "owner.find",
        "owner",
        ParameterScope.declare("owner", fields=("login",)),
        run=find_owner,
    ),
    ServiceDefinition(
        "commit.find",
        "commit",
        ParameterScope.declare("commit", fields=("id",)),
        run=find_commit,
    ),
    ServiceDefinition(
        "broadcasts.for_current_user",
        "broadcast",
        ParameterScope.declare("broadcast", fields=("active",)),
        run=broadcasts_for_current_user,
        many=True,
    ),
    ServiceDefinition(
        "broadcast.find",
        "broadcast",
        ParameterScope.declare("broadcast", fields=("id",)),
        run=find_broadcast,
    ),
]

SERVICES = MappingProxyType({definition.name: definition for definition in _DEFINITIONS})
