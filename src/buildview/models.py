from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    id: int
    login: str
    name: str | None = None
    github_id: int | None = None
    avatar_url: str | None = None
    is_syncing: bool = False
    synced_at: datetime | None = None


class Organization(BaseModel):
    id: int
    login: str
    name: str | None = None
    github_id: int | None = None
    avatar_url: str | None = None


class Repository(BaseModel):
    id: int
    name: str
    owner_name: str
    owner_id: int
    owner_type: str = "User"
    description: str | None = None
    github_language: str | None = None
    active: bool = True
    private: bool = False
    default_branch_name: str = "master"
    last_build_id: int | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner_name}/{self.name}"


class RepositoryScoped(BaseModel):
    """Base for rows that belong to a repository.

    ``owner_name`` and ``private`` mirror the owning repository so that access
    decisions never need a lookup.
    """

    repository_id: int
    owner_name: str = ""
    private: bool = False


class Branch(RepositoryScoped):
    name: str
    last_build_id: int | None = None
    default_branch: bool = False
    exists_on_github: bool = True


class Commit(RepositoryScoped):
    id: int
    sha: str
    ref: str | None = None
    message: str | None = None
    compare_url: str | None = None
    committed_at: datetime | None = None


class Build(RepositoryScoped):
    id: int
    number: str
    state: str
    duration: int | None = None
    event_type: str = "push"
    previous_state: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    branch_name: str | None = None
    commit_id: int | None = None


class Job(RepositoryScoped):
    id: int
    build_id: int
    number: str
    state: str
    queue: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    commit_id: int | None = None
    owner_id: int
    owner_type: str = "User"


class Broadcast(BaseModel):
    id: int
    message: str
    category: str | None = None
    active: bool = True
    created_at: datetime | None = None
    recipient_type: str | None = None
    recipient_id: int | None = None


class Permission(BaseModel):
    user_id: int
    repository_id: int
    pull: bool = False
    push: bool = False
    admin: bool = False


class Membership(BaseModel):
    user_id: int
    organization_id: int


class AccessToken(BaseModel):
    token: str
    user_id: int


class PendingRequest(BaseModel):
    """A state change handed off for asynchronous processing."""

    id: int
    resource_type: str
    resource_id: int
    state_change: str
    user_id: int | None = None
