from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from buildview.models import (
    AccessToken,
    Branch,
    Broadcast,
    Build,
    Commit,
    Job,
    Membership,
    Organization,
    PendingRequest,
    Permission,
    Repository,
    RepositoryScoped,
    User,
)

_KEYS: dict[str, tuple[type[BaseModel], Callable[[Any], Any]]] = {
    "user": (User, lambda row: row.id),
    "organization": (Organization, lambda row: row.id),
    "repository": (Repository, lambda row: row.id),
    "branch": (Branch, lambda row: (row.repository_id, row.name)),
    "build": (Build, lambda row: row.id),
    "job": (Job, lambda row: row.id),
    "commit": (Commit, lambda row: row.id),
    "broadcast": (Broadcast, lambda row: row.id),
    "permission": (Permission, lambda row: (row.user_id, row.repository_id)),
    "membership": (Membership, lambda row: (row.user_id, row.organization_id)),
    "token": (AccessToken, lambda row: row.token),
    "request": (PendingRequest, lambda row: row.id),
}


class InMemoryStore:
    def __init__(self) -> None:
        self.tables: dict[str, dict[Any, Any]] = {kind: {} for kind in _KEYS}
        self._next_request_id = 1

    def put(self, kind: str, obj: Any) -> Any:
        """Insert or replace a row; repository-scoped rows inherit owner and privacy."""
        model, key = self._table_spec(kind)
        if not isinstance(obj, model):
            raise TypeError(f"{kind} rows must be {model.__name__}, got {type(obj).__name__}")
        if isinstance(obj, RepositoryScoped):
            repository = self.tables["repository"].get(obj.repository_id)
            if repository is not None:
                obj = obj.model_copy(update={"owner_name": repository.owner_name, "private": repository.private})
        self.tables[kind][key(obj)] = obj
        return obj

    def update(self, kind: str, key: Any, **changes: Any) -> Any:
        row = self.tables[kind][key]
        updated = row.model_copy(update=changes)
        self.tables[kind][key] = updated
        if isinstance(updated, Repository) and ({"private", "owner_name"} & changes.keys()):
            for table in self.tables.values():
                for row_key, scoped in list(table.items()):
                    if isinstance(scoped, RepositoryScoped) and scoped.repository_id == updated.id:
                        table[row_key] = scoped.model_copy(
                            update={"owner_name": updated.owner_name, "private": updated.private}
                        )
        return updated

    async def get(self, kind: str, key: Any) -> Any | None:
        self._table_spec(kind)
        return self.tables[kind].get(key)

    async def select(self, kind: str, **criteria: Any) -> list[Any]:
        self._table_spec(kind)
        return [
            row
            for row in self.tables[kind].values()
            if all(getattr(row, name) == value for name, value in criteria.items())
        ]

    async def add(self, kind: str, obj: Any) -> Any:
        if isinstance(obj, PendingRequest) and obj.id == 0:
            obj = obj.model_copy(update={"id": self._next_request_id})
        if isinstance(obj, PendingRequest):
            self._next_request_id = max(self._next_request_id, obj.id + 1)
        return self.put(kind, obj)

    async def ping(self) -> bool:
        return True

    @staticmethod
    def _table_spec(kind: str) -> tuple[type[BaseModel], Callable[[Any], Any]]:
        try:
            return _KEYS[kind]
        except KeyError:
            raise KeyError(f"unknown table {kind!r}") from None
