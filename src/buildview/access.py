"""Reference access gates.

Credentials are resolved by the transport (see ``buildview.api.dependencies``);
these classes only answer visibility and permission questions for an already
identified caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from buildview.models import Broadcast, Organization, Permission, Repository, RepositoryScoped, User

_PERMISSION_FLAGS = {
    "enable": "admin",
    "disable": "admin",
    "create_request": "push",
    "restart": "push",
    "cancel": "push",
}


def _repository_info(obj: Any) -> tuple[int, str, bool] | None:
    if isinstance(obj, Repository):
        return obj.id, obj.owner_name, obj.private
    if isinstance(obj, RepositoryScoped):
        return obj.repository_id, obj.owner_name, obj.private
    return None


class AccessControl:
    """Anonymous visibility rules; subclasses widen them."""

    logged_in = False
    full_access = False
    user: User | None = None

    def __init__(self, private_api: bool = False) -> None:
        self.private_api = private_api

    def visible(self, obj: Any) -> bool:
        info = _repository_info(obj)
        if info is not None:
            repository_id, owner_name, private = info
            if not private and not self.private_api:
                return True
            return self._private_visible(repository_id, owner_name)
        if isinstance(obj, User | Organization):
            return self.logged_in or self.full_access or not self.private_api
        if isinstance(obj, Broadcast):
            return self.logged_in
        return False

    def allowed(self, action: str, obj: Any) -> bool:
        if action == "read":
            return self.visible(obj)
        if not self.visible(obj):
            return False
        return self._permitted(action, obj)

    def scoped_to(self, owner_name: str) -> bool:
        return False

    def _private_visible(self, repository_id: int, owner_name: str) -> bool:
        return False

    def _permitted(self, action: str, obj: Any) -> bool:
        return False


class AnonymousAccess(AccessControl):
    pass


class UserAccess(AccessControl):
    logged_in = True

    def __init__(self, user: User, permissions: Iterable[Permission] = (), private_api: bool = False) -> None:
        super().__init__(private_api)
        self.user = user
        self.permissions = {p.repository_id: p for p in permissions if p.user_id == user.id}

    def _private_visible(self, repository_id: int, owner_name: str) -> bool:
        permission = self.permissions.get(repository_id)
        return permission is not None and permission.pull

    def _permitted(self, action: str, obj: Any) -> bool:
        info = _repository_info(obj)
        flag = _PERMISSION_FLAGS.get(action)
        if info is None or flag is None:
            return False
        permission = self.permissions.get(info[0])
        return permission is not None and bool(getattr(permission, flag))


class ApplicationAccess(AccessControl):
    """A trusted internal application, optionally scoped to one owner."""

    def __init__(self, name: str, full_access: bool = False, scope: str | None = None, private_api: bool = False) -> None:
        super().__init__(private_api)
        self.name = name
        self.full_access = full_access
        self.scope = scope

    def scoped_to(self, owner_name: str) -> bool:
        return self.scope is None or self.scope == owner_name

    def _private_visible(self, repository_id: int, owner_name: str) -> bool:
        return self.full_access and self.scoped_to(owner_name)

    def _permitted(self, action: str, obj: Any) -> bool:
        info = _repository_info(obj)
        return info is not None and self.full_access and self.scoped_to(info[1])
