from typing import Any, Protocol

from buildview.models import User


class AccessGate(Protocol):
    @property
    def logged_in(self) -> bool: ...

    @property
    def full_access(self) -> bool: ...

    @property
    def user(self) -> User | None: ...

    def visible(self, obj: Any) -> bool: ...

    def allowed(self, action: str, obj: Any) -> bool: ...

    def scoped_to(self, owner_name: str) -> bool: ...
