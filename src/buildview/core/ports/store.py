from typing import Any, Protocol


class Store(Protocol):
    async def get(self, kind: str, key: Any) -> Any | None: ...

    async def select(self, kind: str, **criteria: Any) -> list[Any]: ...

    async def add(self, kind: str, obj: Any) -> Any: ...

    async def ping(self) -> bool: ...
