"""Error kinds raised while serving a request.

Every error is converted at the transport boundary into an error document::

    {"@type": "error", "error_type": "...", "error_message": "..."}

Not-found errors additionally carry ``resource_type``. ``EntityMissing`` and
``NotFound`` render identically; only ``reason`` tells them apart in-process.
"""

from __future__ import annotations

import enum
from typing import Any


class NotFoundReason(enum.Enum):
    ABSENT = "absent"
    ACCESS_DENIED = "access_denied"


class ServiceError(Exception):
    error_type = "error"
    status = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_document(self) -> dict[str, Any]:
        return {
            "@type": "error",
            "error_type": self.error_type,
            "error_message": self.message,
        }


class NotFound(ServiceError):
    error_type = "not_found"
    status = 404

    def __init__(self, resource_type: str, reason: NotFoundReason = NotFoundReason.ACCESS_DENIED) -> None:
        self.resource_type = resource_type
        self.reason = reason
        super().__init__(f"{resource_type} not found (or insufficient access)")

    def to_document(self) -> dict[str, Any]:
        document = super().to_document()
        document["resource_type"] = self.resource_type
        return document


class EntityMissing(NotFound):
    """The object does not exist at all."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(resource_type, NotFoundReason.ABSENT)


class LoginRequired(ServiceError):
    error_type = "login_required"
    status = 401
    default_message = "login required"


class WrongParams(ServiceError):
    error_type = "wrong_params"
    status = 400
    default_message = "wrong parameters"


class NotImplementedOperation(ServiceError):
    error_type = "not_implemented"
    status = 501
    default_message = "request not (yet) implemented"
