# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Application exceptions for team and participant management.

Every exception carries an ``error_type`` identifier and an HTTP-style
``status_code`` so the calling boundary can render it without inspecting
the message.
"""

from typing import Any, Dict, Optional

from .models.enums import EntityKind, ErrorKind


class CustomException(Exception):
    """Base class for custom application exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for logs and error responses."""
        return {
            "type": self.error_type,
            "status": self.status_code,
            "detail": self.message
        }


class EntityException(CustomException):
    """Exception tied to a specific entity."""

    def __init__(self, message: str, status_code: int, error_type: str,
                 entity: Optional[EntityKind] = None, entity_id: Optional[int] = None):
        super().__init__(message, status_code, error_type)
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.entity is not None:
            data["entity"] = self.entity.value
        if self.entity_id is not None:
            data["entity_id"] = self.entity_id
        return data


class NotFoundError(EntityException):
    """Referenced entity does not exist."""

    def __init__(self, message: str, entity: Optional[EntityKind] = None, entity_id: Optional[int] = None):
        super().__init__(message, 404, "resource-not-found", entity, entity_id)


class NotAuthorizedError(CustomException):
    """Caller is not a recognized delegation head or has no country."""

    def __init__(self, message: str, username: Optional[str] = None):
        super().__init__(message, 401, "authentication-required")
        self.username = username


class ForbiddenError(EntityException):
    """Caller's country does not match the entity's country."""

    def __init__(self, message: str, entity: Optional[EntityKind] = None, entity_id: Optional[int] = None):
        super().__init__(message, 403, "insufficient-permissions", entity, entity_id)


class InvalidReferenceError(EntityException):
    """A supplied foreign id does not resolve."""

    def __init__(self, message: str, entity: Optional[EntityKind] = None, entity_id: Optional[int] = None):
        super().__init__(message, 422, "invalid-reference", entity, entity_id)


class ConflictError(EntityException):
    """Entity clashes with an existing one, e.g. a duplicate team name in a country."""

    def __init__(self, message: str, entity: Optional[EntityKind] = None, entity_id: Optional[int] = None):
        super().__init__(message, 409, "resource-conflict", entity, entity_id)


class QuotaExceededError(CustomException):
    """Per-country category cap reached."""

    def __init__(self, message: str, rule: Optional[str] = None, limit: Optional[int] = None):
        super().__init__(message, 409, "quota-exceeded")
        self.rule = rule
        self.limit = limit

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["rule"] = self.rule
        data["limit"] = self.limit
        return data


EXCEPTION_BY_KIND = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.NOT_AUTHORIZED: NotAuthorizedError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.INVALID_REFERENCE: InvalidReferenceError,
    ErrorKind.QUOTA_EXCEEDED: QuotaExceededError,
}
