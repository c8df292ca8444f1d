# SPDX-License-Identifier: Apache-2.0

"""
Result types threaded through team and participant validation.

Domain functions never raise for business-rule failures. They return a
``DomainResult`` holding either a value or a tagged ``DomainError``; the
service layer turns a failure into an exception only at its boundary.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ..errors import CustomException, EXCEPTION_BY_KIND, NotAuthorizedError, QuotaExceededError
from ..models.enums import EntityKind, ErrorKind

T = TypeVar('T')
U = TypeVar('U')


@dataclass(frozen=True)
class DomainError:
    """Tagged business-rule failure."""
    kind: ErrorKind
    message: str
    entity: Optional[EntityKind] = None
    entity_id: Optional[int] = None
    rule: Optional[str] = None
    limit: Optional[int] = None
    username: Optional[str] = None

    def to_exception(self) -> CustomException:
        """Map the error onto the application exception hierarchy."""
        exc_class = EXCEPTION_BY_KIND[self.kind]
        if exc_class is NotAuthorizedError:
            return NotAuthorizedError(self.message, username=self.username)
        if exc_class is QuotaExceededError:
            return QuotaExceededError(self.message, rule=self.rule, limit=self.limit)
        return exc_class(self.message, entity=self.entity, entity_id=self.entity_id)


@dataclass(frozen=True)
class DomainResult(Generic[T]):
    """Either a successful value or a DomainError."""
    value: Optional[T] = None
    error: Optional[DomainError] = None

    @classmethod
    def success(cls, value: T) -> "DomainResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, **context) -> "DomainResult[T]":
        return cls(error=DomainError(kind=kind, message=message, **context))

    @property
    def ok(self) -> bool:
        return self.error is None

    def then(self, step: Callable[[T], "DomainResult[U]"]) -> "DomainResult[U]":
        """Run ``step`` on the value, short-circuiting on failure."""
        if self.error is not None:
            return DomainResult(error=self.error)
        return step(self.value)

    def unwrap(self) -> T:
        """Return the value or raise the mapped exception."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.value


def require(
    value: Optional[T],
    kind: ErrorKind,
    message: str,
    entity: Optional[EntityKind] = None,
    entity_id: Optional[int] = None
) -> DomainResult[T]:
    """Turn an optional lookup into a result, failing with ``kind`` when absent."""
    if value is None:
        return DomainResult.failure(kind, message, entity=entity, entity_id=entity_id)
    return DomainResult.success(value)
