"""
Typed outcomes raised by the repository layer.

Each error names the entity kind and id it concerns so the HTTP adapter can
choose a status code without querying again.
"""
from __future__ import annotations

from typing import Any, Optional


class RepositoryError(Exception):
    """Base class for repository failures."""

    def __init__(self, message: str, *, entity: Optional[str] = None, entity_id: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        return {"detail": self.message, "entity": self.entity, "id": self.entity_id}


class NotFound(RepositoryError):
    """No row with the requested id exists."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, entity_id=entity_id)


class ValidationError(RepositoryError):
    """A required field is missing or malformed."""

    def __init__(self, message: str, *, entity: Optional[str] = None, entity_id: Any = None, field: Optional[str] = None):
        super().__init__(message, entity=entity, entity_id=entity_id)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class ForeignKeyViolation(ValidationError):
    """A referenced parent row does not exist."""

    def __init__(self, entity: str, field: str, parent: str, parent_id: Any):
        super().__init__(
            f"{entity}.{field} references missing {parent} {parent_id}",
            entity=parent,
            entity_id=parent_id,
            field=field,
        )
        self.parent = parent


class ConcurrencyConflict(RepositoryError):
    """The row changed between read and write; re-fetch and retry."""

    def __init__(self, entity: str, entity_id: Any, expected_version: Optional[int] = None):
        super().__init__(
            f"{entity} {entity_id} was modified by another writer",
            entity=entity,
            entity_id=entity_id,
        )
        self.expected_version = expected_version


class BadRequest(RepositoryError):
    """The id in the path and the id in the record disagree."""

    def __init__(self, entity: str, entity_id: Any, record_id: Any):
        super().__init__(
            f"{entity} id mismatch: path {entity_id} != record {record_id}",
            entity=entity,
            entity_id=entity_id,
        )
        self.record_id = record_id
