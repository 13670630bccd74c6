"""
Shared helpers for the per-entity repositories.

Covers record coercion, required-field checks, parent existence probes and the
commit protocols for inserts and versioned updates. Every helper that fails
rolls the session back before raising so the caller's session stays usable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import ObjectDeletedError, StaleDataError

from .errors import ConcurrencyConflict, ForeignKeyViolation, NotFound, ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class ParentRef:
    """A foreign key on a record and the parent row it must point at."""

    field: str
    parent: str
    model: Any
    parent_id: Any


def coerce_record(
    schema_cls: Type[SchemaT],
    record: Union[BaseModel, Mapping[str, Any]],
    entity: str,
) -> SchemaT:
    """Return ``record`` as ``schema_cls`` or raise ValidationError."""
    if isinstance(record, schema_cls):
        return record
    if isinstance(record, BaseModel):
        data = record.model_dump()
    elif isinstance(record, Mapping):
        data = dict(record)
    else:
        raise ValidationError(f"{entity} record must be a mapping, got {type(record).__name__}", entity=entity)
    try:
        return schema_cls.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(f"{entity}.{field}: {first.get('msg')}", entity=entity, field=field) from e


def require_text(record: BaseModel, entity: str, fields: Iterable[str]) -> None:
    """Reject required text fields that are missing or blank."""
    for field in fields:
        value = getattr(record, field, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{entity}.{field} is required", entity=entity, field=field)


def row_exists(db: Session, model, row_id: Any) -> bool:
    return db.query(model.id).filter(model.id == row_id).first() is not None


def require_parents(db: Session, entity: str, parents: Sequence[ParentRef]) -> None:
    for ref in parents:
        if ref.parent_id is None or not row_exists(db, ref.model, ref.parent_id):
            raise ForeignKeyViolation(entity, ref.field, ref.parent, ref.parent_id)


def integrity_failure(db: Session, entity: str, parents: Sequence[ParentRef], error: IntegrityError) -> ValidationError:
    # A parent removed between the probe and the write surfaces as an
    # IntegrityError; probe again to name it.
    for ref in parents:
        if not row_exists(db, ref.model, ref.parent_id):
            return ForeignKeyViolation(entity, ref.field, ref.parent, ref.parent_id)
    return ValidationError(f"{entity} violates a database constraint: {error.orig}", entity=entity)


def commit_insert(db: Session, db_obj, entity: str, parents: Sequence[ParentRef] = ()):
    """Insert ``db_obj`` in a single transaction and return it refreshed."""
    db.add(db_obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise integrity_failure(db, entity, parents, e) from e
    db.refresh(db_obj)
    return db_obj


def load_for_update(db: Session, model, entity: str, row_id: Any):
    """Re-read the stored row so the version compared below is the committed one."""
    db_obj = db.get(model, row_id, populate_existing=True)
    if db_obj is None:
        raise NotFound(entity, row_id)
    return db_obj


def check_version(db: Session, db_obj, expected: int, entity: str, row_id: Any) -> None:
    """Raise ConcurrencyConflict when the caller's version token is out of date.

    A matching token leaves the loaded version equal to the token, so the flush
    issues its conditional UPDATE against what the caller read.
    """
    stored = db_obj.version
    if stored != expected:
        db.rollback()
        logger.warning(
            "concurrency_conflict: entity=%s id=%s expected_version=%s stored_version=%s",
            entity, row_id, expected, stored,
        )
        raise ConcurrencyConflict(entity, row_id, expected_version=expected)


def commit_versioned(db: Session, model, entity: str, row_id: Any, parents: Sequence[ParentRef] = ()) -> None:
    """Commit a versioned update; reclassify a failed version check.

    The flush issues ``UPDATE ... WHERE id = :id AND version = :read_version``.
    When no row matches, existence is probed again: a vanished row is reported
    as NotFound, a changed row as ConcurrencyConflict.
    """
    try:
        db.commit()
    except (StaleDataError, ObjectDeletedError) as e:
        db.rollback()
        if not row_exists(db, model, row_id):
            logger.info("update_target_deleted: entity=%s id=%s", entity, row_id)
            raise NotFound(entity, row_id) from e
        logger.warning("concurrency_conflict: entity=%s id=%s", entity, row_id)
        raise ConcurrencyConflict(entity, row_id) from e
    except IntegrityError as e:
        db.rollback()
        raise integrity_failure(db, entity, parents, e) from e


def delete_by_id(db: Session, model, entity: str, row_id: Any) -> None:
    """Delete one row by id in a single statement; dependents cascade in the database."""
    deleted = db.query(model).filter(model.id == row_id).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise NotFound(entity, row_id)
    db.commit()
