"""
Protocol repository functions.

Implements list/get/create/update/delete for protocols, the lookup of
protocols owned by a user, and the additional-user participation rows, which
are only reachable through a protocol.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from protocol_service.db import models, schemas
from protocol_service.db.errors import BadRequest, ForeignKeyViolation, NotFound
from protocol_service.db.repo_utils import (
    ParentRef,
    check_version,
    coerce_record,
    commit_insert,
    commit_versioned,
    delete_by_id,
    integrity_failure,
    load_for_update,
    require_parents,
    row_exists,
)

logger = logging.getLogger(__name__)

ENTITY = "Protocol"


def _parents(user_id: int) -> List[ParentRef]:
    return [ParentRef("user_id", "User", models.User, user_id)]


def list_protocols(db: Session) -> List[models.Protocol]:
    return db.query(models.Protocol).order_by(models.Protocol.id).all()


def get_protocol(db: Session, protocol_id: int) -> models.Protocol:
    db_protocol = db.get(models.Protocol, protocol_id)
    if db_protocol is None:
        raise NotFound(ENTITY, protocol_id)
    return db_protocol


def protocol_exists(db: Session, protocol_id: int) -> bool:
    return row_exists(db, models.Protocol, protocol_id)


def list_protocols_for_user(db: Session, user_id: int) -> List[models.Protocol]:
    """Protocols owned by ``user_id``."""
    if not row_exists(db, models.User, user_id):
        raise NotFound("User", user_id)
    return (
        db.query(models.Protocol)
        .filter(models.Protocol.user_id == user_id)
        .order_by(models.Protocol.id)
        .all()
    )


def create_protocol(db: Session, protocol: Union[schemas.ProtocolCreate, Mapping[str, Any]]) -> models.Protocol:
    protocol = coerce_record(schemas.ProtocolCreate, protocol, ENTITY)
    parents = _parents(protocol.user_id)
    require_parents(db, ENTITY, parents)

    db_protocol = models.Protocol(**protocol.model_dump(), created_or_edited=models.now_utc())
    commit_insert(db, db_protocol, ENTITY, parents)
    logger.info("protocol_created: id=%s user_id=%s", db_protocol.id, db_protocol.user_id)
    return db_protocol


def update_protocol(db: Session, protocol_id: int, protocol: Union[schemas.ProtocolUpdate, Mapping[str, Any]]) -> None:
    protocol = coerce_record(schemas.ProtocolUpdate, protocol, ENTITY)
    if protocol.id != protocol_id:
        raise BadRequest(ENTITY, protocol_id, protocol.id)

    db_protocol = load_for_update(db, models.Protocol, ENTITY, protocol_id)
    check_version(db, db_protocol, protocol.version, ENTITY, protocol_id)
    parents = _parents(protocol.user_id)
    require_parents(db, ENTITY, parents)
    for key, value in protocol.model_dump(exclude={"id", "version"}).items():
        setattr(db_protocol, key, value)
    db_protocol.created_or_edited = models.now_utc()
    commit_versioned(db, models.Protocol, ENTITY, protocol_id, parents)
    logger.info("protocol_updated: id=%s", protocol_id)


def delete_protocol(db: Session, protocol_id: int) -> None:
    delete_by_id(db, models.Protocol, ENTITY, protocol_id)
    logger.info("protocol_deleted: id=%s", protocol_id)


# Additional users
def list_additional_users(db: Session, protocol_id: int) -> List[models.User]:
    """Users granted participation on ``protocol_id``, in the order they were added."""
    if not row_exists(db, models.Protocol, protocol_id):
        raise NotFound(ENTITY, protocol_id)
    return (
        db.query(models.User)
        .join(models.AdditionalUser, models.AdditionalUser.user_id == models.User.id)
        .filter(models.AdditionalUser.protocol_id == protocol_id)
        .order_by(models.User.id)
        .all()
    )


def list_participating_protocols(db: Session, user_id: int) -> List[models.Protocol]:
    """Protocols on which ``user_id`` is an additional user."""
    if not row_exists(db, models.User, user_id):
        raise NotFound("User", user_id)
    return (
        db.query(models.Protocol)
        .join(models.AdditionalUser, models.AdditionalUser.protocol_id == models.Protocol.id)
        .filter(models.AdditionalUser.user_id == user_id)
        .order_by(models.Protocol.id)
        .all()
    )


def _find_additional_user(db: Session, protocol_id: int, user_id: int):
    return (
        db.query(models.AdditionalUser)
        .filter(
            models.AdditionalUser.protocol_id == protocol_id,
            models.AdditionalUser.user_id == user_id,
        )
        .first()
    )


def add_additional_user(db: Session, protocol_id: int, user_id: int) -> models.AdditionalUser:
    """Grant ``user_id`` participation on ``protocol_id``; an existing grant is returned as is."""
    if not row_exists(db, models.Protocol, protocol_id):
        raise NotFound(ENTITY, protocol_id)
    if not row_exists(db, models.User, user_id):
        raise ForeignKeyViolation("AdditionalUser", "user_id", "User", user_id)

    existing = _find_additional_user(db, protocol_id, user_id)
    if existing is not None:
        return existing
    parents = [
        ParentRef("user_id", "User", models.User, user_id),
        ParentRef("protocol_id", ENTITY, models.Protocol, protocol_id),
    ]
    db_member = models.AdditionalUser(user_id=user_id, protocol_id=protocol_id)
    db.add(db_member)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # A concurrent grant of the same pair committed first
        existing = _find_additional_user(db, protocol_id, user_id)
        if existing is not None:
            logger.info("additional_user_exists: protocol_id=%s user_id=%s", protocol_id, user_id)
            return existing
        raise integrity_failure(db, "AdditionalUser", parents, e) from e
    db.refresh(db_member)
    logger.info("additional_user_added: protocol_id=%s user_id=%s", protocol_id, user_id)
    return db_member


def remove_additional_user(db: Session, protocol_id: int, user_id: int) -> None:
    deleted = (
        db.query(models.AdditionalUser)
        .filter(
            models.AdditionalUser.protocol_id == protocol_id,
            models.AdditionalUser.user_id == user_id,
        )
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFound("AdditionalUser", {"protocol_id": protocol_id, "user_id": user_id})
    db.commit()
    logger.info("additional_user_removed: protocol_id=%s user_id=%s", protocol_id, user_id)
