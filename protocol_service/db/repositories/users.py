"""
User repository functions.

Implements list/get/create/update/delete for users plus the lookup of users
belonging to an organization. Every write checks that ``organization_id``
points at an existing organization.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from sqlalchemy.orm import Session

from protocol_service.db import models, schemas
from protocol_service.db.errors import BadRequest, NotFound
from protocol_service.db.repo_utils import (
    ParentRef,
    check_version,
    coerce_record,
    commit_insert,
    commit_versioned,
    delete_by_id,
    load_for_update,
    require_parents,
    require_text,
    row_exists,
)

logger = logging.getLogger(__name__)

ENTITY = "User"
REQUIRED_FIELDS = ("username", "email", "password")


def _parents(organization_id: int) -> List[ParentRef]:
    return [ParentRef("organization_id", "Organization", models.Organization, organization_id)]


def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id).all()


def get_user(db: Session, user_id: int) -> models.User:
    db_user = db.get(models.User, user_id)
    if db_user is None:
        raise NotFound(ENTITY, user_id)
    return db_user


def user_exists(db: Session, user_id: int) -> bool:
    return row_exists(db, models.User, user_id)


def list_users_for_organization(db: Session, organization_id: int) -> List[models.User]:
    if not row_exists(db, models.Organization, organization_id):
        raise NotFound("Organization", organization_id)
    return (
        db.query(models.User)
        .filter(models.User.organization_id == organization_id)
        .order_by(models.User.id)
        .all()
    )


def create_user(db: Session, user: Union[schemas.UserCreate, Mapping[str, Any]]) -> models.User:
    user = coerce_record(schemas.UserCreate, user, ENTITY)
    require_text(user, ENTITY, REQUIRED_FIELDS)
    parents = _parents(user.organization_id)
    require_parents(db, ENTITY, parents)

    db_user = models.User(**user.model_dump(), created_or_edited=models.now_utc())
    commit_insert(db, db_user, ENTITY, parents)
    logger.info("user_created: id=%s organization_id=%s", db_user.id, db_user.organization_id)
    return db_user


def update_user(db: Session, user_id: int, user: Union[schemas.UserUpdate, Mapping[str, Any]]) -> None:
    user = coerce_record(schemas.UserUpdate, user, ENTITY)
    if user.id != user_id:
        raise BadRequest(ENTITY, user_id, user.id)
    require_text(user, ENTITY, REQUIRED_FIELDS)

    db_user = load_for_update(db, models.User, ENTITY, user_id)
    check_version(db, db_user, user.version, ENTITY, user_id)
    parents = _parents(user.organization_id)
    require_parents(db, ENTITY, parents)
    for key, value in user.model_dump(exclude={"id", "version"}).items():
        setattr(db_user, key, value)
    db_user.created_or_edited = models.now_utc()
    commit_versioned(db, models.User, ENTITY, user_id, parents)
    logger.info("user_updated: id=%s", user_id)


def delete_user(db: Session, user_id: int) -> None:
    delete_by_id(db, models.User, ENTITY, user_id)
    logger.info("user_deleted: id=%s", user_id)
