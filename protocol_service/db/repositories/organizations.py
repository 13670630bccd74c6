"""
Organization repository functions.

Implements list/get/create/update/delete for organizations. Deleting an
organization cascades in the database to its users, their protocols, the
additional-user rows of both, and the organization's protocol templates.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from sqlalchemy.orm import Session

from protocol_service.db import models, schemas
from protocol_service.db.errors import BadRequest, NotFound
from protocol_service.db.repo_utils import (
    check_version,
    coerce_record,
    commit_insert,
    commit_versioned,
    delete_by_id,
    load_for_update,
    require_text,
    row_exists,
)

logger = logging.getLogger(__name__)

ENTITY = "Organization"
REQUIRED_FIELDS = ("name", "organization_type")

RecordIn = Union[schemas.OrganizationCreate, Mapping[str, Any]]


def list_organizations(db: Session) -> List[models.Organization]:
    return db.query(models.Organization).order_by(models.Organization.id).all()


def get_organization(db: Session, organization_id: int) -> models.Organization:
    db_organization = db.get(models.Organization, organization_id)
    if db_organization is None:
        raise NotFound(ENTITY, organization_id)
    return db_organization


def organization_exists(db: Session, organization_id: int) -> bool:
    return row_exists(db, models.Organization, organization_id)


def create_organization(db: Session, organization: RecordIn) -> models.Organization:
    organization = coerce_record(schemas.OrganizationCreate, organization, ENTITY)
    require_text(organization, ENTITY, REQUIRED_FIELDS)
    db_organization = models.Organization(**organization.model_dump(), created_or_edited=models.now_utc())
    commit_insert(db, db_organization, ENTITY)
    logger.info("organization_created: id=%s name=%s", db_organization.id, db_organization.name)
    return db_organization


def update_organization(db: Session, organization_id: int, organization: Union[schemas.OrganizationUpdate, Mapping[str, Any]]) -> None:
    organization = coerce_record(schemas.OrganizationUpdate, organization, ENTITY)
    if organization.id != organization_id:
        raise BadRequest(ENTITY, organization_id, organization.id)
    require_text(organization, ENTITY, REQUIRED_FIELDS)

    db_organization = load_for_update(db, models.Organization, ENTITY, organization_id)
    check_version(db, db_organization, organization.version, ENTITY, organization_id)
    for key, value in organization.model_dump(exclude={"id", "version"}).items():
        setattr(db_organization, key, value)
    db_organization.created_or_edited = models.now_utc()
    commit_versioned(db, models.Organization, ENTITY, organization_id)
    logger.info("organization_updated: id=%s version=%s", organization_id, db_organization.version)


def delete_organization(db: Session, organization_id: int) -> None:
    delete_by_id(db, models.Organization, ENTITY, organization_id)
    logger.info("organization_deleted: id=%s", organization_id)
