"""
Protocol template repository functions.
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

ENTITY = "ProtocolTemplate"
REQUIRED_FIELDS = ("name", "template")


def _parents(organization_id: int) -> List[ParentRef]:
    return [ParentRef("organization_id", "Organization", models.Organization, organization_id)]


def list_protocol_templates(db: Session) -> List[models.ProtocolTemplate]:
    return db.query(models.ProtocolTemplate).order_by(models.ProtocolTemplate.id).all()


def get_protocol_template(db: Session, template_id: int) -> models.ProtocolTemplate:
    db_template = db.get(models.ProtocolTemplate, template_id)
    if db_template is None:
        raise NotFound(ENTITY, template_id)
    return db_template


def protocol_template_exists(db: Session, template_id: int) -> bool:
    return row_exists(db, models.ProtocolTemplate, template_id)


def list_protocol_templates_for_organization(db: Session, organization_id: int) -> List[models.ProtocolTemplate]:
    if not row_exists(db, models.Organization, organization_id):
        raise NotFound("Organization", organization_id)
    return (
        db.query(models.ProtocolTemplate)
        .filter(models.ProtocolTemplate.organization_id == organization_id)
        .order_by(models.ProtocolTemplate.id)
        .all()
    )


def create_protocol_template(
    db: Session,
    template: Union[schemas.ProtocolTemplateCreate, Mapping[str, Any]],
) -> models.ProtocolTemplate:
    template = coerce_record(schemas.ProtocolTemplateCreate, template, ENTITY)
    require_text(template, ENTITY, REQUIRED_FIELDS)
    parents = _parents(template.organization_id)
    require_parents(db, ENTITY, parents)

    db_template = models.ProtocolTemplate(**template.model_dump(), created_or_edited=models.now_utc())
    commit_insert(db, db_template, ENTITY, parents)
    logger.info("protocol_template_created: id=%s organization_id=%s", db_template.id, db_template.organization_id)
    return db_template


def update_protocol_template(
    db: Session,
    template_id: int,
    template: Union[schemas.ProtocolTemplateUpdate, Mapping[str, Any]],
) -> None:
    template = coerce_record(schemas.ProtocolTemplateUpdate, template, ENTITY)
    if template.id != template_id:
        raise BadRequest(ENTITY, template_id, template.id)
    require_text(template, ENTITY, REQUIRED_FIELDS)

    db_template = load_for_update(db, models.ProtocolTemplate, ENTITY, template_id)
    check_version(db, db_template, template.version, ENTITY, template_id)
    parents = _parents(template.organization_id)
    require_parents(db, ENTITY, parents)
    for key, value in template.model_dump(exclude={"id", "version"}).items():
        setattr(db_template, key, value)
    db_template.created_or_edited = models.now_utc()
    commit_versioned(db, models.ProtocolTemplate, ENTITY, template_id, parents)
    logger.info("protocol_template_updated: id=%s", template_id)


def delete_protocol_template(db: Session, template_id: int) -> None:
    delete_by_id(db, models.ProtocolTemplate, ENTITY, template_id)
    logger.info("protocol_template_deleted: id=%s", template_id)
