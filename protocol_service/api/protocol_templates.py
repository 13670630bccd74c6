"""
Protocol template API endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.requests import Request

from protocol_service.db import schemas
from protocol_service.db.repositories import protocol_templates as repo_templates
from protocol_service.api.deps import get_db

router = APIRouter(prefix="/api/protocol-template", tags=["protocol-templates"])


@router.get("/", response_model=List[schemas.ProtocolTemplate])
def list_protocol_templates_endpoint(db: Session = Depends(get_db)):
    return repo_templates.list_protocol_templates(db)


@router.get("/{template_id}", response_model=schemas.ProtocolTemplate)
def get_protocol_template_endpoint(template_id: int, db: Session = Depends(get_db)):
    return repo_templates.get_protocol_template(db, template_id)


@router.post("/", response_model=schemas.ProtocolTemplate, status_code=status.HTTP_201_CREATED)
def create_protocol_template_endpoint(
    template: schemas.ProtocolTemplateCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    created = repo_templates.create_protocol_template(db, template)
    response.headers["Location"] = str(request.url_for("get_protocol_template_endpoint", template_id=created.id))
    return created


@router.put("/{template_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_protocol_template_endpoint(
    template_id: int,
    template: schemas.ProtocolTemplateUpdate,
    db: Session = Depends(get_db),
):
    repo_templates.update_protocol_template(db, template_id, template)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_protocol_template_endpoint(template_id: int, db: Session = Depends(get_db)):
    repo_templates.delete_protocol_template(db, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
