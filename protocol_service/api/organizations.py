"""
Organization API endpoints.

CRUD for organizations plus the users and protocol templates that belong to
one. Repository errors propagate to the handlers registered in `main`.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.requests import Request

from protocol_service.db import schemas
from protocol_service.db.repositories import organizations as repo_orgs
from protocol_service.db.repositories import protocol_templates as repo_templates
from protocol_service.db.repositories import users as repo_users
from protocol_service.api.deps import get_db

router = APIRouter(prefix="/api/organization", tags=["organizations"])


@router.get("/", response_model=List[schemas.Organization])
def list_organizations_endpoint(db: Session = Depends(get_db)):
    return repo_orgs.list_organizations(db)


@router.get("/{organization_id}", response_model=schemas.Organization)
def get_organization_endpoint(organization_id: int, db: Session = Depends(get_db)):
    return repo_orgs.get_organization(db, organization_id)


@router.post("/", response_model=schemas.Organization, status_code=status.HTTP_201_CREATED)
def create_organization_endpoint(
    organization: schemas.OrganizationCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    created = repo_orgs.create_organization(db, organization)
    response.headers["Location"] = str(request.url_for("get_organization_endpoint", organization_id=created.id))
    return created


@router.put("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_organization_endpoint(
    organization_id: int,
    organization: schemas.OrganizationUpdate,
    db: Session = Depends(get_db),
):
    repo_orgs.update_organization(db, organization_id, organization)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_organization_endpoint(organization_id: int, db: Session = Depends(get_db)):
    repo_orgs.delete_organization(db, organization_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{organization_id}/users", response_model=List[schemas.User])
def list_organization_users_endpoint(organization_id: int, db: Session = Depends(get_db)):
    return repo_users.list_users_for_organization(db, organization_id)


@router.get("/{organization_id}/protocol-templates", response_model=List[schemas.ProtocolTemplate])
def list_organization_templates_endpoint(organization_id: int, db: Session = Depends(get_db)):
    return repo_templates.list_protocol_templates_for_organization(db, organization_id)
