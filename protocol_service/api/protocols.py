"""
Protocol API endpoints.

CRUD for protocols and management of the additional users participating in
a protocol.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.requests import Request

from protocol_service.db import schemas
from protocol_service.db.repositories import protocols as repo_protocols
from protocol_service.api.deps import get_db

router = APIRouter(prefix="/api/protocol", tags=["protocols"])


@router.get("/", response_model=List[schemas.Protocol])
def list_protocols_endpoint(db: Session = Depends(get_db)):
    return repo_protocols.list_protocols(db)


@router.get("/{protocol_id}", response_model=schemas.Protocol)
def get_protocol_endpoint(protocol_id: int, db: Session = Depends(get_db)):
    return repo_protocols.get_protocol(db, protocol_id)


@router.post("/", response_model=schemas.Protocol, status_code=status.HTTP_201_CREATED)
def create_protocol_endpoint(
    protocol: schemas.ProtocolCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    created = repo_protocols.create_protocol(db, protocol)
    response.headers["Location"] = str(request.url_for("get_protocol_endpoint", protocol_id=created.id))
    return created


@router.put("/{protocol_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_protocol_endpoint(protocol_id: int, protocol: schemas.ProtocolUpdate, db: Session = Depends(get_db)):
    repo_protocols.update_protocol(db, protocol_id, protocol)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{protocol_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_protocol_endpoint(protocol_id: int, db: Session = Depends(get_db)):
    repo_protocols.delete_protocol(db, protocol_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Additional users
@router.get("/{protocol_id}/additional-users", response_model=List[schemas.User])
def list_additional_users_endpoint(protocol_id: int, db: Session = Depends(get_db)):
    return repo_protocols.list_additional_users(db, protocol_id)


@router.put("/{protocol_id}/additional-users/{user_id}", response_model=schemas.AdditionalUser)
def add_additional_user_endpoint(protocol_id: int, user_id: int, db: Session = Depends(get_db)):
    return repo_protocols.add_additional_user(db, protocol_id, user_id)


@router.delete(
    "/{protocol_id}/additional-users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_additional_user_endpoint(protocol_id: int, user_id: int, db: Session = Depends(get_db)):
    repo_protocols.remove_additional_user(db, protocol_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
