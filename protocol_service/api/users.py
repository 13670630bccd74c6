"""
User API endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.requests import Request

from protocol_service.db import schemas
from protocol_service.db.repositories import protocols as repo_protocols
from protocol_service.db.repositories import users as repo_users
from protocol_service.api.deps import get_db

router = APIRouter(prefix="/api/user", tags=["users"])


@router.get("/", response_model=List[schemas.User])
def list_users_endpoint(db: Session = Depends(get_db)):
    return repo_users.list_users(db)


@router.get("/{user_id}", response_model=schemas.User)
def get_user_endpoint(user_id: int, db: Session = Depends(get_db)):
    return repo_users.get_user(db, user_id)


@router.post("/", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user_endpoint(
    user: schemas.UserCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    created = repo_users.create_user(db, user)
    response.headers["Location"] = str(request.url_for("get_user_endpoint", user_id=created.id))
    return created


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_user_endpoint(user_id: int, user: schemas.UserUpdate, db: Session = Depends(get_db)):
    repo_users.update_user(db, user_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user_endpoint(user_id: int, db: Session = Depends(get_db)):
    repo_users.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/protocols", response_model=List[schemas.Protocol])
def list_user_protocols_endpoint(user_id: int, db: Session = Depends(get_db)):
    return repo_protocols.list_protocols_for_user(db, user_id)


@router.get("/{user_id}/participating-protocols", response_model=List[schemas.Protocol])
def list_user_participations_endpoint(user_id: int, db: Session = Depends(get_db)):
    return repo_protocols.list_participating_protocols(db, user_id)
