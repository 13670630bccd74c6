import pytest
from sqlalchemy.orm import Session

from protocol_service.config import Settings
from protocol_service.db import models
from protocol_service.db.database import Database


@pytest.fixture
def settings(tmp_path) -> Settings:
    # File-backed SQLite so separate sessions use separate connections
    return Settings(database_url=f"sqlite:///{tmp_path / 'protocols.db'}", log_level="DEBUG")


@pytest.fixture
def database(settings):
    db = Database(settings)
    db.create_all()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def db_session(database):
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def other_session(database):
    """A second, independent session standing in for a concurrent caller."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def organization_factory(db_session: Session):
    def _create(name: str = "Acme", organization_type: str = "clinic", **extra):
        org = models.Organization(name=name, organization_type=organization_type, **extra)
        db_session.add(org)
        db_session.commit()
        db_session.refresh(org)
        return org
    return _create


@pytest.fixture
def user_factory(db_session: Session):
    def _create(organization, username: str = "jdoe", email: str | None = None, password: str = "x"):
        user = models.User(
            username=username,
            email=email or f"{username}@acme.test",
            password=password,
            organization_id=organization.id,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def protocol_factory(db_session: Session):
    def _create(user, is_draft: bool = True):
        protocol = models.Protocol(user_id=user.id, is_draft=is_draft)
        db_session.add(protocol)
        db_session.commit()
        db_session.refresh(protocol)
        return protocol
    return _create
