"""
Shared FastAPI dependencies.
"""
from typing import Iterator

from sqlalchemy.orm import Session
from starlette.requests import Request


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session from the database the app was assembled with."""
    yield from request.app.state.database.get_db()
