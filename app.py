"""
App assembly entry point.

Resolves settings from the environment once and builds the FastAPI `app`
(e.g. ``uvicorn app:app``).
"""

from protocol_service.api.main import create_app
from protocol_service.config import Settings

app = create_app(Settings.from_env())
