"""
CORS configuration.

Browsers must be allowed to send the actor header and to read the request id
back, otherwise audited writes fail preflight.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.constants import ACTOR_HEADER
from shared.config.settings import settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER


def configure_cors(app: FastAPI) -> None:
    """Origins come from ALLOWED_ORIGINS (localhost defaults in development)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", REQUEST_ID_HEADER, ACTOR_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        # no preflight caching while developing
        max_age=0 if settings.environment == "development" else 600,
    )
