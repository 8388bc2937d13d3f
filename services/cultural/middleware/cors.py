"""
CORS middleware configuration.
Origins come from settings.cors_origins. No wildcards.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.cultural.config import settings


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        max_age=600,
    )
