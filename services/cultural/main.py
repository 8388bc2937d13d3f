"""
Cultural recommendation FastAPI service.

Entrypoint: uvicorn services.cultural.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from starlette.responses import JSONResponse

from services.cultural.config import settings
from services.cultural.gateway import HttpError, NetworkError, TasteGraphGateway
from services.cultural.middleware.cors import setup_cors
from services.cultural.middleware.sentry import setup_sentry
from services.cultural.recommendation import ComponentGenerator, CrossDomainConnector, GoalEnhancer
from services.cultural.routers import cultural, health

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, gateway: TasteGraphGateway) -> None:
    """Attach one gateway and the orchestrators sharing it to app.state."""
    app.state.gateway = gateway
    app.state.goal_enhancer = GoalEnhancer(gateway)
    app.state.component_generator = ComponentGenerator(gateway)
    app.state.connector = CrossDomainConnector(
        gateway,
        fallback_location=settings.default_fallback_location,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_sentry()

    app.state.settings = settings
    build_services(
        app,
        TasteGraphGateway(api_key=settings.qloo_api_key, base_url=settings.qloo_base_url),
    )
    logger.info("Taste graph gateway ready at %s", settings.qloo_base_url)

    yield


app = FastAPI(
    title="Cultural Recommendation API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(cultural.router)

# CORS (needs to be outermost to handle preflight)
setup_cors(app)


# Request ID injection
@app.middleware("http")
async def request_envelope_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# -- Exception Handlers --

def _error(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message},
            "requestId": getattr(request.state, "request_id", str(uuid.uuid4())),
        },
    )


@app.exception_handler(HttpError)
async def upstream_http_error_handler(request: Request, exc: HttpError) -> JSONResponse:
    return _error(
        request, 502, "UPSTREAM_ERROR",
        f"Taste graph service returned {exc.status_code}.",
    )


@app.exception_handler(NetworkError)
async def upstream_network_error_handler(request: Request, exc: NetworkError) -> JSONResponse:
    return _error(request, 503, "UPSTREAM_UNAVAILABLE", "Taste graph service is unreachable.")


@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return _error(request, 404, "NOT_FOUND", "Resource not found.")


@app.exception_handler(422)
async def validation_error_handler(request: Request, exc) -> JSONResponse:
    return _error(
        request, 422, "VALIDATION_ERROR",
        str(exc.detail) if hasattr(exc, "detail") else "Validation error.",
    )


@app.exception_handler(504)
async def timeout_handler(request: Request, exc) -> JSONResponse:
    detail = getattr(exc, "detail", None)
    if isinstance(detail, dict):
        return _error(request, 504, detail.get("code", "UPSTREAM_TIMEOUT"), detail.get("message", ""))
    return _error(request, 504, "UPSTREAM_TIMEOUT", "The request timed out.")


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    return _error(request, 500, "INTERNAL_ERROR", "An unexpected error occurred.")
