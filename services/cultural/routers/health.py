"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    settings = request.app.state.settings
    return {
        "success": True,
        "data": {
            "status": "healthy",
            "version": settings.app_version,
            "tasteGraphKeyConfigured": bool(settings.qloo_api_key),
        },
        "requestId": request.state.request_id,
    }
