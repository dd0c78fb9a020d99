from fastapi import APIRouter

from storylens.core.config import settings

router = APIRouter()


@router.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "StoryLens API", "status": "healthy"}


@router.get("/health")
async def health_check():
    """
    Comprehensive health check endpoint.

    Verifies configuration of the generation provider and the optional
    similarity service. Secrets are never echoed.
    """
    provider = settings.GENERATION_PROVIDER.lower()
    health_status = {
        "status": "healthy",
        "service": "StoryLens",
        "version": "1.0",
        "generation_provider": provider,
    }

    config_checks = {
        "gemini_configured": bool(settings.GEMINI_API_KEY),
        "backend_configured": bool(settings.BACKEND_API),
        "similarity_service_configured": bool(settings.SIMILARITY_API_URL),
        "required_image_count": settings.REQUIRED_IMAGE_COUNT,
    }
    health_status.update(config_checks)

    provider_ready = {
        "gemini": config_checks["gemini_configured"],
        "backend": config_checks["backend_configured"],
    }.get(provider, False)

    if not provider_ready:
        health_status["status"] = "degraded"
        health_status["warning"] = f"Generation provider '{provider}' not configured"

    return health_status
