"""
FastAPI application for generating photo-based hotel reviews with a
multimodal model and validating the generated text.
"""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from storylens.api.routes import analysis, health, story
from storylens.core.config import settings
from storylens.core.logging import setup_logging
from storylens.core.error_handling import http_exception_handler, validation_exception_handler
from storylens.core.middleware import RequestIDMiddleware

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="StoryLens",
    description="Generate reviews from photographs and validate paragraph, length and keyword rules",
    version="1.0.0"
)

# Middleware
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time-Ms", "Content-Disposition"],
)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(health.router)
app.include_router(story.router)
app.include_router(analysis.router)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting server on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, workers=1)
