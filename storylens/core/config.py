"""
Configuration settings for the application.
"""
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ALLOW_ORIGINS: str = "*"  # Comma-separated list of allowed origins

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # Options: "text", "json"
    LOG_INCLUDE_REQUEST_ID: bool = True  # Include X-Request-ID in logs

    # HTTP Client Configuration
    HTTP_CLIENT_TIMEOUT: float = 120.0  # Default timeout for HTTP clients (seconds)
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 10
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_RETRY_ATTEMPTS: int = 2  # Total attempts for transient upstream errors
    HTTP_RETRY_BACKOFF_SECONDS: float = 2.0  # Base backoff for retries
    HTTP_RETRY_STATUSES: tuple[int, ...] = (429, 500, 502, 503, 504)

    # Performance Monitoring
    RESPONSE_TIME_WARNING_THRESHOLD_MS: int = 60000  # Generation is slow; warn past 60s

    # Story Generation
    # Options: "gemini" (direct Google Gemini call), "backend" (forward to BACKEND_API)
    GENERATION_PROVIDER: str = "gemini"
    GENERATION_TIMEOUT: float = 180.0

    # Google Gemini Configuration
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_TOP_K: int = 40
    GEMINI_TOP_P: float = 0.95
    GEMINI_MAX_OUTPUT_TOKENS: int = 12000

    # Backend relay (multimodal AI gateway)
    BACKEND_API: str = "http://localhost:3000"
    BACKEND_MAX_TOKENS: int = 5000
    BACKEND_TEMPERATURE: float = 0.8

    # Review content
    BUSINESS_NAME: str = "노보텔 사이공센터"
    REQUIRED_IMAGE_COUNT: int = 14

    # Input Guardrails
    MAX_IMAGE_MB: int = 10  # Per image (decoded)
    MAX_UPLOAD_MB: int = 50  # All images together (decoded)

    # Similarity checking (external service is optional)
    SIMILARITY_API_URL: Optional[str] = None
    SIMILARITY_API_KEY: Optional[str] = None
    SIMILARITY_CHECK_TIMEOUT: float = 10.0
    SIMILARITY_MAX_CONCURRENCY: int = 5

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into list."""
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(',') if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
