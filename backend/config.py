from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"  # development | test | staging | production
    APP_NAME: str = "Goal Dashboard"
    LOG_LEVEL: str = "INFO"
    SECRET_KEY: str = "change-me-in-production"
    DATABASE_URL: str = "sqlite:///data/goals.db"
    DB_CONNECT_RETRIES: int = 1
    DATA_DIR: Path = Path("data")
    UPLOAD_DIR: Path = Path("data/uploads")
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 72
    AUTH_COOKIE_NAME: str = "goals_session"
    AUTH_COOKIE_SECURE: bool = False
    AUTH_COOKIE_HTTPONLY: bool = True
    AUTH_COOKIE_SAMESITE: str = "lax"  # strict | lax | none
    AUTH_COOKIE_DOMAIN: str | None = None
    AUTH_COOKIE_PATH: str = "/"
    SECURITY_HEADERS_ENABLED: bool = True
    SECURITY_CSP: str = (
        "default-src 'self'; "
        "img-src 'self' data: blob:; "
        "media-src 'self' blob:; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        "connect-src 'self' https:; "
        "frame-ancestors 'none'; "
        "base-uri 'self';"
    )
    AI_PROVIDER: str = "openai"  # openai | anthropic | google
    AI_API_KEY: str = ""
    AI_MODEL: str | None = None
    AI_TIMEOUT_SECONDS: int = 60
    TRANSCRIPTION_API_URL: str = "https://api.openai.com/v1/audio/transcriptions"
    TRANSCRIPTION_API_KEY: str = ""
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TRANSCRIPTION_TIMEOUT_SECONDS: int = 60
    POMODORO_DEFAULT_SECONDS: int = 1500

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_production_like(self) -> bool:
        return (self.ENVIRONMENT or "").strip().lower() in {"production", "prod", "staging"}

    def validate_security_configuration(self) -> None:
        if not self.is_production_like:
            return

        errors: list[str] = []
        if self.SECRET_KEY == "change-me-in-production":
            errors.append("SECRET_KEY must be changed from the default value")
        if not self.AUTH_COOKIE_SECURE:
            errors.append("AUTH_COOKIE_SECURE must be true in production-like environments")
        if (self.AUTH_COOKIE_SAMESITE or "").strip().lower() == "none" and not self.AUTH_COOKIE_SECURE:
            errors.append("AUTH_COOKIE_SAMESITE=none requires AUTH_COOKIE_SECURE=true")
        if errors:
            joined = "; ".join(errors)
            raise RuntimeError(f"Insecure production configuration: {joined}")


settings = Settings()
settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
