from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./resumevault.db"

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    USER_TOKEN_EXPIRE_MINUTES: int = 60
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 120

    # Configured admin account (not stored in the users table)
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Password reset
    RESET_CODE_EXPIRE_SECONDS: int = 30
    RESET_REQUIRES_CODE: bool = False

    # GET /users/{id} is open to any signed-in user unless this is set
    ENFORCE_USER_OWNERSHIP: bool = False

    # Profile images
    PUBLIC_BASE_URL: str = "http://localhost:5000"
    DEFAULT_AVATAR_PATH: str = "/images/default-avatar.png"

    # Application
    APP_NAME: str = "ResumeVault"
    API_PREFIX: str = "/api"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:5173,"
        "http://localhost:3000,"
        "http://127.0.0.1:5173,"
        "http://127.0.0.1:3000"
    )


settings = Settings()
