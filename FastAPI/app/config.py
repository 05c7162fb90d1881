from pydantic_settings import BaseSettings

PLACEHOLDER_SECRET_KEY = "replace-with-a-long-random-secret-key"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./jobconnect.db"
    secret_key: str = PLACEHOLDER_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    app_env: str = "development"  # development, staging, production

    api_prefix: str = "/api"

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Any recruiter may edit or delete any user record while this is on.
    # Turn off to restrict user writes to the account owner.
    recruiters_manage_users: bool = True

    default_page_size: int = 10
    max_page_size: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
