from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5000
    debug: bool = False
    cors_origins: list[str] = []
    frontend_url: str  # URL of the frontend application, used to build reset links
    # Session cookie, fixed 24h window from issuance
    session_cookie_name: str = "sid"
    session_cookie_secure: bool = False  # Set to True in production with HTTPS
    session_max_age: int = 24 * 60 * 60
    session_sweep_interval: int = 24 * 60 * 60  # seconds between expired-session sweeps
    reset_token_ttl: int = 60 * 60
    # Outbound email (password reset, welcome); sending is skipped when smtp_host is unset
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = False
    mail_from: str = "noreply@pkcm-learning.com"
    # Bootstrap admin account, created on startup when both are set
    admin_email: str | None = None
    admin_password: str | None = None

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MINISTRY_",
        "extra": "ignore",
    }
