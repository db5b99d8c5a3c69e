"""Application configuration management using Pydantic's BaseSettings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Defines all configuration settings for the gateway, loaded from .env file."""

    # Identity service (GoTrue auth + PostgREST tables)
    identity_url: str = "http://localhost:54321"
    identity_api_key: str = ""
    settings_table: str = "site_settings"

    # App settings
    debug: bool = True
    log_level: str = "INFO"

    # Where an authenticated caller is sent
    landing_path: str = "/"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Login surfaces
    session_cookie_name: str = "login_gateway_session_id"
    surface_idle_timeout_minutes: int = 15
    surface_max_age_minutes: int = 30

    class Config:
        """Pydantic model configuration."""

        env_file = ".env"


settings = Settings()
