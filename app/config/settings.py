from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from app.core.errors import ConfigError


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_service_key: str = ""  # service role key; the API does its own auth
    store_backend: str = "supabase"  # supabase | memory
    store_timeout_seconds: int = 10

    # Tokens
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    # Passwords
    bcrypt_rounds: int = 10

    # App
    app_name: str = "supabase-auth-api"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: str = "*"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def validate_runtime(self) -> None:
        """Refuse to run without a signing secret or store credentials."""
        missing = []
        if not self.jwt_secret:
            missing.append("JWT_SECRET")
        if self.store_backend == "supabase":
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_service_key:
                missing.append("SUPABASE_SERVICE_KEY")
        elif self.store_backend != "memory":
            raise ConfigError(f"Unknown STORE_BACKEND: {self.store_backend}")
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
