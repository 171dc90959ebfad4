from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/fatfit"
    default_tz: str = "UTC"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    cors_origins: list[str] = ["http://localhost:5173"]
    host: str = "127.0.0.1"
    port: int = 8000

    # JWT verification. Unset secret disables auth (local development).
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # FatSecret platform (client-credentials OAuth2)
    fatsecret_client_id: str | None = None
    fatsecret_client_secret: str | None = None
    fatsecret_scope: str | None = None
    fatsecret_token_url: str = "https://oauth.fatsecret.com/connect/token"
    fatsecret_api_url: str = "https://platform.fatsecret.com/rest/server.api"
    fatsecret_recipes_url: str = "https://platform.fatsecret.com/rest/recipes/search/v3"
    token_expiry_margin_s: int = 60  # subtracted from provider expires_in

    # Fitness Tribe AI plan generation
    fitness_api_base_url: str = "https://fitness-tribe-ai.onrender.com"
    fitness_api_key: str | None = None
    plan_duration_weeks: int = 4

    # Outbound HTTP timeout (seconds) for every upstream provider
    http_timeout: float = 30.0

    # Daily totals reset, wall clock in default_tz
    daily_reset_hour: int = 0
    daily_reset_minute: int = 1

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
