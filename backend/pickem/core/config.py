from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- DB ---
    DATABASE_URL: str = "sqlite:///./pickem.sqlite"

    # --- JWT ---
    JWT_SECRET: str = "change-me-pickem-dev-secret"
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_MIN: int = 10080  # 7 days

    # --- Schedule provider (balldontlie) ---
    EXTERNAL_API_BASE_URL: str = ""
    EXTERNAL_API_KEY: str = ""

    # --- Odds provider (the-odds-api) ---
    ODDS_API_BASE_URL: str = "https://api.the-odds-api.com/v4"
    ODDS_API_KEY: str = ""
    ODDS_DEFAULT_BOOKMAKER: str = "draftkings"

    HTTP_TIMEOUT_S: float = 10.0

    # --- Logging ---
    LOG_LEVEL: str = "info"
    LOG_FORMAT: str = "text"  # "text" | "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global instance, imported across the project
settings = Settings()
