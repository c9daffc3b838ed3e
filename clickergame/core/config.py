from functools import lru_cache
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CORS = ["http://localhost:3000"]


def _parse_cors_origins(v: Any) -> List[str]:
    if v is None or v == "":
        return _DEFAULT_CORS.copy()
    if isinstance(v, list):
        return [x for x in v if isinstance(x, str) and x.strip()]
    s = str(v).strip()
    if s.startswith("["):
        import orjson
        try:
            out = orjson.loads(s)
        except orjson.JSONDecodeError:
            return _DEFAULT_CORS.copy()
        return [x for x in out if isinstance(x, str) and x.strip()] or _DEFAULT_CORS.copy()
    return [x.strip() for x in s.split(",") if x.strip()] or _DEFAULT_CORS.copy()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    env: str = Field(default="development", description="ENV")
    debug: bool = Field(default=False, description="DEBUG")
    secret_key: str = Field(default="change-me-in-production-min-32-chars")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Document store
    storage_backend: str = Field(default="local", alias="STORAGE_BACKEND")  # "local" | "memory"
    data_file: str = Field(default="./db.json", alias="DATA_FILE")

    # Sessions / passwords
    session_max_age_seconds: int = Field(default=24 * 3600, alias="SESSION_MAX_AGE_SECONDS")
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS")

    # Optional demo account created at startup
    demo_username: str = Field(default="", alias="DEMO_USERNAME")
    demo_password: str = Field(default="", alias="DEMO_PASSWORD")

    # CORS: env as string, exposed as list
    cors_origins_raw: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
        description="Comma-separated or JSON list",
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors_origins(getattr(self, "cors_origins_raw", None))

    # Economy
    starting_balance: float = 100.0
    starting_income_per_click: float = 1.0
    starting_auto_income_per_second: float = 0.0
    trust_client_stock_price: bool = Field(default=True, alias="TRUST_CLIENT_STOCK_PRICE")

    # Price simulation
    price_tick_seconds: float = Field(default=5.0, alias="PRICE_TICK_SECONDS")
    price_max_delta: float = 0.25
    price_floor: float = 0.01
    price_ticker_enabled: bool = Field(default=True, alias="PRICE_TICKER_ENABLED")
    broadcast_send_timeout: float = Field(default=1.0, alias="BROADCAST_SEND_TIMEOUT")


@lru_cache
def get_settings() -> Settings:
    return Settings()
