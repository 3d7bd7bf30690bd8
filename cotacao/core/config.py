from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR, DB_FILENAME, UPSTREAM_TIMEOUT_MS).
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Cotacao USD/BRL"
    debug: bool = False
    version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080

    # Data & persistence
    data_dir: Path = Path("db")
    db_filename: str = "database.db"
    db_path: Optional[Path] = None  # derived if not provided

    # Connection pool bounds (25 open max, 5 idle, 5 minute lifetime)
    db_pool_size: int = 5
    db_max_overflow: int = 20
    db_pool_recycle_seconds: int = 300

    # Upstream quote API
    upstream_url: AnyHttpUrl = "https://economia.awesomeapi.com.br/json/last/USD-BRL"
    pair_key: str = "USDBRL"

    # Per-request deadlines
    upstream_timeout_ms: int = 200
    store_timeout_ms: int = 10

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure the storage directory exists."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        if self.upstream_timeout_ms <= 0 or self.store_timeout_ms <= 0:
            raise ValueError("upstream_timeout_ms and store_timeout_ms must be positive")

    @property
    def upstream_timeout(self) -> float:
        return self.upstream_timeout_ms / 1000

    @property
    def store_timeout(self) -> float:
        return self.store_timeout_ms / 1000


class ClientSettings(BaseSettings):
    """Settings for the polling client (SERVER_URL, POLL_INTERVAL_SECONDS, ...)."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    server_url: str = "http://localhost:8080"
    poll_interval_seconds: float = 10.0
    request_timeout_seconds: float = 5.0
    output_file: Path = Path("cotacao.txt")
    label: str = "Dólar"
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
