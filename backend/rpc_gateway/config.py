"""Application configuration"""

from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Endpoint registry
    registry_backend: Literal["redis", "memory"] = "redis"
    registry_universe_key: str = "all_rpcs"
    registry_healthy_key: str = "healthy_rpcs"
    rpc_urls: List[str] = []  # Seeds the universe at startup when the registry holds none

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    # Health monitor
    probe_timeout: float = 5.0  # Per-probe timeout (seconds)
    probe_max_concurrency: int = 16
    health_check_interval: int = 60  # Seconds between scheduled cycles
    health_check_enabled: bool = True  # Run the scheduler inside the web process

    # Request forwarding
    upstream_timeout: float = 30.0
    upstream_max_connections: int = 100
    forward_request_path: bool = False  # Append inbound path/query to the endpoint URL

    # API
    api_title: str = "RPC Gateway"
    api_version: str = "0.1.0"
    admin_enabled: bool = True
    admin_token: str = ""  # Required in the X-Admin-Token header; token-guarded routes answer 403 while unset

    # Logging
    log_level: str = "INFO"

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global settings instance
settings = Settings()
