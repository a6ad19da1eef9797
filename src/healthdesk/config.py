from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "mongodb://localhost:27017/healthdesk"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    cors_origins: list[str] = []
    # Proxies allowed to set X-Forwarded-For/-Proto, comma separated or "*"
    forwarded_allow_ips: str = "127.0.0.1"
    # "mongo" shares sessions between processes, "memory" keeps them in this process only
    session_backend: Literal["mongo", "memory"] = "mongo"
    session_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    session_cookie_name: str = "sid"
    # Frontend is served from another origin, so the cookie must be sent cross-site
    session_cookie_secure: bool = True
    session_cookie_samesite: Literal["lax", "strict", "none"] = "none"
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    model_config = {
        "env_file": [".env"],
        "env_prefix": "HEALTHDESK_",
        "extra": "ignore",
    }
