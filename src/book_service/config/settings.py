"""
Configuration settings for the Book Service
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Process-wide configuration, built once at startup and passed into the app"""
    database_url: str
    port: int = 8080
    application_name: str = "bookservice"
    log_level: str = "INFO"

    # Authentication
    enable_auth: bool = True
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # CORS settings
    allowed_origins: List[str] = field(default_factory=list)

    # Database pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_command_timeout: float = 60
    init_schema: bool = True

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 2000


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Populated Settings instance

    Raises:
        ValueError: If a required variable is missing
    """
    env = os.environ if environ is None else environ

    database_url = env.get("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is required")

    enable_auth = _as_bool(env.get("ENABLE_AUTH"), True)
    jwt_secret = env.get("JWT_SECRET")
    if enable_auth and not jwt_secret:
        raise ValueError("JWT_SECRET environment variable is required when ENABLE_AUTH is true")

    origins = [origin.strip() for origin in env.get("ALLOWED_ORIGINS", "").split(",") if origin.strip()]

    settings = Settings(
        database_url=database_url,
        port=int(env.get("PORT", 8080)),
        application_name=env.get("APPLICATION_NAME", "bookservice"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        enable_auth=enable_auth,
        jwt_secret=jwt_secret,
        jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
        jwt_audience=env.get("JWT_AUDIENCE") or None,
        allowed_origins=origins,
        db_pool_min_size=int(env.get("DB_POOL_MIN_SIZE", 2)),
        db_pool_max_size=int(env.get("DB_POOL_MAX_SIZE", 10)),
        db_command_timeout=float(env.get("DB_COMMAND_TIMEOUT", 60)),
        init_schema=_as_bool(env.get("DB_INIT_SCHEMA"), True),
        default_page_size=int(env.get("DEFAULT_PAGE_SIZE", 20)),
        max_page_size=int(env.get("MAX_PAGE_SIZE", 2000)),
    )

    if not settings.enable_auth:
        logger.warning("ENABLE_AUTH is false - all requests are treated as anonymous")

    return settings


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings bound to the running app"""
    return request.app.state.settings
