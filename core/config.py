"""
Application configuration using Pydantic Settings
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings
import logging

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_FILE = ".env"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8"
)


class TrafficEndpoint(BaseModel):
    """Request configuration for the district congestion ranking endpoint"""

    url: str
    params: Dict[str, str]
    headers: Dict[str, str]
    timeout: float = 30.0


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database
    DB_CONNECTION_STRING: Optional[str] = None

    # Traffic provider
    TRAFFIC_API_URL: str = "https://report.amap.com/ajax/districtRank.do"
    TRAFFIC_LINKS_TYPE: str = "4"
    TRAFFIC_CITY_CODE: str = "440100"
    TRAFFIC_USER_AGENT: str = DEFAULT_USER_AGENT
    TRAFFIC_ACCEPT: str = DEFAULT_ACCEPT
    TRAFFIC_ACCEPT_LANGUAGE: str = "zh-CN,zh;q=0.9"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Local artifacts
    SNAPSHOT_PATH: str = "amapindex.json"
    RUN_LOCK_PATH: str = "amapindex.json.lock"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ENV_FILE
        case_sensitive = True
        extra = "ignore"

    @property
    def endpoint(self) -> TrafficEndpoint:
        """Explicit request configuration built from the TRAFFIC_* settings"""
        return TrafficEndpoint(
            url=self.TRAFFIC_API_URL,
            params={
                "linksType": self.TRAFFIC_LINKS_TYPE,
                "cityCode": self.TRAFFIC_CITY_CODE,
            },
            headers={
                "User-Agent": self.TRAFFIC_USER_AGENT,
                "Accept": self.TRAFFIC_ACCEPT,
                "Accept-Language": self.TRAFFIC_ACCEPT_LANGUAGE,
            },
            timeout=self.HTTP_TIMEOUT_SECONDS,
        )

    @property
    def database_url(self) -> Optional[str]:
        """
        DB_CONNECTION_STRING rewritten for the asyncpg driver.

        Plain libpq style URLs (postgres://, postgresql://) are accepted so the
        same value works for psql and for this service.
        """
        url = self.DB_CONNECTION_STRING
        if not url:
            return None
        if url.startswith("postgres://"):
            return "postgresql+asyncpg://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            return "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url


def load_settings(env_file: str = ENV_FILE) -> Settings:
    """
    Build settings from the process environment and an optional env file.

    A missing env file only produces a warning; values then come from the
    process environment and the defaults above.

    Raises:
        ConfigurationError: A setting is present but cannot be parsed
    """
    source = env_file
    if not Path(env_file).exists():
        logger.warning(f"{env_file} file not found, using process environment only")
        source = None

    try:
        return Settings(_env_file=source)
    except ValidationError as e:
        invalid = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(invalid)}",
            context={"setting": invalid[0] if invalid else None, "invalid_settings": invalid},
            original_exception=e
        )
