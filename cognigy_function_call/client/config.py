"""Configuration for the Cognigy HTTP client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True)
class Settings:
    """Immutable client settings, loaded from credentials or environment variables."""

    api_key: str = field(repr=False)
    api_endpoint: str = "https://api-trial.cognigy.ai"
    project_id: str = ""
    timeout: int = 30
    log_level: str = "WARNING"
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_env(cls) -> Settings:
        api_key = os.getenv("COGNIGY_API_KEY", "")
        api_endpoint = os.getenv("COGNIGY_API_ENDPOINT", "https://api-trial.cognigy.ai").rstrip("/")
        project_id = os.getenv("COGNIGY_PROJECT_ID", "")
        raw_timeout = os.getenv("COGNIGY_TIMEOUT", "30")
        try:
            timeout = int(raw_timeout)
        except ValueError as e:
            raise ValueError(
                f"COGNIGY_TIMEOUT must be a whole number of seconds, got {raw_timeout!r}"
            ) from e
        log_level = os.getenv("COGNIGY_LOG_LEVEL", "WARNING").upper()
        return cls(
            api_key=api_key,
            api_endpoint=api_endpoint,
            project_id=project_id,
            timeout=timeout,
            log_level=log_level,
        )

    @property
    def base_url(self) -> str:
        return f"{self.api_endpoint}/v2.0"

    @property
    def headers(self) -> dict[str, str]:
        h: dict[str, str] = {"Accept": "application/json"}
        if self.api_key:
            h["X-API-Key"] = self.api_key
        return h
