"""Node configuration surface: credentials and the Function Call field set.

Credentials may arrive two ways and both are supported:

    {"apiConnection": {"apiUrl": ..., "apiKey": ..., "projectId": ...}}
    {"apiBaseUrl": ..., "apiKey": ..., "projectId": ...}

Connection values win per field; inline fields fill whatever the connection
leaves empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cognigy_function_call.client.config import DEFAULT_PAGE_SIZE, Settings

STORAGE_TYPES: tuple[str, ...] = ("input", "context")

# Human-readable labels used in validation messages, keyed by config field.
FIELD_LABELS: dict[str, str] = {
    "flow": "Flow",
    "node": "Entry Node",
    "functionName": "Function Name",
    "payload": "Payload",
    "outputStorageType": "Output Storage Type",
    "outputStoragePath": "Output Storage Path",
}


class ConfigurationError(ValueError):
    """A required configuration field is missing or has an unusable value."""

    def __init__(self, field_key: str, message: str | None = None) -> None:
        self.field = field_key
        self.label = FIELD_LABELS.get(field_key, field_key)
        super().__init__(message or f"{self.label} is required")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Credentials:
    """API base URL, key and project id. Opaque beyond presence checks."""

    api_base_url: str = ""
    api_key: str = field(default="", repr=False)
    project_id: str = ""

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Credentials:
        connection = config.get("apiConnection")
        if not isinstance(connection, Mapping):
            connection = {}
        return cls(
            api_base_url=_text(connection.get("apiUrl")) or _text(config.get("apiBaseUrl")),
            api_key=_text(connection.get("apiKey")) or _text(config.get("apiKey")),
            project_id=_text(connection.get("projectId")) or _text(config.get("projectId")),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.api_base_url and self.api_key and self.project_id)

    def to_settings(self, page_size: int = DEFAULT_PAGE_SIZE) -> Settings:
        return Settings(
            api_key=self.api_key,
            api_endpoint=self.api_base_url.rstrip("/"),
            project_id=self.project_id,
            page_size=page_size,
        )


# ---------------------------------------------------------------------------
# Function Call configuration
# ---------------------------------------------------------------------------


class FunctionCallConfig(BaseModel):
    """Configuration of one Function Call node, as stored by the host."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    flow: Any = Field(None, description="Flow selection produced by the flow resolver.")
    node: Any = Field(None, description="Entry-node selection produced by the node resolver.")
    function_name: str | None = Field(
        None,
        alias="functionName",
        description="The name/identifier of the function to execute.",
    )
    payload: Any = Field(None, description="Input data to pass to the function.")
    output_storage_type: str | None = Field(
        "input",
        alias="outputStorageType",
        description="Where the callee stores the function's result: input or context.",
    )
    output_storage_path: str | None = Field(
        None,
        alias="outputStoragePath",
        description="Dot-addressable path where the output should be stored.",
    )

    @classmethod
    def parse(cls, config: Mapping[str, Any] | FunctionCallConfig) -> FunctionCallConfig:
        """Validate a raw host config, reporting the first bad field as ConfigurationError."""
        if isinstance(config, FunctionCallConfig):
            return config
        try:
            return cls.model_validate(dict(config))
        except ValidationError as e:
            first = e.errors()[0]
            loc = str(first["loc"][0]) if first.get("loc") else "config"
            raise ConfigurationError(
                loc, f"{FIELD_LABELS.get(loc, loc)} is invalid: {first.get('msg', 'bad value')}"
            ) from e
