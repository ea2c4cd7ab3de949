"""GraphQL HTTP client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MEDIA_TYPE = "application/json; charset=utf-8"


@dataclass
class GraphQlClientConfig:
    """Configuration for the GraphQL HTTP client."""

    endpoint: str = ""
    method: str = "POST"  # "POST" or "GET"
    media_type: str = DEFAULT_MEDIA_TYPE
    timeout_seconds: float = 10.0
    headers: dict[str, str] = field(default_factory=dict)
