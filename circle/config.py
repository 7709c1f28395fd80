"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GraphSettings(BaseModel):
    """FalkorDB graph store configuration."""

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    graph_name: str = "circle"

    # Connections are borrowed from the pool per query, never held per process
    max_connections: int = 16


class SuggestionSettings(BaseModel):
    """Friend and group suggestion configuration."""

    # Number of suggestions returned when the caller does not ask for a limit
    default_limit: int = 10

    # Largest limit a caller may request; larger limits are rejected
    max_limit: int = 500


class GroupSettings(BaseModel):
    """Group configuration."""

    # Cover image used when the creator does not upload one
    default_cover_image: str = "/uploads/groups/group.jpg"

    # Shortest accepted search query (after trimming)
    search_min_length: int = 2


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using ``__`` for nested values:

        ENVIRONMENT=production
        GRAPH__HOST=falkordb.internal
        GRAPH__PASSWORD=...
        SUGGESTIONS__DEFAULT_LIMIT=20
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows GRAPH__HOST syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    graph: GraphSettings = GraphSettings()
    suggestions: SuggestionSettings = SuggestionSettings()
    groups: GroupSettings = GroupSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
