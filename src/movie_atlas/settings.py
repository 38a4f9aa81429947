"""Configuration management for Movie Atlas."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, TomlConfigSettingsSource

_CONFIG_FILENAME = "movie-atlas.toml"


def _find_config_toml(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``movie-atlas.toml``."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / _CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


class Neo4jSettings(BaseSettings):
    """Neo4j connection settings."""

    uri: str = Field(default="bolt://localhost:7687", description="Bolt URI of the graph store.")
    username: str = Field(default="neo4j", description="Neo4j username.")
    password: str = Field(default="", description="Neo4j password.")
    database: str = Field(default="neo4j", description="Database name to open sessions against.")
    query_timeout_s: float = Field(default=10.0, description="Transaction timeout in seconds for read queries.")
    write_timeout_s: float = Field(default=30.0, description="Transaction timeout in seconds for write queries.")
    connection_timeout_s: float = Field(default=5.0, description="Timeout in seconds for opening a connection.")
    max_connection_pool_size: int = Field(default=50, description="Max pooled Bolt connections per driver.")


class CatalogSettings(BaseSettings):
    """Defaults applied to catalog listings when the caller leaves them out."""

    default_sort: str = Field(default="title", description="Sort property when none is given.")
    default_order: str = Field(default="asc", description="Sort direction when none is given.")
    default_limit: int = Field(default=6, description="Page size when none is given.")
    max_limit: int | None = Field(default=None, description="Largest page size allowed (None = uncapped).")


class ObservabilitySettings(BaseSettings):
    """OpenTelemetry observability settings (SDK requires the ``[otel]`` extra)."""

    enabled: bool = Field(default=False, description="Enable OpenTelemetry tracing and metrics.")
    exporter: str = Field(default="otlp", description="Exporter type: 'otlp', 'console', or 'none'.")
    endpoint: str = Field(default="http://localhost:4317", description="OTLP collector endpoint.")
    service_name: str = Field(default="movie-atlas", description="OTel service.name resource attribute.")
    sample_rate: float = Field(default=1.0, description="Trace sample rate (1.0 = all, 0.1 = 10%).")


class LoggingSettings(BaseSettings):
    """Log sink settings."""

    level: str = Field(default="INFO", description="Minimum loguru level written to stderr.")


class AtlasSettings(BaseSettings):
    """Root configuration for Movie Atlas."""

    model_config = SettingsConfigDict(
        toml_file=_CONFIG_FILENAME,
        env_prefix="MOVIE_ATLAS_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = _find_config_toml()
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if toml_path:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        sources.append(file_secret_settings)
        return tuple(sources)

    neo4j: Neo4jSettings = Field(default_factory=Neo4jSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
