"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from lorekeeper import __version__

DEFAULT_BASE_URL = "https://www.dnd5eapi.co/api/2014"


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CatalogConfig(Base):
    """Upstream catalog API settings."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    user_agent: str = f"lorekeeper/{__version__}"
    endpoints: list[str] = Field(default_factory=list)  # Empty means the built-in registry


class SearchConfig(Base):
    """Search engine settings."""

    default_max_results: int = 100
    preload: list[str] = Field(default_factory=list)
    preload_all: bool = False


class LoggingConfig(Base):
    """Log output settings."""

    level: str = "INFO"


class Config(BaseSettings):
    """Root configuration for lorekeeper."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="LOREKEEPER_",
        env_nested_delimiter="__",
    )
