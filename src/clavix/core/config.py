"""Configuration management using Pydantic settings."""

from importlib import metadata
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class IntelligenceSettings(BaseSettings):
    """Prompt optimization configuration."""

    default_mode: str = Field("fast", alias="CLAVIX_DEFAULT_MODE")
    show_escalation_reasons: bool = Field(False, alias="CLAVIX_SHOW_ESCALATION")
    save_prompts: bool = Field(False, alias="CLAVIX_SAVE_PROMPTS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class WorkspaceSettings(BaseSettings):
    """Location and layout of the .clavix workspace."""

    root_dir: str = Field(".clavix", alias="CLAVIX_DIR")
    outputs_dir: str = Field("outputs", alias="CLAVIX_OUTPUTS_DIR")
    prompts_dir: str = Field("prompts", alias="CLAVIX_PROMPTS_DIR")
    templates_dir: str = Field("templates", alias="CLAVIX_TEMPLATES_DIR")
    config_file: str = Field("config.json", alias="CLAVIX_CONFIG_FILE")
    instructions_file: str = Field("AGENTS.md", alias="CLAVIX_INSTRUCTIONS_FILE")

    model_config = {"env_prefix": "", "extra": "ignore"}


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("WARNING", alias="CLAVIX_LOG_LEVEL")
    format: str = Field("text", alias="CLAVIX_LOG_FORMAT")
    debug: bool = Field(False, alias="CLAVIX_DEBUG")

    model_config = {"env_prefix": "", "extra": "ignore"}


class Settings(BaseSettings):
    """Root configuration aggregating all settings."""

    version: str = Field("0.0.0", alias="CLAVIX_VERSION")
    intelligence: IntelligenceSettings = Field(default_factory=IntelligenceSettings)
    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore"
    }


def resolve_version(distribution: str = "clavix") -> str:
    """Read the installed package version, or 0.0.0 when not installed."""
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    The version is resolved here, once, and carried on the settings object
    so consumers receive it explicitly.
    """
    settings = Settings()
    if settings.version == "0.0.0":
        settings = settings.model_copy(update={"version": resolve_version()})
    return settings


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
