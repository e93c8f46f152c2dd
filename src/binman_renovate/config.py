"""
Configuration management for binman-renovate.

This module holds the process settings read from the environment and the
Renovate configuration object that keeps binman.yaml manifests up to date.
The Renovate configuration is immutable and serializes to the schema the
Renovate bot expects.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .managers.regex import ExtractionRule

DEFAULT_PLATFORM = "github"
DEFAULT_REPOSITORIES = ("juliankr/binman",)

# Renovate runs on node, so match strings use JavaScript regex syntax.
BINMAN_MATCH_STRING = (
    r"# renovate: datasource=(?<datasource>\S+) depName=(?<depName>\S+)"
    r"[\s\S]*?version: (?<currentValue>.*)"
)


class RegexManager(BaseModel):
    """A Renovate ``regexManagers`` entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_match: tuple[str, ...] = Field(
        ..., alias="fileMatch", description="Package file patterns"
    )
    match_strings: tuple[str, ...] = Field(
        ..., alias="matchStrings", description="Patterns with named groups"
    )
    datasource_template: str | None = Field(
        default=None, alias="datasourceTemplate", description="Datasource template"
    )
    dep_name_template: str | None = Field(
        default=None, alias="depNameTemplate", description="Dependency name template"
    )

    def to_rule(self) -> ExtractionRule:
        """Compile this manager into an extraction rule."""
        return ExtractionRule(
            file_match=self.file_match,
            match_strings=self.match_strings,
            datasource_template=self.datasource_template,
            dep_name_template=self.dep_name_template,
        )


BINMAN_MANAGER = RegexManager(
    file_match=("binman.yaml",),
    match_strings=(BINMAN_MATCH_STRING,),
    datasource_template="{{{datasource}}}",
    dep_name_template="{{{depName}}}",
)


class RenovateConfig(BaseModel):
    """Renovate bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    platform: str = Field(..., description="Hosting platform")
    token: str | None = Field(
        default=None, repr=False, description="Platform token"
    )
    repositories: tuple[str, ...] = Field(..., description="Managed repositories")
    regex_managers: tuple[RegexManager, ...] = Field(
        default=(), alias="regexManagers", description="Custom regex managers"
    )

    def to_renovate_dict(self) -> dict[str, Any]:
        """Serialize to Renovate's configuration schema; unset fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a ``config.json`` document."""
        return json.dumps(self.to_renovate_dict(), indent=indent)

    def rules(self) -> list[ExtractionRule]:
        """Compile every regex manager into an extraction rule."""
        return [manager.to_rule() for manager in self.regex_managers]


def build_renovate_config(token: str | None) -> RenovateConfig:
    """
    Build the binman Renovate configuration.

    Args:
        token: Platform token, or None when unavailable

    Returns:
        Immutable Renovate configuration
    """
    return RenovateConfig(
        platform=DEFAULT_PLATFORM,
        token=token,
        repositories=DEFAULT_REPOSITORIES,
        regex_managers=(BINMAN_MANAGER,),
    )


class Settings(BaseSettings):
    """Process settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    github_token: str | None = Field(
        default=None, description="GitHub token handed to Renovate"
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format")

    @field_validator("github_token")
    @classmethod
    def normalize_github_token(cls, v: str | None) -> str | None:
        """Treat a blank token as unset."""
        if v is None or not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed_formats = {"json", "console"}
        if v.lower() not in allowed_formats:
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def load_renovate_config(settings: Settings | None = None) -> RenovateConfig:
    """
    Load the Renovate configuration, reading the token from settings.

    Args:
        settings: Settings to read from; the global settings when omitted
    """
    settings = settings or get_settings()
    return build_renovate_config(settings.github_token)
