"""Configuration and environment for the diagnostics collector."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TAIL_LINES = 3000
DEFAULT_MARKER_SERVICE = "px-backup"
DEFAULT_MAX_WORKERS = 16


class Settings(BaseSettings):
    """Collector settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="PXB_DIAGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("PXB_DIAGS_KUBECONFIG", "KUBECONFIG"),
        description="Path to kubeconfig; falls back to the KUBECONFIG environment variable",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    namespace: str | None = Field(
        default=None,
        description="px-backup namespace; discovered from the marker service when unset",
    )
    marker_service: str = Field(
        default=DEFAULT_MARKER_SERVICE,
        description="Service name whose namespace identifies the px-backup deployment",
    )
    kubectl: str = Field(
        default="kubectl",
        description="kubectl binary used for manifests, descriptions and resource lists",
    )

    # Bundle
    output_dir: Path | None = Field(
        default=None,
        description="Directory under which pxb-diags-output is created (default: /tmp)",
    )
    tail_lines: int = Field(
        default=DEFAULT_TAIL_LINES,
        ge=-1,
        description="Number of log lines to keep per container; -1 keeps the full log",
    )
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=1,
        description="Upper bound on collection tasks running at the same time",
    )

    @field_validator("kubeconfig", mode="before")
    @classmethod
    def _empty_kubeconfig_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
