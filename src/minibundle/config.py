"""Configuration models for minibundle."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from minibundle.paths import CONFIG_FILE, DEFAULT_ENTRY, DEFAULT_OUTPUT_DIR, DEFAULT_OUTPUT_FILE

TargetName = Literal["es5", "es2015", "es2017", "es2020", "esnext"]


class OutputConfig(BaseModel):
    """Bundle artifact configuration."""

    directory: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Output directory (relative to project root)",
    )
    filename: str = Field(
        default=DEFAULT_OUTPUT_FILE,
        description="Bundle file name",
    )


class TransformConfig(BaseModel):
    """Module transform configuration."""

    target: TargetName = Field(
        default="es5",
        description="Syntax of generated interop and loader code; only module syntax is lowered",
    )


class ResolveConfig(BaseModel):
    """Dependency resolution configuration."""

    extensions: list[str] = Field(
        default=[".js", ".mjs"],
        description="Extensions tried when a specifier does not name a file",
    )
    dedupe: bool = Field(
        default=True,
        description="Resolve each distinct file once (required for cyclic imports)",
    )

    @field_validator("extensions")
    @classmethod
    def _dotted(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]


class RuntimeConfig(BaseModel):
    """Generated runtime loader configuration."""

    cache: bool = Field(
        default=True,
        description="Execute each module once and share its exports",
    )


class BundleConfig(BaseSettings):
    """Main minibundle configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MINIBUNDLE_",
        env_nested_delimiter="_",
        extra="ignore",
    )

    root: str = Field(default=".", description="Project root; entry is resolved against it")
    entry: str = Field(default=DEFAULT_ENTRY, description="Entry module path")
    output: OutputConfig = Field(default_factory=OutputConfig)
    transform: TransformConfig = Field(default_factory=TransformConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> BundleConfig:
        """Load configuration from file and environment.

        Resolution order (highest to lowest priority):
        1. Provided config file path
        2. .minibundlerc.toml in current directory
        3. .minibundlerc.toml in home directory
        4. Environment variables
        5. Built-in defaults
        """
        config_data: dict[str, Any] = {}

        locations = []
        if config_path:
            locations.append(config_path)
        locations.extend(
            [
                Path.cwd() / CONFIG_FILE,
                Path.home() / CONFIG_FILE,
            ]
        )

        for loc in locations:
            if loc.exists():
                with open(loc, "rb") as f:
                    config_data = tomllib.load(f)
                break

        return cls(**config_data)


def get_default_config_toml() -> str:
    """Generate default .minibundlerc.toml content."""
    return f"""# minibundle configuration

root = "."
entry = "{DEFAULT_ENTRY}"

[output]
directory = "{DEFAULT_OUTPUT_DIR}"
filename = "{DEFAULT_OUTPUT_FILE}"

[transform]
target = "es5"  # es5 | es2015 | es2017 | es2020 | esnext (only module syntax is lowered)

[resolve]
extensions = [".js", ".mjs"]
dedupe = true  # false resolves every import separately and rejects cycles

[runtime]
cache = true  # false re-executes a module for every require()
"""
