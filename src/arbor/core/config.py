"""
Configuration schema and loading for Arbor synthesis.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from arbor.contracts.enums import OutputFormat

# Template metadata keys follow the provider's Vendor::Name convention
_METADATA_KEY_PATTERN = re.compile(r"^[A-Za-z0-9]+::[A-Za-z0-9]+$")


class SynthesisSettings(BaseModel):
    """Knobs for logical id allocation and dependency annotation."""

    model_config = {"frozen": True}

    hash_length: int = Field(
        default=8,
        ge=4,
        le=32,
        description="Hex characters of path hash appended to every logical id",
    )
    max_logical_id_length: int = Field(
        default=255,
        ge=40,
        description="Upper bound on logical id length; the readable prefix is truncated to fit",
    )
    emit_implicit_depends_on: bool = Field(
        default=False,
        description=(
            "List every reference-implied dependency in DependsOn; when off, only those "
            "not already carried by a Ref/GetAtt in the record are listed"
        ),
    )
    stack_dependency_metadata_key: str = Field(
        default="Arbor::StackDependencies",
        description="Metadata key under which a template declares the stacks it depends on",
    )

    @field_validator("stack_dependency_metadata_key")
    @classmethod
    def validate_metadata_key(cls, v: str) -> str:
        if not _METADATA_KEY_PATTERN.match(v):
            raise ValueError(f"metadata key must look like 'Vendor::Name', got {v!r}")
        return v


class OutputSettings(BaseModel):
    """How rendered templates are serialized."""

    model_config = {"frozen": True}

    format: OutputFormat = OutputFormat.JSON
    canonical: bool = Field(
        default=False,
        description="Emit RFC 8785 canonical JSON (sorted keys, no whitespace); JSON format only",
    )
    indent: int = Field(default=1, ge=0, le=8)


class SelectionSettings(BaseModel):
    """Policy for node selection queries.

    Message templates receive the keyword fields shown in their defaults.
    """

    model_config = {"frozen": True}

    default_category: str = Field(default="private", min_length=1)
    ambiguous_message: str = "At most one of category and name can be supplied (got category={category!r}, name={name!r})"
    empty_name_message: str = "No nodes with name: {name}"
    empty_category_message: str = "No nodes match category {category!r}. Please select a different set of nodes."
    unknown_category_message: str = "Unknown category {category!r}; known categories: {known}"


class LoggingSettings(BaseModel):
    """Log verbosity and rendering."""

    model_config = {"frozen": True}

    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return normalized


class ArborSettings(BaseModel):
    """Top-level settings."""

    model_config = {"frozen": True}

    synthesis: SynthesisSettings = Field(default_factory=SynthesisSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> ArborSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (ARBOR_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: ARBOR_OUTPUT__FORMAT for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="ARBOR",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return ArborSettings(**raw_config)


def _lower_keys(value: object) -> object:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
