"""Shapes, sections, and modes used across subsystem boundaries."""

from enum import StrEnum


class TokenShape(StrEnum):
    """Intended shape of a token's resolved value."""

    STRING = "string"
    LIST = "list"
    MAPPING = "mapping"


class Section(StrEnum):
    """Top-level template sections an entity can be emitted into.

    Member order is the order sections appear in a rendered template.
    """

    PARAMETERS = "Parameters"
    RESOURCES = "Resources"
    OUTPUTS = "Outputs"


class SelectionQuery(StrEnum):
    """Whether a selection may legitimately match nothing."""

    REQUIRED = "required"
    ALLOW_NONE = "allow_none"


class OutputFormat(StrEnum):
    """Serialization format for rendered templates."""

    JSON = "json"
    YAML = "yaml"
