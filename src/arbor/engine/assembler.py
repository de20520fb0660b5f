"""Template assembly: resolved entity records -> one stack document."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from arbor.contracts.enums import Section
from arbor.contracts.errors import AllocationError
from arbor.contracts.types import LogicalID, StackName
from arbor.core.config import SynthesisSettings
from arbor.core.references import Export
from arbor.core.tree.stack import Stack
from arbor.engine.assembly import StackDocument


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    """An entity record with every token resolved.

    Attributes:
        logical_id: Document key
        section: Template section the record belongs to
        body: Resolved record (Type, Properties, Value, ...)
        depends_on: Logical ids to list as explicit ordering annotation
        path: Node path, for diagnostics
    """

    logical_id: LogicalID
    section: Section
    body: dict[str, Any]
    depends_on: tuple[LogicalID, ...]
    path: str


class TemplateAssembler:
    """Lay out resolved records as a template.

    Section order is fixed (Description, Parameters, Resources, Outputs,
    Metadata); within a section records keep emission order. Empty optional
    sections are omitted; Resources is always present, possibly empty.
    """

    def __init__(self, settings: SynthesisSettings | None = None) -> None:
        self._settings = settings or SynthesisSettings()

    def assemble(
        self,
        stack: Stack,
        entities: Sequence[ResolvedEntity],
        exports: Sequence[Export] = (),
        dependencies: Sequence[StackName] = (),
    ) -> StackDocument:
        sections: dict[Section, dict[str, Any]] = {section: {} for section in Section}
        owners: dict[str, str] = {}

        for entity in entities:
            record = dict(entity.body)
            if entity.section == Section.RESOURCES and entity.depends_on:
                record["DependsOn"] = list(entity.depends_on)
            self._claim(owners, entity.logical_id, entity.path)
            sections[entity.section][entity.logical_id] = record

        for export in exports:
            self._claim(owners, export.output_id, f"export {export.name}")
            sections[Section.OUTPUTS][export.output_id] = {
                "Value": export.value,
                "Export": {"Name": export.name},
            }

        template: dict[str, Any] = {}
        if stack.description is not None:
            template["Description"] = stack.description
        for section in Section:
            if sections[section] or section == Section.RESOURCES:
                template[section.value] = sections[section]
        if dependencies:
            template["Metadata"] = {self._settings.stack_dependency_metadata_key: list(dependencies)}

        return StackDocument(name=stack.name, template=template, dependencies=tuple(dependencies))

    @staticmethod
    def _claim(owners: dict[str, str], key: str, owner: str) -> None:
        # Parameters, resources and outputs share one key namespace in the document
        existing = owners.get(key)
        if existing is not None:
            raise AllocationError(key, existing, owner)
        owners[key] = owner
