"""Synthesis output: one document per stack, in deployment order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from arbor.contracts.enums import OutputFormat
from arbor.contracts.types import StackName
from arbor.core.canonical import render_json, render_yaml
from arbor.core.config import OutputSettings


@dataclass(frozen=True, slots=True)
class StackDocument:
    """The synthesized document of one stack.

    Attributes:
        name: Stack name
        template: Section name -> section body, fully resolved
        dependencies: Stacks that must be deployed before this one
    """

    name: StackName
    template: dict[str, Any]
    dependencies: tuple[StackName, ...]

    @property
    def resources(self) -> dict[str, Any]:
        resources: dict[str, Any] = self.template["Resources"]
        return resources

    @property
    def outputs(self) -> dict[str, Any]:
        outputs: dict[str, Any] = self.template.get("Outputs", {})
        return outputs

    @property
    def parameters(self) -> dict[str, Any]:
        parameters: dict[str, Any] = self.template.get("Parameters", {})
        return parameters

    def render(self, output: OutputSettings | None = None) -> str:
        """Serialize the template. Identical templates render byte-identically."""
        output = output or OutputSettings()
        if output.format == OutputFormat.YAML:
            return render_yaml(self.template)
        return render_json(self.template, indent=output.indent, canonical=output.canonical)


@dataclass(frozen=True, slots=True)
class CloudAssembly:
    """Every stack document of one synthesis run, dependencies first."""

    stacks: tuple[StackDocument, ...]

    @property
    def stack_names(self) -> list[StackName]:
        return [doc.name for doc in self.stacks]

    def get_stack(self, name: str) -> StackDocument:
        """Get the document of one stack.

        Raises:
            KeyError: If no stack has that name
        """
        for doc in self.stacks:
            if doc.name == name:
                return doc
        raise KeyError(f"Stack not found: {name}")

    def render_all(self, output: OutputSettings | None = None) -> dict[StackName, str]:
        """Render every document, keyed by stack name, in deployment order."""
        return {doc.name: doc.render(output) for doc in self.stacks}
