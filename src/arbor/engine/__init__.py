"""Synthesis engine: resolves a construct tree into stack documents."""

from arbor.engine.assembler import ResolvedEntity, TemplateAssembler
from arbor.engine.assembly import CloudAssembly, StackDocument
from arbor.engine.synthesizer import Synthesizer

__all__ = [
    "CloudAssembly",
    "ResolvedEntity",
    "StackDocument",
    "Synthesizer",
    "TemplateAssembler",
]
