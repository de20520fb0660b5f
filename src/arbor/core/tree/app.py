"""The deployable root of a construct tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arbor.core.tree.node import Node
from arbor.core.tree.stack import Stack

if TYPE_CHECKING:
    from arbor.core.config import ArborSettings
    from arbor.engine.assembly import CloudAssembly


class App(Node):
    """Root node. Stacks under the same App can reference each other."""

    is_deployable_root = True

    def __init__(self, node_id: str = "App") -> None:
        super().__init__(None, node_id)

    @property
    def stacks(self) -> tuple[Stack, ...]:
        """All stacks in the tree, in declaration order."""
        return tuple(node for node in self.walk() if isinstance(node, Stack))

    def synth(self, settings: ArborSettings | None = None) -> CloudAssembly:
        """Freeze the tree and synthesize one document per stack."""
        from arbor.engine.synthesizer import Synthesizer

        return Synthesizer(settings).synthesize(self)
