"""Concrete entity-emitting node kinds."""

from arbor.entities.output import Output
from arbor.entities.parameter import Parameter
from arbor.entities.resource import Resource

__all__ = [
    "Output",
    "Parameter",
    "Resource",
]
