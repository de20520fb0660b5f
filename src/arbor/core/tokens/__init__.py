"""Deferred values and their resolution."""

from arbor.core.tokens import fn
from arbor.core.tokens.fn import JoinToken
from arbor.core.tokens.intrinsics import Intrinsics
from arbor.core.tokens.resolver import ReferenceHost, ResolveContext, TokenResolver
from arbor.core.tokens.token import Lazy, Reference, Token

__all__ = [
    "Intrinsics",
    "JoinToken",
    "Lazy",
    "Reference",
    "ReferenceHost",
    "ResolveContext",
    "Token",
    "TokenResolver",
    "fn",
]
