"""
Arbor: construct-tree synthesis for deployable infrastructure templates.

Application code builds a tree of constructs; synthesis resolves every
deferred value and emits one machine-verifiable document per stack.
"""

__version__ = "0.1.0"
