# tests/fixtures/__init__.py
"""Shared tree builders for Arbor tests.

Available builders:
- build_cross_stack_app: StackA/Bucket referenced by StackB/Policy
- RecordingHost: ReferenceHost stand-in for resolver tests
"""

from tests.fixtures.trees import CrossStackApp, RecordingHost, build_cross_stack_app

__all__ = [
    "CrossStackApp",
    "RecordingHost",
    "build_cross_stack_app",
]
