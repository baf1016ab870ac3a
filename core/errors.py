"""Error taxonomy for stack operations."""

from __future__ import annotations


class StackError(Exception):
    """Base class for window/tab stack failures."""


class InvalidReferenceError(StackError, LookupError):
    """Operation targets an entity that is not in the stack."""


class OutOfRangeError(StackError, IndexError):
    """Index-based operation received an index outside the stack bounds."""


class MalformedSnapshotError(StackError, ValueError):
    """Snapshot record could not be turned back into a stack."""
