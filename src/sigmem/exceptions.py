"""sigmem exception hierarchy."""

from __future__ import annotations


class SigmemError(Exception):
    """Base class for all sigmem errors."""


class StorageError(SigmemError):
    """Loading or saving a Sigel snapshot failed."""


class ConsolidationError(SigmemError):
    """A consolidation pass hit an internal invariant violation."""
