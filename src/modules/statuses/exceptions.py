"""Order status registry exceptions."""

from __future__ import annotations


class StatusNotFound(Exception):
    """The status (by id or by name) is not in the company's registry."""


class MissingRequiredStatus(Exception):
    """A load-bearing status name is missing from the company's registry."""


class EmptyStatusRegistry(Exception):
    """The company has no statuses, so orders have no initial state."""


class StatusAlreadyExists(Exception):
    """Another status of the company already uses this name."""


class ProtectedStatus(Exception):
    """Load-bearing statuses cannot be renamed or deleted."""


class StatusInUse(Exception):
    """Orders still reference the status."""
