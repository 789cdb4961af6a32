"""Client domain exceptions."""

from __future__ import annotations


class ClientNotFound(Exception):
    """The client does not exist in the caller's company."""


class InvalidClientDefaults(Exception):
    """The default currency or pricing tier cannot be used by this company."""
