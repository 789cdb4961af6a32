"""Catalogue domain exceptions."""

from __future__ import annotations


class ProductNotFound(Exception):
    """The product does not exist in the caller's company."""


class ProductAlreadyExists(Exception):
    """Another live product of the company already uses this SKU."""
