"""Quotation domain exceptions."""

from __future__ import annotations


class QuotationNotFound(Exception):
    """The quotation does not exist in the caller's company."""


class InvalidQuotation(Exception):
    """The quotation request is incomplete or references unusable data."""


class InvalidQuotationTransition(Exception):
    """The quotation cannot move from its current status to the requested one."""


class QuotationExpired(Exception):
    """The quotation's validity date has passed."""


class QuotationAlreadyConverted(Exception):
    """The quotation was already turned into an order."""

    def __init__(self, order_id) -> None:
        self.order_id = order_id
        super().__init__(f"Quotation was already converted to order {order_id}.")
