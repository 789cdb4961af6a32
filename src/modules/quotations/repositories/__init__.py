"""Quotation repositories package."""

from modules.quotations.repositories.django_repository import QuotationDjangoRepository
from modules.quotations.repositories.interfaces import IQuotationRepository

__all__ = ["IQuotationRepository", "QuotationDjangoRepository"]
