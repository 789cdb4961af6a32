"""Django ORM implementation of the Product repository."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from django.core.exceptions import ValidationError

from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    def _base_queryset(self, company_id: UUID):
        return Product.objects.for_company(company_id).alive()

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Product]:
        try:
            return self._base_queryset(company_id).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_sku(self, company_id: UUID, sku: str) -> Optional[Product]:
        return (
            self._base_queryset(company_id)
            .filter(sku=Product.normalize_sku(sku))
            .first()
        )

    def list(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        queryset = self._base_queryset(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("name_en", "id")

    def save(self, product: Product) -> Product:
        product.save()
        return product

    def delete(self, product: Product) -> None:
        product.delete()
