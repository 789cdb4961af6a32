"""Product service layer (Use Cases).

Business rules enforced here:
- A SKU is used by at most one live product of a company.
- Deleting a product is a soft delete; quotations keep their snapshot.
- ``tier_prices`` shows what each of the company's pricing tiers charges
  for a product, in the base currency.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.catalog.dtos import TierPriceDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.models import Product

if TYPE_CHECKING:
    from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
    from modules.catalog.repositories.interfaces import IProductRepository
    from modules.pricing.services import PricingService

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for the product catalogue.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(
        self, repository: IProductRepository, pricing_service: PricingService
    ) -> None:
        self._repo = repository
        self._pricing = pricing_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, company_id: UUID, dto: CreateProductDTO) -> Product:
        """Create a product.

        Raises:
            ProductAlreadyExists: the SKU is taken by a live product.
        """
        log = logger.bind(company_id=str(company_id), sku=dto.sku)

        if self._repo.get_by_sku(company_id, dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            company_id=company_id,
            sku=dto.sku,
            product_code=dto.product_code or "",
            name_en=dto.name_en,
            name_ar=dto.name_ar or "",
            category=dto.category,
            unit_price=dto.unit_price,
            description=dto.description or "",
            image_url=dto.image_url or "",
            stock_quantity=dto.stock_quantity,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(
        self, company_id: UUID, product_id: Any, dto: UpdateProductDTO
    ) -> Product:
        """Apply the non-``None`` fields of *dto*.

        Raises:
            ProductNotFound: missing, deleted or another tenant's product.
            ProductAlreadyExists: the new SKU is taken by another product.
        """
        product = self.get_product(company_id, product_id)
        log = logger.bind(company_id=str(company_id), product_id=str(product.id))

        if dto.sku is not None and dto.sku != product.sku:
            existing = self._repo.get_by_sku(company_id, dto.sku)
            if existing and existing.id != product.id:
                log.warning("product.duplicate_sku", sku=dto.sku)
                raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        changes = dto.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        log.info("product.updated", fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, company_id: UUID, product_id: Any) -> None:
        product = self.get_product(company_id, product_id)
        self._repo.delete(product)
        logger.info(
            "product.soft_deleted",
            company_id=str(company_id),
            product_id=str(product_id),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, company_id: UUID, product_id: Any) -> Product:
        product = self._repo.get_by_id(company_id, product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    def list_products(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ):
        return self._repo.list(company_id, filters)

    def tier_prices(self, company_id: UUID, product_id: Any) -> List[TierPriceDTO]:
        """The product's unit price under every tier of the company."""
        product = self.get_product(company_id, product_id)
        return [
            TierPriceDTO(
                pricing_tier_id=tier.id,
                name=tier.display_name,
                markup_percent=tier.markup_percent,
                is_default=tier.is_default,
                unit_price=tier.apply_markup(product.unit_price),
            )
            for tier in self._pricing.list_tiers(company_id)
        ]
