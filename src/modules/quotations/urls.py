"""Quotation URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.quotations.views import QuotationViewSet

router = SimpleRouter(trailing_slash=True)
router.register("quotations", QuotationViewSet, basename="quotation")

urlpatterns = router.urls
