"""Order status URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.statuses.views import OrderStatusViewSet

router = SimpleRouter(trailing_slash=True)
router.register("statuses", OrderStatusViewSet, basename="order-status")

urlpatterns = router.urls
