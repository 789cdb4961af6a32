"""Order routes.

Modules share the ``api/v1/`` prefix, so each registers its viewsets on a
``SimpleRouter`` (no per-module API root view).  ``OrderViewSet`` extra
actions give ``confirm-payment/``, ``settlement/``, ``deliver/``,
``attachments/`` and ``comments/`` under ``orders/<pk>/``.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
