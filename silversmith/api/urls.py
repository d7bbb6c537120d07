"""
Silversmith API URLs.

Include this in your project's urlpatterns:

    path('api/silversmith/', include('silversmith.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import CodecViewSet, OrderViewSet, ProductionBatchViewSet, ProductViewSet

router = DefaultRouter()
router.register("products", ProductViewSet)
router.register("orders", OrderViewSet)
router.register("batches", ProductionBatchViewSet)
router.register("codec", CodecViewSet, basename="codec")

urlpatterns = router.urls
