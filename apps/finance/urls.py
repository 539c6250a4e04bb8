from rest_framework.routers import SimpleRouter

from .views import VoucherViewSet

router = SimpleRouter(trailing_slash=False)
router.register("vouchers", VoucherViewSet, basename="voucher")

urlpatterns = router.urls
