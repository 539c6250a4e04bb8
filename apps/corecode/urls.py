from rest_framework.routers import SimpleRouter

from .views import CampusViewSet

router = SimpleRouter(trailing_slash=False)
router.register("campuses", CampusViewSet, basename="campus")

urlpatterns = router.urls
