# fee_portal/urls.py
"""Main URL configuration.

- Admin -> /admin/
- Token login + principal -> /api/auth/
- Every app's API under /api/
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # Auth
    path("api/auth/", include("accounts.urls")),

    # Domain apps
    path("api/", include("apps.corecode.urls")),
    path("api/", include("apps.clients.urls")),
    path("api/", include("apps.finance.urls")),
    path("api/dashboard/", include("dashboard.urls")),
]
