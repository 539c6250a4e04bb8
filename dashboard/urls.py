from django.urls import path

from .views import ClientMetricsView, MetricsView

urlpatterns = [
    path("metrics",        MetricsView.as_view(),       name="dashboard_metrics"),
    path("client-metrics", ClientMetricsView.as_view(), name="dashboard_client_metrics"),
]
