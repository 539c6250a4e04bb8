from django.urls import path

from .views import MeView, TokenLoginView

urlpatterns = [
    path("token", TokenLoginView.as_view(), name="auth_token"),
    path("login", TokenLoginView.as_view(), name="auth_login"),
    path("me",    MeView.as_view(),         name="auth_me"),
]
