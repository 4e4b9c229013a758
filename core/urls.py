from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", include("apps.core.api_router")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("", include("django_prometheus.urls")),
]
