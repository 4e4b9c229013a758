from django.urls import include, path

urlpatterns = [
    path("", include("apps.users.urls")),
    path("", include("apps.matching.urls")),
    path("", include("apps.messaging.urls")),
    path("", include("apps.moderation.urls")),
    path("", include("apps.notifications.urls")),
]
