from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import NotificationViewSet, SendPushView

router = DefaultRouter(trailing_slash=True)
router.register(r"notifications", NotificationViewSet, basename="notification")

urlpatterns = [
    path("push/send/", SendPushView.as_view(), name="push-send"),
    *router.urls,
]
