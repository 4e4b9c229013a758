from django.urls import path

from .views import MyDevicesView, MyPhotosView, MyProfileView, UserEmbeddingView, UserProfileView

urlpatterns = [
    path("users/me/", MyProfileView.as_view(), name="user-me"),
    path("users/me/photos/", MyPhotosView.as_view(), name="user-me-photos"),
    path("users/me/devices/", MyDevicesView.as_view(), name="user-me-devices"),
    path("users/<str:user_id>/", UserProfileView.as_view(), name="user-profile"),
    path("users/<str:user_id>/embedding/", UserEmbeddingView.as_view(), name="user-embedding"),
]
