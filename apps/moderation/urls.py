from django.urls import path

from .views import ModerateTextView

urlpatterns = [
    path("moderation/check/", ModerateTextView.as_view(), name="moderation-check"),
]
