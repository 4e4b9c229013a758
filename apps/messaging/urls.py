from django.urls import path

from .views import MatchMessagesView, StoreMessageView

urlpatterns = [
    path("messages/", StoreMessageView.as_view(), name="message-store"),
    path("matches/<str:match_id>/messages/", MatchMessagesView.as_view(), name="match-messages"),
]
