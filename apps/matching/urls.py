from django.urls import path

from apps.matching import views

urlpatterns = [
    path("candidates/query/", views.CandidateQueryView.as_view(), name="candidates-query"),
    path("candidates/score/", views.ScoreCandidateView.as_view(), name="candidates-score"),
    path("matches/", views.MatchCreateView.as_view(), name="match-create"),
    path("matches/active/", views.ActiveMatchView.as_view(), name="match-active"),
    path("matches/shared-interests/", views.SharedInterestsView.as_view(), name="match-shared-interests"),
    path("matches/<str:match_id>/close/", views.MatchCloseView.as_view(), name="match-close"),
    path("matches/<str:match_id>/starters/", views.MatchStartersView.as_view(), name="match-starters"),
    path("embeddings/", views.EmbedTextView.as_view(), name="embed-text"),
]
