from __future__ import annotations

from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from apps.moderation.engine import banned_terms, classify, moderate_text
from apps.users.models import User


def test_clean_hebrew_text_is_allowed():
    decision = moderate_text("איזה יום מקסים")
    assert decision.allowed is True
    assert decision.labels == []


def test_banned_term_is_labelled():
    decision = moderate_text("זה נשמע כמו אלימות")
    assert decision.allowed is False
    assert "אלימות" in decision.labels


def test_matching_is_case_insensitive():
    decision = classify("You are a JERK", ["jerk"])
    assert decision.as_dict() == {"allowed": False, "labels": ["jerk"]}


def test_substring_matching_flags_unrelated_words():
    # known false positive of plain substring search
    assert classify("the class starts at nine", ["ass"]).allowed is False


def test_creative_spelling_slips_through():
    assert classify("j.e.r.k", ["jerk"]).allowed is True


@override_settings(MODERATION_BANNED_TERMS="spam, scam ,")
def test_lexicon_is_read_from_settings():
    assert banned_terms() == ["spam", "scam"]
    assert moderate_text("free SCAM offer").labels == ["scam"]
    assert moderate_text("אלימות").allowed is True


class ModerationApiTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="mod@example.com", password="pass12345", name="Mod")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_check_endpoint(self):
        response = self.client.post("/api/v1/moderation/check/", {"text": "איזה יום מקסים"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"allowed": True, "labels": []})

    def test_check_requires_text(self):
        response = self.client.post("/api/v1/moderation/check/", {"text": ""}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid-argument")
