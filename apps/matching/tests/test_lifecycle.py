from __future__ import annotations

import threading
from unittest.mock import patch

from django.db import IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase

from apps.core.errors import FailedPrecondition, InvalidArgument, NotFoundError, PermissionDeniedError
from apps.matching.models import Match, MatchParticipant
from apps.matching.services.lifecycle import close_match, create_or_queue_match, get_active_match
from apps.users.models import User


class MatchLifecycleTests(TestCase):
    def setUp(self) -> None:
        self.alice = User.objects.create_user(email="alice@example.com", password="pass1234", name="Alice")
        self.bob = User.objects.create_user(email="bob@example.com", password="pass1234", name="Bob")
        self.carol = User.objects.create_user(email="carol@example.com", password="pass1234", name="Carol")
        self.dan = User.objects.create_user(email="dan@example.com", password="pass1234", name="Dan")

    def test_create_opens_active_match(self) -> None:
        match = create_or_queue_match(str(self.alice.id), str(self.bob.id), 0.82)

        match.refresh_from_db()
        self.assertEqual(match.state, Match.State.ACTIVE)
        self.assertEqual(match.opened_by_id, self.alice.id)
        self.assertEqual(match.score, 0.82)
        self.assertIsNone(match.last_message_at)
        self.assertIsNone(match.closed_by_id)
        self.assertEqual(match.user_ids, [self.alice.id, self.bob.id])

    def test_score_is_optional(self) -> None:
        match = create_or_queue_match(self.alice.id, self.bob.id)
        self.assertIsNone(match.score)

    def test_blocked_when_either_user_is_matched(self) -> None:
        create_or_queue_match(self.alice.id, self.carol.id)

        with self.assertRaises(FailedPrecondition):
            create_or_queue_match(self.alice.id, self.bob.id)
        with self.assertRaises(FailedPrecondition):
            create_or_queue_match(self.bob.id, self.carol.id)
        self.assertEqual(Match.objects.count(), 1)

    def test_sequential_requests_for_one_user_yield_a_single_match(self) -> None:
        outcomes = []
        for partner in (self.bob, self.carol, self.dan):
            try:
                create_or_queue_match(self.alice.id, partner.id)
                outcomes.append("ok")
            except FailedPrecondition:
                outcomes.append("failed-precondition")

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count("failed-precondition"), 2)
        self.assertEqual(
            MatchParticipant.objects.filter(user=self.alice, is_active=True).count(),
            1,
        )

    def test_database_rejects_second_active_participation(self) -> None:
        create_or_queue_match(self.alice.id, self.bob.id)
        rogue = Match.objects.create(opened_by=self.alice)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                MatchParticipant.objects.create(match=rogue, user=self.alice, position=0)

    def test_constraint_violation_surfaces_as_failed_precondition(self) -> None:
        create_or_queue_match(self.alice.id, self.bob.id)

        with self.assertRaises(FailedPrecondition):
            # with the service check skipped only the unique index can refuse the write
            with patch("apps.matching.services.lifecycle._has_active_match", return_value=False):
                create_or_queue_match(self.alice.id, self.carol.id)
        self.assertEqual(Match.objects.count(), 1)

    def test_invalid_pairs(self) -> None:
        with self.assertRaises(InvalidArgument):
            create_or_queue_match(None, self.bob.id)
        with self.assertRaises(InvalidArgument):
            create_or_queue_match(self.alice.id, self.alice.id)
        with self.assertRaises(NotFoundError):
            create_or_queue_match(self.alice.id, 987654321)

    def test_get_active_match(self) -> None:
        self.assertIsNone(get_active_match(self.alice.id))
        match = create_or_queue_match(self.alice.id, self.bob.id)
        self.assertEqual(get_active_match(str(self.bob.id)).id, match.id)

    def test_close_records_caller_and_reason(self) -> None:
        match = create_or_queue_match(self.alice.id, self.bob.id)

        close_match(caller=self.bob, match_id=str(match.id), reason="לא מתאים")

        match.refresh_from_db()
        self.assertEqual(match.state, Match.State.CLOSED)
        self.assertEqual(match.closed_by_id, self.bob.id)
        self.assertEqual(match.close_reason, "לא מתאים")
        self.assertIsNone(get_active_match(self.alice.id))
        # both users are free again
        create_or_queue_match(self.alice.id, self.carol.id)

    def test_double_close_is_idempotent(self) -> None:
        match = create_or_queue_match(self.alice.id, self.bob.id)
        close_match(caller=self.alice, match_id=match.id)
        close_match(caller=self.alice, match_id=match.id)

        match.refresh_from_db()
        self.assertEqual(match.state, Match.State.CLOSED)

    def test_close_requires_participant(self) -> None:
        match = create_or_queue_match(self.alice.id, self.bob.id)
        with self.assertRaises(PermissionDeniedError):
            close_match(caller=self.carol, match_id=match.id)

    def test_close_unknown_match(self) -> None:
        with self.assertRaises(NotFoundError):
            close_match(caller=self.alice, match_id=123)
        with self.assertRaises(NotFoundError):
            close_match(caller=self.alice, match_id="nope")


class ConcurrentMatchCreationTests(TransactionTestCase):
    reset_sequences = True
    workers = 6

    def setUp(self) -> None:
        self.alice = User.objects.create_user(email="alice@example.com", password="pass1234", name="Alice")
        self.partners = [
            User.objects.create_user(email=f"partner{index}@example.com", password="pass1234", name=f"P{index}")
            for index in range(self.workers)
        ]

    def test_concurrent_requests_for_one_user_yield_a_single_match(self) -> None:
        barrier = threading.Barrier(self.workers)
        outcomes: list[str] = []
        lock = threading.Lock()

        def attempt(partner: User) -> None:
            try:
                barrier.wait(timeout=10)
                create_or_queue_match(self.alice.id, partner.id, 0.5)
                outcome = "ok"
            except FailedPrecondition:
                outcome = "failed-precondition"
            except Exception as exc:
                outcome = f"{type(exc).__name__}: {exc}"
            finally:
                connection.close()
            with lock:
                outcomes.append(outcome)

        with patch("apps.matching.signals.generate_conversation_starters.delay"):
            threads = [threading.Thread(target=attempt, args=(partner,)) for partner in self.partners]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(timeout=60)

        self.assertEqual(sorted(outcomes), ["failed-precondition"] * (self.workers - 1) + ["ok"])
        self.assertEqual(Match.objects.filter(state=Match.State.ACTIVE).count(), 1)
        self.assertEqual(MatchParticipant.objects.filter(user=self.alice, is_active=True).count(), 1)

    def test_broker_failure_does_not_fail_match_creation(self) -> None:
        with patch(
            "apps.matching.signals.generate_conversation_starters.delay",
            side_effect=ConnectionError("broker down"),
        ) as mocked_delay:
            with self.assertLogs("apps.matching.signals", level="ERROR") as logs:
                match = create_or_queue_match(self.alice.id, self.partners[0].id, 0.5)

        mocked_delay.assert_called_once_with(match.id)
        self.assertTrue(any("starters.enqueue_failed" in line for line in logs.output))
        self.assertEqual(Match.objects.get(pk=match.id).state, Match.State.ACTIVE)
