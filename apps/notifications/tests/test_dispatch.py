from __future__ import annotations

from unittest.mock import patch

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.matching.services.lifecycle import create_or_queue_match
from apps.messaging.models import Message
from apps.notifications.models import Notification
from apps.notifications.push import PushError, PushResult
from apps.notifications.services import dispatch_notification, message_preview, new_message_payload
from apps.notifications.tasks import notify_match_message
from apps.users.models import Device, User


class DispatchTests(TestCase):
    def setUp(self) -> None:
        self.alice = User.objects.create_user(email="alice@example.com", password="pass1234", name="Alice")
        self.bob = User.objects.create_user(email="bob@example.com", password="pass1234", name="Bob")
        self.match = create_or_queue_match(self.alice.id, self.bob.id)
        self.message = Message.objects.create(match=self.match, sender=self.alice, text="א" * 120)

    def test_preview_is_first_eighty_characters(self) -> None:
        self.assertEqual(message_preview("א" * 120), "א" * 80)
        self.assertEqual(message_preview(""), "הודעה חדשה")

    def test_user_without_devices_gets_no_push(self) -> None:
        payload = new_message_payload(match_id=self.match.id, message_id=self.message.id, text="hi")
        with patch("apps.notifications.services.send_multicast") as mocked_push:
            delivered = dispatch_notification(self.bob.id, payload)
        self.assertEqual(delivered, 0)
        mocked_push.assert_not_called()
        self.assertEqual(Notification.objects.filter(user=self.bob).count(), 1)

    def test_all_devices_receive_one_multicast(self) -> None:
        Device.objects.create(user=self.bob, push_token="phone")
        Device.objects.create(user=self.bob, push_token="tablet")
        payload = new_message_payload(match_id=self.match.id, message_id=self.message.id, text="hi")
        with patch("apps.notifications.services.send_multicast", return_value=PushResult(2)) as mocked_push:
            delivered = dispatch_notification(self.bob.id, payload)
        self.assertEqual(delivered, 2)
        tokens = mocked_push.call_args.args[0]
        self.assertEqual(sorted(tokens), ["phone", "tablet"])

    def test_gateway_failure_is_swallowed(self) -> None:
        Device.objects.create(user=self.bob, push_token="phone")
        with patch("apps.notifications.services.send_multicast", side_effect=PushError("gateway down")):
            with self.assertLogs("apps.notifications.services", level="WARNING"):
                delivered = notify_match_message(self.bob.id, self.match.id, self.message.id)
        self.assertEqual(delivered, 0)

    def test_task_builds_message_payload(self) -> None:
        with patch("apps.notifications.tasks.dispatch_notification", return_value=1) as mocked_dispatch:
            notify_match_message(self.bob.id, self.match.id, self.message.id)
        recipient_id, payload = mocked_dispatch.call_args.args
        self.assertEqual(recipient_id, self.bob.id)
        self.assertEqual(payload.title, "הודעה חדשה")
        self.assertEqual(payload.body, "א" * 80)
        self.assertEqual(payload.data, {"matchId": str(self.match.id), "messageId": str(self.message.id)})

    def test_unexpected_errors_are_logged_not_raised(self) -> None:
        with patch("apps.notifications.tasks.dispatch_notification", side_effect=RuntimeError("boom")):
            with self.assertLogs("apps.notifications.tasks", level="ERROR"):
                self.assertEqual(notify_match_message(self.bob.id, self.match.id, self.message.id), 0)

    def test_missing_message_is_ignored(self) -> None:
        self.assertEqual(notify_match_message(self.bob.id, self.match.id, 404), 0)


class NotificationApiTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="n@example.com", password="pass1234", name="N")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_list_and_mark_all_read(self) -> None:
        Notification.objects.create(user=self.user, type="message:new", payload={"title": "הודעה חדשה"})
        listed = self.client.get("/api/v1/notifications/")
        self.assertEqual(listed.status_code, status.HTTP_200_OK)
        self.assertEqual(len(listed.data["results"]), 1)
        self.assertFalse(listed.data["results"][0]["isRead"])

        marked = self.client.post("/api/v1/notifications/mark-all-read/")
        self.assertEqual(marked.data, {"updated": 1})
        self.assertTrue(Notification.objects.get(user=self.user).is_read)

    def test_send_push_requires_fields(self) -> None:
        response = self.client.post("/api/v1/push/send/", {"token": "t", "title": "hi"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid-argument")

    def test_send_push_to_single_token(self) -> None:
        with patch("apps.notifications.views.send_to_token", return_value=PushResult(1)) as mocked_send:
            response = self.client.post(
                "/api/v1/push/send/",
                {"token": "t", "title": "hi", "body": "there", "data": {"count": 3}},
                format="json",
            )
        self.assertEqual(response.data, {"ok": True})
        mocked_send.assert_called_once_with("t", "hi", "there", {"count": 3})

    def test_send_push_gateway_failure(self) -> None:
        with patch("apps.notifications.views.send_to_token", side_effect=PushError("down")):
            response = self.client.post(
                "/api/v1/push/send/", {"token": "t", "title": "hi", "body": "there"}, format="json"
            )
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["error"], "unavailable")
