from __future__ import annotations

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .events import handle_message_created
from .models import Message


@receiver(post_save, sender=Message)
def handle_message_saved(sender, instance: Message, created: bool, **kwargs) -> None:
    if created:
        message_id = instance.pk
        transaction.on_commit(lambda: handle_message_created(message_id))
