from __future__ import annotations

from django.contrib import admin

from .models import ConversationStarter, Match, MatchParticipant


class MatchParticipantInline(admin.TabularInline):
    model = MatchParticipant
    extra = 0
    readonly_fields = ("user", "position", "is_active")


class ConversationStarterInline(admin.TabularInline):
    model = ConversationStarter
    extra = 0


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("id", "state", "opened_by", "score", "last_message_at", "created_at")
    list_filter = ("state",)
    readonly_fields = ("created_at", "updated_at", "last_message_at")
    inlines = [MatchParticipantInline, ConversationStarterInline]
