from __future__ import annotations

from django.contrib import admin

from apps.users.models import Device, Photo, User


class PhotoInline(admin.TabularInline):
    model = Photo
    extra = 0


class DeviceInline(admin.TabularInline):
    model = Device
    extra = 0
    readonly_fields = ("push_token", "platform", "last_seen")


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "name", "plan", "is_active", "is_suspended", "created_at")
    list_filter = ("plan", "is_active", "is_suspended", "gender")
    search_fields = ("email", "name", "city")
    readonly_fields = ("created_at", "updated_at", "embedding")
    exclude = ("password",)
    inlines = [PhotoInline, DeviceInline]
