# backend/content/admin.py
from django.contrib import admin

from .models import Layout, Page


@admin.register(Layout)
class LayoutAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "identifier", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "identifier")

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ("id", "slug", "name", "layout", "status", "is_active", "updated_at")
    list_filter = ("status", "is_active", "layout")
    search_fields = ("slug", "name", "title_en", "title_bn")
    readonly_fields = ("created_by", "last_modified_by", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        obj.last_modified_by = request.user
        super().save_model(request, obj, form, change)
