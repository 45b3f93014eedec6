# backend/navigation/admin.py
from django.contrib import admin, messages

from core.exceptions import CMSError

from .models import MenuItem
from .services import MUTABLE_FIELDS, get_menu_service


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """
    Saves and deletes go through MenuTreeService so slugs, cycle checks and
    the delete cascade behave exactly as in the API.
    """

    list_display = ("id", "title_en", "slug", "parent", "order", "is_active", "is_external_link")
    list_filter = ("is_active", "is_external_link")
    search_fields = ("title_en", "title_bn", "slug", "url")
    ordering = ("order", "id")
    fields = ("title_en", "title_bn", "parent", "is_external_link", "url", "order", "is_active", "slug")
    readonly_fields = ("slug",)

    def save_model(self, request, obj, form, change):
        data = {
            name: form.cleaned_data.get(name)
            for name in MUTABLE_FIELDS - {"parent_id"}
            if name in form.cleaned_data
        }
        parent = form.cleaned_data.get("parent")
        data["parent_id"] = parent.pk if parent else None

        service = get_menu_service()
        try:
            saved = service.update(obj.pk, data) if change else service.create(data)
        except CMSError as exc:
            self.message_user(request, str(exc.detail), level=messages.ERROR)
            return
        obj.pk = saved.pk
        obj.slug = saved.slug

    def delete_model(self, request, obj):
        try:
            get_menu_service().delete(obj.pk)
        except CMSError as exc:
            self.message_user(request, str(exc.detail), level=messages.ERROR)

    def delete_queryset(self, request, queryset):
        for obj in queryset:
            self.delete_model(request, obj)
