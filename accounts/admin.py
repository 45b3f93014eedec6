# backend/accounts/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm

from .models import User


class CMSUserCreationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = User
        fields = ("email", "username", "access_level")


class CMSUserChangeForm(UserChangeForm):
    class Meta(UserChangeForm.Meta):
        model = User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Custom admin for our custom User model.
    Adds access_level (editor/admin/superadmin) to the standard user admin.
    """

    add_form = CMSUserCreationForm
    form = CMSUserChangeForm

    fieldsets = DjangoUserAdmin.fieldsets + (
        ("CMS Access", {"fields": ("access_level",)}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "password1", "password2", "access_level"),
        }),
    )

    list_display = ("email", "username", "access_level", "is_staff", "is_superuser")
    list_filter = ("access_level", "is_staff", "is_superuser")
    ordering = ("email",)
