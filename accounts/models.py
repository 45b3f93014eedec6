# backend/accounts/models.py
from django.contrib.auth.models import AbstractUser, UserManager
from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class AccessLevel(models.TextChoices):
    EDITOR = "editor", "Editor"
    ADMIN = "admin", "Administrator"
    SUPERADMIN = "superadmin", "Super Administrator"


ACCESS_LEVEL_ORDER = [
    AccessLevel.EDITOR,
    AccessLevel.ADMIN,
    AccessLevel.SUPERADMIN,
]


def has_min_access(user_access: str | None, required: str | None) -> bool:
    """
    If required is None => public.
    Else check if user_access rank >= required rank.
    Anonymous users have access_level = None.
    """
    if not required:
        return True

    if not user_access:
        return False

    try:
        user_idx = ACCESS_LEVEL_ORDER.index(user_access)
        req_idx = ACCESS_LEVEL_ORDER.index(required)
    except ValueError:
        return False

    return user_idx >= req_idx


class EmailUserManager(UserManager):
    """
    Use email as the login identifier while keeping a username for display.
    """

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email address must be set")

        email = self.normalize_email(email)
        username = extra_fields.pop("username", "") or email.split("@")[0]

        user = self.model(email=email, username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("is_active", True)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("access_level", AccessLevel.SUPERADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username_validator = RegexValidator(
        regex=r"^[A-Za-z0-9_-]+$",
        message="Username can only contain letters, numbers, underscores, or hyphens.",
    )

    username = models.CharField(
        _("username"),
        max_length=150,
        blank=False,
        validators=[username_validator],
    )
    email = models.EmailField(_("email address"), unique=True)
    access_level = models.CharField(
        max_length=32,
        choices=AccessLevel.choices,
        default=AccessLevel.EDITOR,
    )

    EMAIL_FIELD = "email"
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    objects = EmailUserManager()

    def __str__(self) -> str:
        return self.email or self.username or f"User {self.pk}"
