# backend/content/signals.py
"""Drop cached public pages when anything that feeds them changes."""
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from navigation.models import MenuItem

from .models import Layout, Page
from .resolver import invalidate


def _remember_old_slug(sender, instance, **kwargs):
    if instance.pk:
        instance._old_slug = (
            sender.objects.filter(pk=instance.pk).values_list("slug", flat=True).first()
        )


pre_save.connect(_remember_old_slug, sender=Page, dispatch_uid="page_old_slug")
pre_save.connect(_remember_old_slug, sender=MenuItem, dispatch_uid="menu_old_slug")


@receiver(post_save, sender=Page)
@receiver(post_delete, sender=Page)
@receiver(post_save, sender=MenuItem)
@receiver(post_delete, sender=MenuItem)
def invalidate_page_cache(sender, instance, **kwargs):
    invalidate(instance.slug, getattr(instance, "_old_slug", None))


@receiver(post_save, sender=Layout)
def invalidate_layout_pages(sender, instance, **kwargs):
    invalidate(*instance.pages.values_list("slug", flat=True))
