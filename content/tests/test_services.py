import logging

import pytest

from content import services
from content.models import Page
from core.exceptions import DuplicateError, ValidationError
from navigation.tests.factories import MenuItemFactory

from .factories import LayoutFactory, PageFactory

pytestmark = pytest.mark.django_db


def page_data(**overrides):
    data = {"name": "About", "slug": "about", "layout_id": LayoutFactory().pk}
    data.update(overrides)
    return data


def test_save_page_records_authors(user):
    page = services.save_page(page_data(), user)

    assert page.created_by == user
    assert page.last_modified_by == user
    assert page.status == Page.Status.DRAFT


def test_unknown_layout(user):
    with pytest.raises(ValidationError) as exc:
        services.save_page(page_data(layout_id=999), user)
    assert exc.value.field == "layout"


@pytest.mark.parametrize("slug", ["about", "/about", "about/", "/about/"])
def test_slug_variants_clash(user, slug):
    PageFactory(slug="about")
    with pytest.raises(DuplicateError) as exc:
        services.save_page(page_data(slug=slug), user)
    assert exc.value.field == "slug"


def test_updating_a_page_keeps_its_own_slug(user):
    page = PageFactory(slug="about")
    updated = services.save_page({"slug": "about", "name": "About us"}, user, page=page)
    assert updated.name == "About us"


def test_strict_policy_requires_menu_slug(user, settings):
    settings.CMS_PAGE_SLUG_POLICY = "strict"
    with pytest.raises(ValidationError) as exc:
        services.save_page(page_data(), user)
    assert exc.value.field == "slug"

    MenuItemFactory(title_en="About", slug="/about")
    assert services.save_page(page_data(), user).slug == "about"


def test_advisory_policy_only_logs(user, settings, caplog):
    settings.CMS_PAGE_SLUG_POLICY = "advisory"
    with caplog.at_level(logging.WARNING, logger="content.services"):
        page = services.save_page(page_data(slug="orphan"), user)
    assert page.pk
    assert "does not match any menu item" in caplog.text


def test_set_status_and_template(user):
    page = PageFactory(status=Page.Status.DRAFT)
    services.set_status(page, Page.Status.PUBLISHED, user)
    services.set_template(page, "bn", {"html": "<p>বাংলা</p>"}, user)

    page.refresh_from_db()
    assert page.status == Page.Status.PUBLISHED
    assert page.template_bn == {"html": "<p>বাংলা</p>"}
    assert page.last_modified_by == user
