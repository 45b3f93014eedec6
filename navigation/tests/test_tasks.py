import pytest

from navigation.models import MenuItem
from navigation.tasks import repair_menu_delete

from .factories import MenuItemFactory

pytestmark = pytest.mark.django_db


def test_repair_finishes_a_half_done_delete():
    about = MenuItemFactory(title_en="About", slug="/about")
    team = MenuItemFactory(title_en="Team", slug="/about/team", parent=about)
    # Leads was already moved up before the failure, Interns was not
    leads = MenuItemFactory(title_en="Leads", slug="/about/leads", parent=about)
    interns = MenuItemFactory(title_en="Interns", slug="/about/team/interns", parent=team)
    kwargs = {
        "node_id": team.id,
        "new_parent_id": about.id,
        "old_prefix": "/about/team",
        "new_prefix": "/about",
    }

    result = repair_menu_delete.apply(kwargs=kwargs)

    assert result.get() == 1
    assert not MenuItem.objects.filter(pk=team.id).exists()
    interns.refresh_from_db()
    leads.refresh_from_db()
    assert (interns.parent_id, interns.slug) == (about.id, "/about/interns")
    assert (leads.parent_id, leads.slug) == (about.id, "/about/leads")

    assert repair_menu_delete.apply(kwargs=kwargs).get() == 0
