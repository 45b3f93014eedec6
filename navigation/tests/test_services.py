import pytest

from core.exceptions import (
    CascadeInconsistencyError,
    CycleError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from navigation.repositories import InMemoryMenuRepository
from navigation.services import MenuTreeService


class FlakyRepository(InMemoryMenuRepository):
    """Fails the save after `fail_after` successful ones."""

    fail_after = None
    error = RuntimeError("store went away")

    def save(self, node):
        if self.fail_after is not None:
            if self.fail_after == 0:
                raise self.error
            self.fail_after -= 1
        return super().save(node)


def make(service, title, parent=None, **extra):
    data = {"title_en": title, "title_bn": f"{title} bn", "parent_id": parent}
    data.update(extra)
    return service.create(data)


@pytest.fixture
def repo():
    return InMemoryMenuRepository()


@pytest.fixture
def service(repo):
    return MenuTreeService(repo)


@pytest.fixture
def about_tree(service):
    """About > Team > (Leads, Interns), plus a separate Contact root."""
    about = make(service, "About", order=0)
    team = make(service, "Team", about.id)
    leads = make(service, "Leads", team.id, order=0)
    interns = make(service, "Interns", team.id, order=1)
    contact = make(service, "Contact", order=1)
    return {"about": about, "team": team, "leads": leads, "interns": interns, "contact": contact}


def slugs(repo):
    return {node.title_en: node.slug for node in repo.all()}


def parents(repo):
    return {node.title_en: node.parent_id for node in repo.all()}


def state(repo):
    return {node.id: (node.slug, node.parent_id) for node in repo.all()}


class TestCreate:
    def test_slugs_follow_the_parent_chain(self, repo, about_tree):
        assert slugs(repo) == {
            "About": "/about",
            "Team": "/about/team",
            "Leads": "/about/team/leads",
            "Interns": "/about/team/interns",
            "Contact": "/contact",
        }

    def test_titles_are_trimmed(self, service):
        item = make(service, "  Services  ")
        assert item.title_en == "Services"
        assert item.slug == "/services"

    def test_external_link_has_no_slug(self, service):
        item = make(service, "Blog", url="https://blog.example.com", is_external_link=True)
        assert item.slug is None
        child = make(service, "Archive", item.id)
        assert child.slug == "/archive"

    def test_blank_title_rejected(self, service):
        with pytest.raises(ValidationError) as exc:
            service.create({"title_en": "  ", "title_bn": "x"})
        assert exc.value.field == "title_en"

    def test_invalid_url_rejected(self, service):
        with pytest.raises(ValidationError) as exc:
            make(service, "Broken", url="not a url")
        assert exc.value.field == "url"

    def test_order_out_of_range_rejected(self, service):
        with pytest.raises(ValidationError) as exc:
            make(service, "Late", order=1_000_000)
        assert exc.value.field == "order"

    def test_missing_parent_rejected(self, service, repo):
        with pytest.raises(ValidationError) as exc:
            make(service, "Orphan", 999)
        assert exc.value.field == "parent_id"
        assert repo.all() == []

    def test_duplicate_title_rejected_case_insensitively(self, service):
        make(service, "About")
        with pytest.raises(DuplicateError) as exc:
            make(service, "about")
        assert exc.value.status_code == 409
        assert exc.value.field == "title_en"

    def test_inactive_title_still_holds_its_slug(self, service):
        make(service, "About", is_active=False)
        with pytest.raises(DuplicateError) as exc:
            make(service, "About", parent=None)
        assert exc.value.field == "slug"

    def test_duplicate_slug_rejected_when_titles_may_repeat(self, repo):
        service = MenuTreeService(repo, unique_titles=False)
        make(service, "About")
        with pytest.raises(DuplicateError) as exc:
            make(service, "About!")
        assert exc.value.field == "slug"

    def test_same_title_under_different_parents(self, repo):
        service = MenuTreeService(repo, unique_titles=False)
        first = make(service, "First")
        second = make(service, "Second")
        assert make(service, "Team", first.id).slug == "/first/team"
        assert make(service, "Team", second.id).slug == "/second/team"


class TestUpdate:
    def test_rename_rewrites_subtree_slugs(self, service, repo, about_tree):
        service.update(about_tree["about"].id, {"title_en": "Company"})
        assert slugs(repo) == {
            "Company": "/company",
            "Team": "/company/team",
            "Leads": "/company/team/leads",
            "Interns": "/company/team/interns",
            "Contact": "/contact",
        }

    def test_move_rewrites_subtree_slugs(self, service, repo, about_tree):
        service.update(about_tree["team"].id, {"parent_id": about_tree["contact"].id})
        assert repo.get(about_tree["team"].id).parent_id == about_tree["contact"].id
        assert slugs(repo)["Leads"] == "/contact/team/leads"

    def test_move_to_root(self, service, repo, about_tree):
        service.update(about_tree["team"].id, {"parent_id": None})
        assert slugs(repo)["Team"] == "/team"
        assert slugs(repo)["Interns"] == "/team/interns"

    def test_bengali_title_change_keeps_slug(self, service, repo, about_tree):
        service.update(about_tree["about"].id, {"title_bn": "আমাদের সম্পর্কে"})
        assert repo.get(about_tree["about"].id).slug == "/about"

    def test_cycle_through_descendant_rejected(self, service, repo, about_tree):
        before = state(repo)
        with pytest.raises(CycleError):
            service.update(about_tree["about"].id, {"parent_id": about_tree["leads"].id})
        assert state(repo) == before

    def test_self_parent_rejected(self, service, about_tree):
        with pytest.raises(CycleError) as exc:
            service.update(about_tree["team"].id, {"parent_id": about_tree["team"].id})
        assert exc.value.status_code == 400

    def test_unknown_field_rejected(self, service, about_tree):
        with pytest.raises(ValidationError) as exc:
            service.update(about_tree["team"].id, {"slug": "/hacked"})
        assert exc.value.field == "slug"

    def test_missing_node(self, service):
        with pytest.raises(NotFoundError):
            service.update(42, {"title_en": "Nope"})

    def test_becoming_external_clears_slug(self, service, repo, about_tree):
        service.update(
            about_tree["contact"].id,
            {"is_external_link": True, "url": "https://example.com/contact"},
        )
        assert repo.get(about_tree["contact"].id).slug is None

    def test_set_active(self, service, repo, about_tree):
        service.set_active(about_tree["contact"].id, False)
        assert repo.get(about_tree["contact"].id).is_active is False


class TestReorder:
    def test_positions_become_order(self, service, repo, about_tree):
        ids = [about_tree["contact"].id, about_tree["about"].id]
        service.reorder(ids)
        assert [node.id for node in repo.roots()] == ids
        assert repo.get(about_tree["contact"].id).order == 0
        assert repo.get(about_tree["about"].id).order == 1

    def test_three_siblings_follow_the_given_sequence(self, service, repo, about_tree):
        about = about_tree["about"].id
        first = make(service, "History", about).id
        second = make(service, "Careers", about).id
        team = about_tree["team"].id

        service.reorder([second, team, first])

        assert [child.id for child in repo.children(about)] == [second, team, first]

    def test_unknown_id_changes_nothing(self, service, repo, about_tree):
        with pytest.raises(NotFoundError):
            service.reorder([about_tree["contact"].id, 999])
        assert repo.get(about_tree["contact"].id).order == 1

    @pytest.mark.parametrize("ids", [[], [1, 1]])
    def test_bad_id_lists(self, service, about_tree, ids):
        with pytest.raises(ValidationError):
            service.reorder(ids)


class TestDelete:
    def test_children_move_to_grandparent(self, service, repo, about_tree):
        children = service.delete(about_tree["team"].id)

        assert {child.title_en for child in children} == {"Leads", "Interns"}
        assert repo.get(about_tree["team"].id) is None
        assert parents(repo)["Leads"] == about_tree["about"].id
        assert parents(repo)["Interns"] == about_tree["about"].id
        assert slugs(repo) == {
            "About": "/about",
            "Leads": "/about/leads",
            "Interns": "/about/interns",
            "Contact": "/contact",
        }

    def test_root_delete_strips_prefix(self, service, repo, about_tree):
        service.delete(about_tree["about"].id)

        assert parents(repo)["Team"] is None
        assert slugs(repo) == {
            "Team": "/team",
            "Leads": "/team/leads",
            "Interns": "/team/interns",
            "Contact": "/contact",
        }

    def test_leaf_delete(self, service, repo, about_tree):
        assert service.delete(about_tree["leads"].id) == []
        assert "Leads" not in slugs(repo)

    def test_missing_node(self, service):
        with pytest.raises(NotFoundError):
            service.delete(7)

    def test_collision_aborts_before_writing(self, service, repo, about_tree):
        # /about/team/leads would become /about/leads; occupy it first
        blocker = make(service, "Leads", about_tree["about"].id, is_active=False)
        assert blocker.slug is not None
        before = state(repo)
        with pytest.raises(DuplicateError):
            service.delete(about_tree["team"].id)
        assert state(repo) == before

    def test_relink_is_idempotent(self, service, repo, about_tree):
        team = about_tree["team"]
        about = about_tree["about"]
        service.delete(team.id)
        snapshot = state(repo)

        assert service.relink_children(team.id, about.id, "/about/team", "/about") == 0
        assert state(repo) == snapshot

    def test_child_takes_over_the_slug_of_its_same_titled_parent(self, service, repo):
        # an inactive root does not block the title, only the slug
        outer = make(service, "About", is_active=False)
        inner = make(service, "About", outer.id)
        assert inner.slug == "/about/about"

        service.delete(outer.id)

        assert repo.get(outer.id) is None
        assert repo.get(inner.id).parent_id is None
        assert repo.get(inner.id).slug == "/about"

    def test_middle_node_with_same_titled_child(self, repo):
        service = MenuTreeService(repo, unique_titles=False)
        home = make(service, "Home")
        news = make(service, "News", home.id)
        inner = make(service, "News", news.id)
        assert inner.slug == "/home/news/news"

        service.delete(news.id)

        assert state(repo) == {home.id: ("/home", None), inner.id: ("/home/news", home.id)}

    def test_slugs_are_freed_before_they_are_taken(self, repo):
        service = MenuTreeService(repo, unique_titles=False)
        about = make(service, "About")
        team = make(service, "Team", about.id)
        inner = make(service, "Team", team.id, order=0)
        nested = make(service, "X", inner.id)
        leaf = make(service, "X", team.id, order=1)

        service.delete(team.id)

        assert repo.get(inner.id).slug == "/about/team"
        assert repo.get(nested.id).slug == "/about/team/x"
        assert repo.get(leaf.id).slug == "/about/x"
        assert repo.get(inner.id).parent_id == about.id
        assert repo.get(leaf.id).parent_id == about.id


class TestInMemoryRepository:
    def test_save_rejects_a_taken_slug(self, repo):
        first = repo.save(repo.new(title_en="About", title_bn="About bn", slug="/about"))
        clash = repo.new(title_en="Other", title_bn="Other bn", slug="/about")

        with pytest.raises(DuplicateError) as exc:
            repo.save(clash)
        assert exc.value.field == "slug"
        assert clash.id is None
        assert [node.id for node in repo.all()] == [first.id]

    def test_resaving_a_node_keeps_its_own_slug(self, repo):
        node = repo.save(repo.new(title_en="About", title_bn="About bn", slug="/about"))
        node.title_bn = "Changed"
        repo.save(node)
        assert repo.get(node.id).title_bn == "Changed"

    def test_external_links_may_share_a_null_slug(self, repo):
        repo.save(repo.new(title_en="A", title_bn="A", slug=None, url="https://a.example"))
        repo.save(repo.new(title_en="B", title_bn="B", slug=None, url="https://b.example"))
        assert len(repo.all()) == 2


class TestCascadeFailure:
    def test_transactional_store_rolls_back(self):
        repo = FlakyRepository()
        service = MenuTreeService(repo)
        about = make(service, "About")
        team = make(service, "Team", about.id)
        make(service, "Leads", team.id, order=0)
        make(service, "Interns", team.id, order=1)
        before = state(repo)

        repo.fail_after = 1
        with pytest.raises(RuntimeError):
            service.delete(team.id)
        assert state(repo) == before

    def test_non_transactional_store_schedules_repair(self, caplog):
        repo = FlakyRepository(transactional=False)
        calls = []
        service = MenuTreeService(repo, on_inconsistency=lambda **kw: calls.append(kw))
        about = make(service, "About")
        team = make(service, "Team", about.id)
        make(service, "Leads", team.id, order=0)
        make(service, "Interns", team.id, order=1)

        # the first save releases Team's slug, the second moves Leads
        repo.fail_after = 2
        with pytest.raises(CascadeInconsistencyError):
            service.delete(team.id)

        assert calls == [
            {
                "node_id": team.id,
                "new_parent_id": about.id,
                "old_prefix": "/about/team",
                "new_prefix": "/about",
            }
        ]
        record = next(r for r in caplog.records if r.levelname == "ERROR")
        assert record.menu_id == team.id
        assert len(record.child_ids) == 2
        # half done: one child moved, the other still under Team
        assert parents(repo)["Leads"] == about.id
        assert parents(repo)["Interns"] == team.id

        repo.fail_after = None
        assert service.repair_delete(**calls[0]) == 1
        assert repo.get(team.id) is None
        assert slugs(repo) == {
            "About": "/about",
            "Leads": "/about/leads",
            "Interns": "/about/interns",
        }
        # a second run finds nothing left to do
        assert service.repair_delete(**calls[0]) == 0

    def test_store_error_after_partial_writes_schedules_repair(self, caplog):
        repo = FlakyRepository(transactional=False)
        calls = []
        service = MenuTreeService(repo, on_inconsistency=lambda **kw: calls.append(kw))
        about = make(service, "About")
        team = make(service, "Team", about.id, order=0)
        jobs = make(service, "Jobs", about.id, order=1)

        # About's slug is released and Team moved before Jobs hits the clash
        repo.error = DuplicateError(field="slug")
        repo.fail_after = 2
        with pytest.raises(CascadeInconsistencyError) as exc:
            service.delete(about.id)

        assert isinstance(exc.value.__cause__, DuplicateError)
        assert calls == [
            {"node_id": about.id, "new_parent_id": None, "old_prefix": "/about", "new_prefix": ""}
        ]
        assert any(getattr(r, "menu_id", None) == about.id for r in caplog.records)
        assert state(repo)[team.id] == ("/team", None)
        assert state(repo)[jobs.id] == ("/about/jobs", about.id)

        repo.fail_after = None
        assert service.repair_delete(**calls[0]) == 1
        assert state(repo) == {team.id: ("/team", None), jobs.id: ("/jobs", None)}

    def test_store_error_before_any_write_propagates(self):
        repo = FlakyRepository(transactional=False)
        calls = []
        service = MenuTreeService(repo, on_inconsistency=lambda **kw: calls.append(kw))
        about = make(service, "About")
        make(service, "Team", about.id)
        before = state(repo)

        repo.error = DuplicateError(field="slug")
        repo.fail_after = 0
        with pytest.raises(DuplicateError):
            service.delete(about.id)

        assert calls == []
        assert state(repo) == before
