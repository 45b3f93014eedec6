import factory
from factory.django import DjangoModelFactory

from content.models import Layout, Page


class LayoutFactory(DjangoModelFactory):
    class Meta:
        model = Layout
        django_get_or_create = ["identifier"]

    name = factory.Sequence(lambda n: f"Layout {n}")
    identifier = factory.Sequence(lambda n: f"layout-{n}")
    content = "<main>{{ content }}</main>"


class PageFactory(DjangoModelFactory):
    class Meta:
        model = Page

    name = factory.Sequence(lambda n: f"Page {n}")
    title_en = factory.LazyAttribute(lambda o: o.name)
    title_bn = factory.LazyAttribute(lambda o: f"{o.name} (bn)")
    slug = factory.Sequence(lambda n: f"page-{n}")
    layout = factory.SubFactory(LayoutFactory)
    status = Page.Status.PUBLISHED
    is_active = True
    template_en = factory.LazyAttribute(lambda o: {"html": f"<h1>{o.name}</h1>"})
    template_bn = None
