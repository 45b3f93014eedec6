import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.tests.factories import AdminUserFactory, UserFactory


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def cms_admin(db):
    return AdminUserFactory()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_api(cms_admin):
    client = APIClient()
    client.force_authenticate(user=cms_admin)
    return client


@pytest.fixture
def editor_api(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client
