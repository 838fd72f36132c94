"""
System test fixtures — catalog service wired to an in-memory session and a
user directory whose counts the test controls.
"""
import pytest

from app.system.services.catalog_service import ConfigCatalogService
from app.system.services.user_directory import UserDirectory


class FakeUserDirectory(UserDirectory):
    """Counts keyed by (field, value); records every lookup."""

    def __init__(self):
        self.counts = {}
        self.calls = []

    def count_active_users_with_field_value(self, field, value):
        self.calls.append((field, value))
        return self.counts.get((field, value), 0)


@pytest.fixture
def user_directory():
    return FakeUserDirectory()


@pytest.fixture
def catalog_service(db_session, user_directory):
    return ConfigCatalogService(db_session, user_directory=user_directory)


@pytest.fixture
def seeded_service(catalog_service):
    catalog_service.ensure_defaults()
    return catalog_service
