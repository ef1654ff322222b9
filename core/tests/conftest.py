from io import StringIO

import pytest
from django.core.management import call_command

from core.stores import DatabaseStore, MemoryStore


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def database_store(db):
    call_command('populate_data', stdout=StringIO())
    return DatabaseStore()


@pytest.fixture(params=['memory', 'database'])
def store(request):
    """Each test runs once per backend, both seeded with the same data."""
    if request.param == 'memory':
        return request.getfixturevalue('memory_store')
    return request.getfixturevalue('database_store')
