import pytest


@pytest.fixture(autouse=True)
def _fast_hashing_and_clean_cache(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    from django.core.cache import cache
    # login throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()
