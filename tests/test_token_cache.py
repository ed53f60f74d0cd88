"""
Tests for the redis token cache, backed by fakeredis.
"""
from datetime import timedelta

import fakeredis
import pytest

from models.token_cache import TokenCache


@pytest.fixture
def cache():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    return TokenCache(client)


class TestRefreshTokens:

    def test_set_get_delete(self, cache):
        cache.set_refresh_token("u1", "tok", timedelta(days=7))
        assert cache.get_refresh_token("u1") == "tok"
        assert cache.client.ttl("refresh_token:u1") == 7 * 24 * 3600

        cache.delete_refresh_token("u1")
        assert cache.get_refresh_token("u1") is None

    def test_missing_is_none(self, cache):
        assert cache.get_refresh_token("nobody") is None

    def test_set_replaces_previous(self, cache):
        cache.set_refresh_token("u1", "old", 60)
        cache.set_refresh_token("u1", "new", 60)
        assert cache.get_refresh_token("u1") == "new"

    def test_bytes_client_is_decoded(self):
        cache = TokenCache(fakeredis.FakeRedis())
        cache.client.flushall()
        cache.set_refresh_token("u1", "tok", 60)
        assert cache.get_refresh_token("u1") == "tok"


class TestBlacklist:

    def test_blacklist(self, cache):
        assert cache.is_blacklisted("abc") is False
        cache.blacklist_access_token("abc", timedelta(minutes=15))
        assert cache.is_blacklisted("abc") is True
        assert 0 < cache.client.ttl("blacklist:abc") <= 900

    def test_non_positive_ttl_still_stored(self, cache):
        cache.blacklist_access_token("abc", timedelta(0))
        assert cache.is_blacklisted("abc") is True

    def test_ping(self, cache):
        assert cache.ping() is True
