import fnmatch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.scripts import clear_cache
from app.services.cache import DEFAULT_FLUSH_PATTERNS, flush_namespaces


class FakeRedis:
    """Just enough of redis.asyncio.Redis for SCAN + DEL."""

    def __init__(self, keys=(), fail=False):
        self.store = {k: "cached" for k in keys}
        self.delete_calls: list[tuple[str, ...]] = []
        self.closed = False
        self.fail = fail

    async def scan_iter(self, match=None):
        if self.fail:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def delete(self, *keys):
        self.delete_calls.append(keys)
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_flush_with_no_matching_keys_is_a_noop():
    r = FakeRedis(keys=["users:1", "categories:all"])

    assert await flush_namespaces(r) == 0
    assert r.delete_calls == []
    assert set(r.store) == {"users:1", "categories:all"}


@pytest.mark.asyncio
async def test_flush_deletes_exactly_the_matching_keys_in_one_batch():
    matching = [
        'spaces:search:{"city":"Campinas"}',
        "spaces:search:{}",
        "space:spc_1",
        "space:spc_2",
    ]
    r = FakeRedis(keys=matching + ["spaces:user:usr_1", "users:1"])

    assert await flush_namespaces(r, DEFAULT_FLUSH_PATTERNS) == len(matching)
    assert len(r.delete_calls) == 1
    assert set(r.delete_calls[0]) == set(matching)
    assert set(r.store) == {"spaces:user:usr_1", "users:1"}


@pytest.mark.asyncio
async def test_flush_counts_keys_matched_by_several_patterns_once():
    r = FakeRedis(keys=["space:spc_1"])

    assert await flush_namespaces(r, ["space:*", "space:spc_*"]) == 1
    assert r.delete_calls == [("space:spc_1",)]


@pytest.mark.asyncio
async def test_flush_propagates_connection_errors():
    with pytest.raises(RedisConnectionError):
        await flush_namespaces(FakeRedis(fail=True))


@pytest.mark.asyncio
async def test_clear_cache_run_always_closes_the_client(monkeypatch):
    ok = FakeRedis(keys=["space:spc_1"])
    monkeypatch.setattr(clear_cache, "build_redis", lambda url: ok)
    assert await clear_cache.run(patterns=DEFAULT_FLUSH_PATTERNS) == 1
    assert ok.closed

    broken = FakeRedis(fail=True)
    monkeypatch.setattr(clear_cache, "build_redis", lambda url: broken)
    with pytest.raises(RedisConnectionError):
        await clear_cache.run()
    assert broken.closed


@pytest.mark.asyncio
async def test_clear_cache_run_with_explicit_empty_patterns_deletes_nothing(monkeypatch):
    r = FakeRedis(keys=["space:spc_1", "spaces:search:{}"])
    monkeypatch.setattr(clear_cache, "build_redis", lambda url: r)

    assert await clear_cache.run(patterns=[]) == 0
    assert r.delete_calls == []
    assert r.closed


@pytest.mark.asyncio
async def test_clear_cache_run_defaults_to_configured_patterns(monkeypatch):
    r = FakeRedis(keys=["space:spc_1", "users:1"])
    monkeypatch.setattr(clear_cache, "build_redis", lambda url: r)

    assert await clear_cache.run() == 1
    assert set(r.store) == {"users:1"}
