import pytest

from app.core.config import settings
from app.schemas.nft import OwnedNFT, OwnershipPage
from app.services.cache import CacheService, _make_cache_key

OWNER = "0x" + "ab" * 20


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def scan_iter(self, match):
        prefix, _, rest = match.partition("*")
        for key in list(self.store):
            if key.startswith(prefix) and rest.strip("*") in key:
                yield key


@pytest.fixture
def fake_redis(monkeypatch):
    redis = FakeRedis()
    monkeypatch.setattr(CacheService, "_redis", redis)
    monkeypatch.setattr(settings, "NFT_CACHE_TTL_SEC", 30)
    return redis


def page(degraded=False):
    return OwnershipPage(
        owned_nfts=[OwnedNFT(contract_address="0x" + "cd" * 20, token_id="1", name="One")],
        total_count=1,
        chain_id=421614,
        network="Arbitrum Sepolia",
        source="alchemy",
        degraded=degraded,
    )


def test_cache_key_is_case_insensitive_on_owner():
    assert _make_cache_key(1, OWNER.upper(), None) == _make_cache_key(1, OWNER, None)
    assert _make_cache_key(1, OWNER, "p2") != _make_cache_key(1, OWNER, None)
    assert _make_cache_key(1, OWNER, None) != _make_cache_key(10143, OWNER, None)


async def test_disabled_cache_is_a_miss():
    # TTL is 0 in tests unless a test turns it on
    assert CacheService.enabled() is False
    assert await CacheService.get_ownership(421614, OWNER) is None


async def test_round_trip(fake_redis):
    await CacheService.set_ownership(OWNER, page())

    cached = await CacheService.get_ownership(421614, OWNER)

    assert cached == page()
    assert list(fake_redis.ttls.values()) == [30]


async def test_degraded_pages_are_not_cached(fake_redis):
    await CacheService.set_ownership(OWNER, page(degraded=True))

    assert fake_redis.store == {}


async def test_unreadable_entry_is_a_miss(fake_redis):
    fake_redis.store[_make_cache_key(421614, OWNER, None)] = "not json"

    assert await CacheService.get_ownership(421614, OWNER) is None


async def test_invalidate_owner(fake_redis):
    other = "0x" + "99" * 20
    await CacheService.set_ownership(OWNER, page())
    await CacheService.set_ownership(OWNER, page(), page_key="p2")
    await CacheService.set_ownership(other, page())

    deleted = await CacheService.invalidate_owner(OWNER)

    assert deleted == 2
    assert list(fake_redis.store) == [_make_cache_key(421614, other, None)]
