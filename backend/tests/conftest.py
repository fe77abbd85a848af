from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import get_session
from app.main import app
from app.models import Base
from app.schemas.nft import OwnedNFT, OwnershipPage
from app.services.ownership import BaseOwnershipAdapter, NetworkRoute, OwnershipDispatcher
from app.services.rate_limiting import limiter


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    """No sleeps, no Redis, no real API keys, mock fallback off."""
    monkeypatch.setattr(settings, "HTTP_MAX_RETRIES", 1)
    monkeypatch.setattr(settings, "HTTP_RETRY_BASE_DELAY_SEC", 0.0)
    monkeypatch.setattr(settings, "GENERATION_MIN_DELAY_SEC", 0.0)
    monkeypatch.setattr(settings, "GENERATION_MAX_DELAY_SEC", 0.0)
    monkeypatch.setattr(settings, "NFT_CACHE_TTL_SEC", 0)
    monkeypatch.setattr(settings, "MOCK_FALLBACK_ENABLED", False)
    monkeypatch.setattr(settings, "ALCHEMY_API_KEY", "")
    monkeypatch.setattr(settings, "ENVIO_API_KEY", "")
    monkeypatch.setattr(settings, "PINATA_JWT", "")
    # Fresh rate limiter windows per test
    monkeypatch.setattr(limiter, "_limiters", {})


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class StaticAdapter(BaseOwnershipAdapter):
    """Adapter serving fixed NFTs, or raising a fixed error."""

    source_name = "static"

    def __init__(
        self,
        chain_id: int,
        network: str,
        nfts: Optional[list[OwnedNFT]] = None,
        error: Optional[Exception] = None,
    ):
        super().__init__(chain_id, network)
        self.nfts = nfts or []
        self.error = error
        self.calls = 0

    async def fetch_owned(self, owner: str, page_key: Optional[str] = None) -> OwnershipPage:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self._page(self.nfts, page_key=page_key)

    async def fetch_metadata(self, contract: str, token_id: str) -> Optional[OwnedNFT]:
        if self.error is not None:
            raise self.error
        for nft in self.nfts:
            if nft.contract_address == contract and nft.token_id == token_id:
                return nft
        return None


@pytest.fixture
def static_adapter():
    return StaticAdapter


@pytest.fixture
def make_dispatcher():
    def _make(*adapters: BaseOwnershipAdapter, default_chain_id: Optional[int] = None):
        routes = [NetworkRoute(a.chain_id, a.network, a) for a in adapters]
        return OwnershipDispatcher(routes, default_chain_id or adapters[0].chain_id)

    return _make
