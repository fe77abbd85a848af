import httpx
import pytest

from app.core.config import settings
from app.main import app
from app.schemas.nft import OwnedNFT
from app.services.ownership import OwnershipLookupError, build_dispatcher, get_ownership_dispatcher

WALLET = "0x" + "Ab" * 20
CONTRACT = "0x" + "cd" * 20


@pytest.fixture
def nft():
    return OwnedNFT(
        contract_address=CONTRACT,
        token_id="1",
        name="Cool Cat #1",
        image_url="https://example.com/1.png",
    )


@pytest.fixture
def use_dispatcher():
    def _use(dispatcher):
        app.dependency_overrides[get_ownership_dispatcher] = lambda: dispatcher
        return dispatcher

    return _use


async def test_owned_nfts_requires_wallet(client):
    resp = await client.get("/api/v1/nfts")

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Wallet address is required"}


async def test_owned_nfts_rejects_invalid_wallet(client):
    resp = await client.get("/api/v1/nfts", params={"wallet": "0x123"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid wallet address"


async def test_owned_nfts(client, use_dispatcher, make_dispatcher, static_adapter, nft):
    use_dispatcher(make_dispatcher(static_adapter(421614, "Arbitrum Sepolia", nfts=[nft])))

    resp = await client.get("/api/v1/nfts", params={"wallet": WALLET, "pageKey": "abc"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["chainId"] == 421614
    assert data["network"] == "Arbitrum Sepolia"
    assert data["source"] == "static"
    assert data["degraded"] is False
    assert data["totalCount"] == 1
    assert data["pageKey"] == "abc"
    assert data["ownedNfts"][0]["contractAddress"] == CONTRACT
    assert data["ownedNfts"][0]["tokenId"] == "1"
    assert data["ownedNfts"][0]["imageUrl"] == "https://example.com/1.png"


async def test_owned_nfts_unknown_chain_uses_default(client, use_dispatcher, make_dispatcher, static_adapter):
    default = static_adapter(421614, "Arbitrum Sepolia")
    monad = static_adapter(10143, "Monad Testnet")
    use_dispatcher(make_dispatcher(default, monad))

    resp = await client.get("/api/v1/nfts", params={"wallet": WALLET, "chainId": 12345})

    assert resp.json()["data"]["chainId"] == 421614
    assert default.calls == 1
    assert monad.calls == 0


async def test_owned_nfts_degraded_on_indexer_failure(client, use_dispatcher, make_dispatcher, static_adapter):
    use_dispatcher(
        make_dispatcher(
            static_adapter(421614, "Arbitrum Sepolia", error=OwnershipLookupError("timeout"))
        )
    )

    resp = await client.get("/api/v1/nfts", params={"wallet": WALLET})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["degraded"] is True
    assert data["source"] == "unavailable"
    assert data["ownedNfts"] == []


async def test_multichain_defaults_and_keeps_failed_chains_degraded(client, use_dispatcher, make_dispatcher, static_adapter, nft):
    use_dispatcher(
        make_dispatcher(
            static_adapter(421614, "Arbitrum Sepolia", nfts=[nft]),
            static_adapter(10143, "Monad Testnet", error=RuntimeError("boom")),
            static_adapter(1, "Ethereum"),
        )
    )

    resp = await client.get("/api/v1/nfts/multichain", params={"wallet": WALLET})

    assert resp.status_code == 200
    pages = resp.json()["data"]
    assert [p["chainId"] for p in pages] == [421614, 10143]
    assert [p["degraded"] for p in pages] == [False, True]


async def test_owned_nfts_unexpected_adapter_error_is_degraded(client, use_dispatcher, make_dispatcher, static_adapter):
    use_dispatcher(
        make_dispatcher(static_adapter(421614, "Arbitrum Sepolia", error=RuntimeError("boom")))
    )

    resp = await client.get("/api/v1/nfts", params={"wallet": WALLET})

    assert resp.status_code == 200
    assert resp.json()["data"]["degraded"] is True


async def test_owned_nfts_malformed_alchemy_payload_is_degraded(client, use_dispatcher, monkeypatch):
    monkeypatch.setattr(settings, "ALCHEMY_API_KEY", "KEY")
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"ownedNfts": [], "totalCount": "n/a"})
    )
    use_dispatcher(build_dispatcher(transport=transport))

    resp = await client.get("/api/v1/nfts", params={"wallet": WALLET, "chainId": 1})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["chainId"] == 1
    assert data["degraded"] is True
    assert data["source"] == "unavailable"


async def test_multichain_with_explicit_chain_ids(client, use_dispatcher, make_dispatcher, static_adapter):
    use_dispatcher(
        make_dispatcher(
            static_adapter(421614, "Arbitrum Sepolia"),
            static_adapter(10143, "Monad Testnet"),
            static_adapter(1, "Ethereum"),
        )
    )

    resp = await client.get(
        "/api/v1/nfts/multichain", params={"wallet": WALLET, "chainIds": "1,10143"}
    )

    assert sorted(p["chainId"] for p in resp.json()["data"]) == [1, 10143]


async def test_multichain_rejects_bad_chain_ids(client):
    resp = await client.get(
        "/api/v1/nfts/multichain", params={"wallet": WALLET, "chainIds": "1,abc"}
    )

    assert resp.status_code == 400


async def test_networks(client):
    resp = await client.get("/api/v1/nfts/networks")

    assert resp.status_code == 200
    data = resp.json()
    assert data["defaultChainId"] == 421614
    chains = {n["chainId"]: n for n in data["networks"]}
    assert chains[10143]["name"] == "Monad Testnet"
    assert chains[10143]["service"] == "Envio"
    assert chains[421614]["service"] == "Alchemy"


async def test_nft_metadata(client, use_dispatcher, make_dispatcher, static_adapter, nft):
    use_dispatcher(make_dispatcher(static_adapter(421614, "Arbitrum Sepolia", nfts=[nft])))

    found = await client.get(
        "/api/v1/nfts/metadata", params={"contract": CONTRACT.upper().replace("0X", "0x"), "tokenId": "1"}
    )
    assert found.status_code == 200
    assert found.json()["nft"]["name"] == "Cool Cat #1"

    missing = await client.get("/api/v1/nfts/metadata", params={"contract": CONTRACT, "tokenId": "2"})
    assert missing.status_code == 404

    invalid = await client.get("/api/v1/nfts/metadata", params={"contract": "0x1", "tokenId": "1"})
    assert invalid.status_code == 400
