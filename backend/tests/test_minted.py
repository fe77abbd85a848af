CONTRACT = "0x" + "Ee" * 20
WALLET = "0x" + "Ab" * 20
OTHER_WALLET = "0x" + "44" * 20


def mint_body(token_id="1", **overrides):
    body = {
        "tokenId": token_id,
        "contractAddress": CONTRACT,
        "wallet": WALLET,
        "baseNFT": "0x" + "bb" * 20,
        "baseTokenId": "7",
        "name": "Cool Cat - Pixel Art Edition",
        "description": "A cat in pixels",
        "imageURL": "https://gateway.pinata.cloud/ipfs/QmImage",
        "metadataURL": "https://gateway.pinata.cloud/ipfs/QmMeta",
        "transactionHash": "0x" + "12" * 32,
        "blockNumber": 123456,
    }
    body.update(overrides)
    return body


async def test_record_mint(client):
    resp = await client.post("/api/v1/nfts/minted", json=mint_body())

    assert resp.status_code == 200
    minted = resp.json()["mintedNFT"]
    assert minted["tokenId"] == "1"
    assert minted["contractAddress"] == CONTRACT.lower()
    assert minted["wallet"] == WALLET.lower()
    assert minted["metadataURL"] == "https://gateway.pinata.cloud/ipfs/QmMeta"
    assert minted["blockNumber"] == 123456
    assert "mintedAt" in minted


async def test_record_mint_duplicate_is_conflict(client):
    assert (await client.post("/api/v1/nfts/minted", json=mint_body())).status_code == 200

    # Same token on the same contract, any case
    resp = await client.post(
        "/api/v1/nfts/minted", json=mint_body(contractAddress=CONTRACT.upper().replace("0X", "0x"))
    )

    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "NFT already recorded"}


async def test_same_token_id_on_another_contract_is_allowed(client):
    await client.post("/api/v1/nfts/minted", json=mint_body())

    resp = await client.post("/api/v1/nfts/minted", json=mint_body(contractAddress="0x" + "ff" * 20))

    assert resp.status_code == 200


async def test_record_mint_rejects_invalid_input(client):
    for bad in (
        {"blockNumber": -1},
        {"wallet": "0x12"},
        {"metadataURL": "nope"},
    ):
        resp = await client.post("/api/v1/nfts/minted", json=mint_body(**bad))
        assert resp.status_code == 400, bad


async def test_list_minted_filters(client):
    await client.post("/api/v1/nfts/minted", json=mint_body("1"))
    await client.post("/api/v1/nfts/minted", json=mint_body("2"))
    await client.post("/api/v1/nfts/minted", json=mint_body("3", wallet=OTHER_WALLET))
    await client.post(
        "/api/v1/nfts/minted", json=mint_body("4", contractAddress="0x" + "ff" * 20)
    )

    everything = (await client.get("/api/v1/nfts/minted")).json()["mintedNFTs"]
    assert [m["tokenId"] for m in everything] == ["4", "3", "2", "1"]

    mine = await client.get("/api/v1/nfts/minted", params={"wallet": WALLET.upper().replace("0X", "0x")})
    assert [m["tokenId"] for m in mine.json()["mintedNFTs"]] == ["4", "2", "1"]

    on_contract = await client.get(
        "/api/v1/nfts/minted", params={"wallet": WALLET, "contract": CONTRACT}
    )
    assert [m["tokenId"] for m in on_contract.json()["mintedNFTs"]] == ["2", "1"]
