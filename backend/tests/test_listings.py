NFT_CONTRACT = "0x" + "AA" * 20
SELLER = "0x" + "Bb" * 20
OTHER_SELLER = "0x" + "33" * 20
BUYER = "0x" + "CC" * 20


def listing_body(listing_id="L1", **overrides):
    body = {
        "listingId": listing_id,
        "nftContract": NFT_CONTRACT,
        "tokenId": "1",
        "seller": SELLER,
        "price": "100000000000000000",
    }
    body.update(overrides)
    return body


async def test_create_listing(client):
    resp = await client.post(
        "/api/v1/marketplace/listings",
        json=listing_body(baseNFTAddress="0x" + "DD" * 20, baseTokenId="42", transactionHash="0xabc"),
    )

    assert resp.status_code == 200
    listing = resp.json()["listing"]
    assert listing["listingId"] == "L1"
    assert listing["nftContract"] == NFT_CONTRACT.lower()
    assert listing["seller"] == SELLER.lower()
    assert listing["price"] == "100000000000000000"
    assert listing["active"] is True
    assert listing["baseNFTAddress"] == "0x" + "dd" * 20
    assert listing["baseTokenId"] == "42"
    assert listing["buyer"] is None
    assert listing["soldAt"] is None


async def test_create_listing_keeps_large_prices_exact(client):
    price = "123456789012345678901234567890"
    resp = await client.post("/api/v1/marketplace/listings", json=listing_body(price=price))

    assert resp.status_code == 200
    assert resp.json()["listing"]["price"] == price


async def test_create_listing_duplicate_is_conflict(client):
    assert (await client.post("/api/v1/marketplace/listings", json=listing_body())).status_code == 200

    resp = await client.post("/api/v1/marketplace/listings", json=listing_body(tokenId="2"))

    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "Listing already exists"}

    original = (await client.get("/api/v1/marketplace/listings/L1")).json()["listing"]
    assert original["tokenId"] == "1"
    assert original["price"] == "100000000000000000"
    assert len((await client.get("/api/v1/marketplace/listings")).json()["listings"]) == 1


async def test_create_listing_rejects_invalid_input(client):
    for bad in (
        {"price": "1.5"},
        {"price": "-1"},
        {"seller": "0xnope"},
        {"listingId": ""},
    ):
        resp = await client.post("/api/v1/marketplace/listings", json=listing_body(**bad))
        assert resp.status_code == 400, bad
        assert resp.json()["error"] == "Validation error"


async def test_get_listing(client):
    await client.post("/api/v1/marketplace/listings", json=listing_body("L7"))

    resp = await client.get("/api/v1/marketplace/listings/L7")
    assert resp.status_code == 200
    assert resp.json()["listing"]["listingId"] == "L7"

    missing = await client.get("/api/v1/marketplace/listings/nope")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Listing not found"


async def test_list_listings_filters(client):
    await client.post("/api/v1/marketplace/listings", json=listing_body("L1"))
    await client.post("/api/v1/marketplace/listings", json=listing_body("L2"))
    await client.post("/api/v1/marketplace/listings", json=listing_body("L3", seller=OTHER_SELLER))
    await client.patch("/api/v1/marketplace/listings/L1", json={"active": False})

    all_ids = [
        item["listingId"]
        for item in (await client.get("/api/v1/marketplace/listings")).json()["listings"]
    ]
    assert all_ids == ["L3", "L2", "L1"]

    by_seller = await client.get(
        "/api/v1/marketplace/listings", params={"seller": SELLER.upper().replace("0X", "0x")}
    )
    assert [item["listingId"] for item in by_seller.json()["listings"]] == ["L2", "L1"]

    active = await client.get("/api/v1/marketplace/listings", params={"active": "true"})
    assert [item["listingId"] for item in active.json()["listings"]] == ["L3", "L2"]

    inactive = await client.get("/api/v1/marketplace/listings", params={"active": "false"})
    assert [item["listingId"] for item in inactive.json()["listings"]] == ["L1"]

    # Unrecognized values do not filter
    anything = await client.get("/api/v1/marketplace/listings", params={"active": "yes"})
    assert len(anything.json()["listings"]) == 3


async def test_update_listing_after_sale(client):
    await client.post("/api/v1/marketplace/listings", json=listing_body())

    resp = await client.patch(
        "/api/v1/marketplace/listings/L1",
        json={"active": False, "buyer": BUYER, "soldAt": "2024-05-01T12:00:00Z"},
    )

    assert resp.status_code == 200
    listing = resp.json()["listing"]
    assert listing["active"] is False
    assert listing["buyer"] == BUYER.lower()
    assert listing["soldAt"].startswith("2024-05-01T12:00:00")
    # Untouched fields survive
    assert listing["price"] == "100000000000000000"
    assert listing["seller"] == SELLER.lower()


async def test_update_listing_cancel_only_touches_active(client):
    await client.post("/api/v1/marketplace/listings", json=listing_body())

    resp = await client.patch("/api/v1/marketplace/listings/L1", json={"active": False})

    listing = resp.json()["listing"]
    assert listing["active"] is False
    assert listing["buyer"] is None
    assert listing["soldAt"] is None


async def test_update_missing_listing(client):
    resp = await client.patch("/api/v1/marketplace/listings/L404", json={"active": False})

    assert resp.status_code == 404
    assert resp.json()["error"] == "Listing not found"


async def test_repeated_active_listing_reads_are_identical(client):
    for listing_id in ("L1", "L2", "L3"):
        await client.post("/api/v1/marketplace/listings", json=listing_body(listing_id))
    await client.patch("/api/v1/marketplace/listings/L2", json={"active": False})

    first = await client.get("/api/v1/marketplace/listings", params={"active": "true"})
    second = await client.get("/api/v1/marketplace/listings", params={"active": "true"})

    assert first.json() == second.json()
    assert [item["listingId"] for item in first.json()["listings"]] == ["L3", "L1"]
