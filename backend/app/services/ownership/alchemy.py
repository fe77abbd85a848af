"""
Alchemy NFT API v3 adapter (one instance per EVM network).

Endpoint pattern:
  https://{subdomain}.g.alchemy.com/nft/v3/{api_key}/getNFTsForOwner
Older v2-shaped payloads (``title``, ``media[].gateway``, hex ``id.tokenId``)
are still understood.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.schemas.nft import NFTAttribute, OwnedNFT, OwnershipPage
from app.services.ownership.base import BaseOwnershipAdapter, OwnershipLookupError
from app.services.ownership.mock import mock_evm_nfts
from app.services.rate_limiting import get_rate_limiter, retry_with_backoff

logger = logging.getLogger(__name__)

PAGE_SIZE = 20


class AlchemyAdapter(BaseOwnershipAdapter):
    source_name = "alchemy"

    def __init__(
        self,
        chain_id: int,
        network: str,
        subdomain: str,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(chain_id, network)
        self.subdomain = subdomain
        self._api_key = api_key
        self._transport = transport
        self.rate_limiter = get_rate_limiter("alchemy", max_requests=settings.ALCHEMY_RATE_LIMIT)

    @property
    def api_key(self) -> str:
        return settings.ALCHEMY_API_KEY if self._api_key is None else self._api_key

    @property
    def base_url(self) -> str:
        return f"https://{self.subdomain}.g.alchemy.com/nft/v3/{self.api_key}"

    async def fetch_owned(self, owner: str, page_key: Optional[str] = None) -> OwnershipPage:
        if not self.api_key:
            raise OwnershipLookupError("Alchemy API key not configured")

        params = {"owner": owner, "withMetadata": "true", "pageSize": str(PAGE_SIZE)}
        if page_key:
            params["pageKey"] = page_key

        logger.info("Fetching NFTs from %s via Alchemy for %s", self.network, owner)
        data = await self._request("getNFTsForOwner", params)

        # pydantic's ValidationError is a ValueError
        try:
            nfts = [parse_alchemy_nft(item) for item in data.get("ownedNfts") or []]
            return self._page(
                nfts,
                total_count=data.get("totalCount", len(nfts)),
                page_key=data.get("pageKey"),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise OwnershipLookupError(f"Unexpected Alchemy payload: {exc}") from exc

    async def fetch_metadata(self, contract: str, token_id: str) -> Optional[OwnedNFT]:
        if not self.api_key:
            raise OwnershipLookupError("Alchemy API key not configured")

        data = await self._request(
            "getNFTMetadata",
            {"contractAddress": contract, "tokenId": token_id, "refreshCache": "false"},
        )
        if not data:
            return None
        try:
            return parse_alchemy_nft(data)
        except (AttributeError, TypeError, ValueError) as exc:
            raise OwnershipLookupError(f"Unexpected Alchemy payload: {exc}") from exc

    def mock_nfts(self, owner: str) -> list[OwnedNFT]:
        return mock_evm_nfts()

    async def _request(self, method: str, params: dict[str, str]) -> dict:
        try:
            return await self._get(f"{self.base_url}/{method}", params)
        except httpx.HTTPError as exc:
            # Never log the URL: the API key is part of the path
            raise OwnershipLookupError(
                f"Alchemy {method} failed on {self.subdomain}: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise OwnershipLookupError(f"Alchemy {method} returned invalid JSON") from exc

    @retry_with_backoff()
    async def _get(self, url: str, params: dict[str, str]) -> dict:
        async with self.rate_limiter.acquire(self.subdomain):
            async with httpx.AsyncClient(
                timeout=settings.HTTP_TIMEOUT_SEC, transport=self._transport
            ) as client:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()


def parse_alchemy_nft(item: dict[str, Any]) -> OwnedNFT:
    """Normalize one Alchemy NFT object (v3, or v2 as a fallback)."""
    contract = item.get("contract") or {}
    legacy_id = item.get("id") or {}
    raw_metadata = (item.get("raw") or {}).get("metadata") or item.get("metadata") or {}

    token_id = str(item.get("tokenId") or legacy_id.get("tokenId") or "")
    if token_id.startswith("0x"):
        token_id = str(int(token_id, 16))

    image = item.get("image") or {}
    media = item.get("media") or []
    image_url = (
        image.get("cachedUrl")
        or image.get("originalUrl")
        or (media[0].get("gateway") if media else None)
        or raw_metadata.get("image")
    )

    token_type = (
        item.get("tokenType")
        or (legacy_id.get("tokenMetadata") or {}).get("tokenType")
        or "ERC721"
    )

    attributes = [
        NFTAttribute(trait_type=str(attr.get("trait_type", "")), value=attr.get("value"))
        for attr in raw_metadata.get("attributes") or []
        if isinstance(attr, dict)
    ]

    return OwnedNFT(
        contract_address=(contract.get("address") or "").lower(),
        token_id=token_id,
        token_type=token_type,
        name=item.get("name") or item.get("title") or raw_metadata.get("name") or f"#{token_id}",
        description=item.get("description") or raw_metadata.get("description"),
        image_url=image_url,
        attributes=attributes,
        time_last_updated=item.get("timeLastUpdated"),
    )
