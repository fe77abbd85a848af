"""
Envio HyperSync adapter for Monad Testnet.

HyperSync has no "NFTs of owner" endpoint, so ownership is rebuilt from raw
ERC-721 Transfer logs: every transfer to or from the owner is fetched and
replayed in chain order. Responses cover a block range at a time, so the
query is repeated from ``next_block`` until the archive height.
"""

import logging
from typing import Any, Iterable, Optional

import httpx

from app.core.config import settings
from app.schemas.nft import NFTAttribute, OwnedNFT, OwnershipPage
from app.services.ownership.base import BaseOwnershipAdapter, OwnershipLookupError
from app.services.ownership.mock import mock_monad_nfts, placeholder_image
from app.services.rate_limiting import get_rate_limiter, retry_with_backoff

logger = logging.getLogger(__name__)

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

# Upper bound on next_block round trips per lookup
MAX_QUERY_PAGES = 20

LOG_FIELDS = [
    "address",
    "topic0",
    "topic1",
    "topic2",
    "topic3",
    "data",
    "block_number",
    "transaction_hash",
    "log_index",
]


def pad_address(address: str) -> str:
    """Left-pad a 20-byte address to a 32-byte log topic."""
    clean = address.lower().removeprefix("0x")
    return "0x" + clean.rjust(64, "0")


def build_transfer_query(owner: str, from_block: int = 0) -> dict[str, Any]:
    padded = pad_address(owner)
    return {
        "from_block": from_block,
        "logs": [
            # Incoming: topic2 (to) == owner
            {"topics": [[TRANSFER_TOPIC], [], [padded]]},
            # Outgoing: topic1 (from) == owner
            {"topics": [[TRANSFER_TOPIC], [padded]]},
        ],
        "field_selection": {"log": LOG_FIELDS},
    }


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


def iter_logs(payload: dict[str, Any]) -> Iterable[dict[str, Any]]:
    """HyperSync returns ``data`` as a list of batches; older gateways as one object."""
    data = payload.get("data")
    if isinstance(data, list):
        for batch in data:
            yield from batch.get("logs") or []
    elif isinstance(data, dict):
        yield from data.get("logs") or []


def replay_transfers(logs: Iterable[dict[str, Any]], owner: str) -> dict[tuple[str, str], int]:
    """
    Replay Transfer logs in (block, log index) order.

    Returns {(contract, token_id): block_number} for tokens still held.
    ERC-20 transfers share topic0 but carry no topic3 and are skipped.
    """
    owner = owner.lower()
    held: dict[tuple[str, str], int] = {}

    ordered = sorted(
        logs, key=lambda log: (_as_int(log.get("block_number")), _as_int(log.get("log_index")))
    )
    for log in ordered:
        if (log.get("topic0") or "").lower() != TRANSFER_TOPIC:
            continue
        topic3 = log.get("topic3")
        if not topic3:
            continue

        key = ((log.get("address") or "").lower(), str(_as_int(topic3)))
        recipient = "0x" + (log.get("topic2") or "")[-40:].lower()

        if recipient == owner:
            held[key] = _as_int(log.get("block_number"))
        else:
            held.pop(key, None)

    return held


class EnvioAdapter(BaseOwnershipAdapter):
    source_name = "envio"

    def __init__(
        self,
        chain_id: int = 10143,
        network: str = "Monad Testnet",
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(chain_id, network)
        self._api_key = api_key
        self._url = url
        self._transport = transport
        self.rate_limiter = get_rate_limiter("envio", max_requests=settings.ENVIO_RATE_LIMIT)

    @property
    def api_key(self) -> str:
        return settings.ENVIO_API_KEY if self._api_key is None else self._api_key

    @property
    def url(self) -> str:
        return self._url or settings.ENVIO_HYPERSYNC_URL

    async def fetch_owned(self, owner: str, page_key: Optional[str] = None) -> OwnershipPage:
        # page_key is ignored: ownership needs the full transfer history
        if not self.api_key:
            raise OwnershipLookupError("Envio API key not configured")

        logger.info("Fetching NFTs from %s via Envio HyperSync for %s", self.network, owner)
        logs = await self._fetch_transfer_logs(owner)

        try:
            held = replay_transfers(logs, owner)
        except (AttributeError, TypeError, ValueError) as exc:
            raise OwnershipLookupError(f"Unexpected HyperSync payload: {exc}") from exc

        nfts = [self._to_nft(contract, token_id) for (contract, token_id) in held]
        logger.info("HyperSync: %d NFTs held by %s", len(nfts), owner)
        return self._page(nfts)

    async def _fetch_transfer_logs(self, owner: str) -> list[dict[str, Any]]:
        """
        Page through HyperSync until the archive height is reached.

        Each response covers a block range and carries ``next_block``; a
        replay over a partial range would miss later outgoing transfers, so
        an incomplete history is a lookup failure.
        """
        logs: list[dict[str, Any]] = []
        from_block = 0
        for _ in range(MAX_QUERY_PAGES):
            try:
                payload = await self._post(build_transfer_query(owner, from_block))
            except httpx.HTTPError as exc:
                raise OwnershipLookupError(f"HyperSync query failed: {exc}") from exc
            except ValueError as exc:
                raise OwnershipLookupError("HyperSync returned invalid JSON") from exc

            try:
                logs.extend(iter_logs(payload))
                next_block = payload.get("next_block")
                archive_height = payload.get("archive_height")
                if next_block is None:
                    return logs
                next_block = _as_int(next_block)
                if next_block <= from_block or (
                    archive_height is not None and next_block >= _as_int(archive_height)
                ):
                    return logs
            except (AttributeError, TypeError, ValueError) as exc:
                raise OwnershipLookupError(f"Unexpected HyperSync payload: {exc}") from exc
            from_block = next_block

        raise OwnershipLookupError(
            f"HyperSync history for {owner} exceeds {MAX_QUERY_PAGES} pages"
        )

    def mock_nfts(self, owner: str) -> list[OwnedNFT]:
        return mock_monad_nfts()

    def _to_nft(self, contract: str, token_id: str) -> OwnedNFT:
        # HyperSync carries no token metadata; name and image are placeholders
        return OwnedNFT(
            contract_address=contract,
            token_id=token_id,
            name=f"Monad NFT #{token_id}",
            description="NFT from Monad Testnet",
            image_url=placeholder_image("9945FF", "FFFFFF", f"Monad NFT {token_id}"),
            attributes=[
                NFTAttribute(trait_type="Network", value=self.network),
                NFTAttribute(trait_type="Type", value="ERC721"),
            ],
        )

    @retry_with_backoff()
    async def _post(self, query: dict[str, Any]) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with self.rate_limiter.acquire("hypersync"):
            async with httpx.AsyncClient(
                headers=headers, timeout=settings.HTTP_TIMEOUT_SEC, transport=self._transport
            ) as client:
                resp = await client.post(self.url, json=query)
                resp.raise_for_status()
                return resp.json()
