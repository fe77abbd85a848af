"""
Base classes for NFT ownership adapters.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.nft import OwnedNFT, OwnershipPage


class OwnershipLookupError(Exception):
    """An indexer could not answer (missing key, HTTP failure, bad payload)."""


class BaseOwnershipAdapter(ABC):
    """Abstract base for per-network ownership lookups."""

    source_name: str = ""

    def __init__(self, chain_id: int, network: str):
        self.chain_id = chain_id
        self.network = network

    @abstractmethod
    async def fetch_owned(self, owner: str, page_key: Optional[str] = None) -> OwnershipPage:
        """Return NFTs held by ``owner``. Raise OwnershipLookupError on failure."""
        ...

    async def fetch_metadata(self, contract: str, token_id: str) -> Optional[OwnedNFT]:
        """
        Metadata for a single token.
        Override for indexers that support it; None means "not available".
        """
        return None

    def mock_nfts(self, owner: str) -> list[OwnedNFT]:
        """Placeholder holdings served when the mock fallback is enabled."""
        return []

    def _page(
        self,
        nfts: list[OwnedNFT],
        total_count: Optional[int] = None,
        page_key: Optional[str] = None,
    ) -> OwnershipPage:
        return OwnershipPage(
            owned_nfts=nfts,
            total_count=len(nfts) if total_count is None else total_count,
            page_key=page_key,
            chain_id=self.chain_id,
            network=self.network,
            source=self.source_name,
        )
