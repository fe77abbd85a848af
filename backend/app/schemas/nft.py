"""
Normalized NFT ownership schemas shared by every indexer adapter.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class NFTAttribute(BaseModel):
    """ERC-721 metadata attribute (kept snake_case as in the metadata standard)."""

    trait_type: str
    value: Any = None


class OwnedNFT(CamelModel):
    contract_address: str
    token_id: str  # decimal string
    token_type: str = "ERC721"
    name: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    attributes: list[NFTAttribute] = Field(default_factory=list)
    time_last_updated: Optional[str] = None


class OwnershipPage(CamelModel):
    owned_nfts: list[OwnedNFT] = Field(default_factory=list)
    total_count: int = 0
    page_key: Optional[str] = None
    chain_id: int
    network: str
    source: str  # alchemy | envio | mock | unavailable
    degraded: bool = False


class NetworkInfo(CamelModel):
    chain_id: int
    name: str
    service: str


class OwnershipResponse(CamelModel):
    success: bool = True
    data: OwnershipPage


class MultichainOwnershipResponse(CamelModel):
    success: bool = True
    data: list[OwnershipPage]


class NetworkListResponse(CamelModel):
    success: bool = True
    default_chain_id: int
    networks: list[NetworkInfo]


class NFTMetadataResponse(CamelModel):
    success: bool = True
    nft: OwnedNFT
