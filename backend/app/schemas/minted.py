from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import Address, CamelModel, UrlStr


class RecordMintRequest(CamelModel):
    token_id: str
    contract_address: Address
    wallet: Address
    base_nft: Address = Field(alias="baseNFT")
    base_token_id: str
    name: str
    description: str
    image_url: UrlStr = Field(alias="imageURL")
    metadata_url: UrlStr = Field(alias="metadataURL")
    transaction_hash: str
    block_number: Optional[int] = Field(default=None, ge=0)


class MintedNFTOut(CamelModel):
    id: int
    token_id: str
    contract_address: str
    wallet: str
    base_nft: str = Field(alias="baseNFT")
    base_token_id: str
    name: str
    description: str
    image_url: str = Field(alias="imageURL")
    metadata_url: str = Field(alias="metadataURL")
    transaction_hash: str
    block_number: Optional[int] = None
    minted_at: datetime


class MintedNFTResponse(CamelModel):
    success: bool = True
    minted_nft: MintedNFTOut = Field(alias="mintedNFT")


class MintedNFTListResponse(CamelModel):
    success: bool = True
    minted_nfts: list[MintedNFTOut] = Field(alias="mintedNFTs")
