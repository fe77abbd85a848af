from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.common import Address, CamelModel, NonEmptyStr, WeiAmount


class CreateListingRequest(CamelModel):
    """
    Mirror of a ``Listed`` event from the marketplace contract.

    Example:
        { "listingId": "L1", "nftContract": "0xAA...", "tokenId": "1",
          "seller": "0xBB...", "price": "100000000000000000" }
    """

    listing_id: NonEmptyStr
    nft_contract: Address
    token_id: str
    seller: Address
    price: WeiAmount
    base_nft_address: Optional[Address] = Field(default=None, alias="baseNFTAddress")
    base_token_id: Optional[str] = None
    transaction_hash: Optional[str] = None


class UpdateListingRequest(CamelModel):
    """Partial update; fields left out (or null) are not touched."""

    active: Optional[bool] = None
    buyer: Optional[Address] = None
    sold_at: Optional[datetime] = None

    @field_validator("sold_at")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ListingOut(CamelModel):
    id: int
    listing_id: str
    nft_contract: str
    token_id: str
    seller: str
    price: str
    active: bool
    base_nft_address: Optional[str] = Field(default=None, alias="baseNFTAddress")
    base_token_id: Optional[str] = None
    transaction_hash: Optional[str] = None
    listed_at: datetime
    buyer: Optional[str] = None
    sold_at: Optional[datetime] = None


class ListingResponse(CamelModel):
    success: bool = True
    listing: ListingOut


class ListingListResponse(CamelModel):
    success: bool = True
    listings: list[ListingOut]
