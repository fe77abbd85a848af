from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.listing import (
    CreateListingRequest,
    ListingListResponse,
    ListingOut,
    ListingResponse,
    UpdateListingRequest,
)
from app.services.listings import create_listing, get_listing, list_listings, update_listing

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


def _parse_active(value: Optional[str]) -> Optional[bool]:
    # Anything but "true"/"false" means "no filter"
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@router.get("/listings", response_model=ListingListResponse)
async def list_listings_endpoint(
    seller: Optional[str] = Query(None, description="Seller address (any case)"),
    active: Optional[str] = Query(None, description="'true' or 'false'"),
    session: AsyncSession = Depends(get_session),
):
    listings = await list_listings(session, seller=seller, active=_parse_active(active))
    return ListingListResponse(listings=[ListingOut.model_validate(listing) for listing in listings])


@router.post("/listings", response_model=ListingResponse)
async def create_listing_endpoint(
    body: CreateListingRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Record a new on-chain listing. 409 if listingId was already recorded.

    Example: { listingId: "L1", nftContract: "0xAA...", tokenId: "1",
               seller: "0xBB...", price: "100000000000000000" }
    """
    listing = await create_listing(session, body)
    return ListingResponse(listing=ListingOut.model_validate(listing))


@router.get("/listings/{listing_id}", response_model=ListingResponse)
async def get_listing_endpoint(
    listing_id: str,
    session: AsyncSession = Depends(get_session),
):
    listing = await get_listing(session, listing_id)
    return ListingResponse(listing=ListingOut.model_validate(listing))


@router.patch("/listings/{listing_id}", response_model=ListingResponse)
async def update_listing_endpoint(
    listing_id: str,
    body: UpdateListingRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Partial update after a sale or cancellation.

    Sale example:   { active: false, buyer: "0xCC...", soldAt: "2024-05-01T12:00:00Z" }
    Cancel example: { active: false }
    """
    listing = await update_listing(session, listing_id, body)
    return ListingResponse(listing=ListingOut.model_validate(listing))
