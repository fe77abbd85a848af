"""
Marketplace listings mirrored from the marketplace contract.

Lifecycle:
  created  -> active=True on insert
  sold     -> PATCH active=False, buyer, soldAt
  canceled -> PATCH active=False
Rows are never deleted.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.listing import MarketplaceListing
from app.schemas.listing import CreateListingRequest, UpdateListingRequest

logger = logging.getLogger(__name__)


async def list_listings(
    session: AsyncSession,
    seller: Optional[str] = None,
    active: Optional[bool] = None,
) -> list[MarketplaceListing]:
    """Listings filtered by seller / active flag, most recent first."""
    stmt = select(MarketplaceListing)
    if seller:
        stmt = stmt.where(MarketplaceListing.seller == seller.lower())
    if active is not None:
        stmt = stmt.where(MarketplaceListing.active.is_(active))
    stmt = stmt.order_by(MarketplaceListing.listed_at.desc(), MarketplaceListing.id.desc())

    result = await session.execute(stmt)
    return list(result.scalars())


async def get_listing(session: AsyncSession, listing_id: str) -> MarketplaceListing:
    result = await session.execute(
        select(MarketplaceListing).where(MarketplaceListing.listing_id == listing_id)
    )
    listing = result.scalar_one_or_none()
    if listing is None:
        raise NotFoundError("Listing not found")
    return listing


async def create_listing(session: AsyncSession, req: CreateListingRequest) -> MarketplaceListing:
    existing = await session.execute(
        select(MarketplaceListing.id).where(MarketplaceListing.listing_id == req.listing_id)
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Listing already exists")

    listing = MarketplaceListing(
        listing_id=req.listing_id,
        nft_contract=req.nft_contract,
        token_id=req.token_id,
        seller=req.seller,
        price=req.price,
        active=True,
        base_nft_address=req.base_nft_address,
        base_token_id=req.base_token_id,
        transaction_hash=req.transaction_hash,
    )
    session.add(listing)
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with another insert of the same listing_id
        await session.rollback()
        raise ConflictError("Listing already exists")
    await session.refresh(listing)

    logger.info(
        "Listing %s created: %s #%s by %s for %s wei",
        listing.listing_id, listing.nft_contract, listing.token_id, listing.seller, listing.price,
    )
    return listing


async def update_listing(
    session: AsyncSession, listing_id: str, patch: UpdateListingRequest
) -> MarketplaceListing:
    """Apply only the fields present in ``patch``."""
    listing = await get_listing(session, listing_id)

    changes = patch.model_dump(exclude_none=True)
    for field, value in changes.items():
        setattr(listing, field, value)

    if changes:
        await session.commit()
        await session.refresh(listing)
        logger.info("Listing %s updated: %s", listing_id, sorted(changes))
    return listing
