from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class MarketplaceListing(Base):
    """
    Off-chain mirror of a marketplace contract listing.

    listing_id is the on-chain listing id and is globally unique.
    Rows are never deleted; a sale flips active and sets buyer/sold_at.
    """

    __tablename__ = "marketplace_listings"

    id: Mapped[int] = mapped_column(primary_key=True)
    listing_id: Mapped[str] = mapped_column(String(100), unique=True)
    nft_contract: Mapped[str] = mapped_column(String(42), index=True)
    token_id: Mapped[str] = mapped_column(String(100))
    seller: Mapped[str] = mapped_column(String(42), index=True)
    price: Mapped[str] = mapped_column(String(78))  # wei, uint256 as decimal string
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    base_nft_address: Mapped[str | None] = mapped_column(String(42), nullable=True)
    base_token_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transaction_hash: Mapped[str | None] = mapped_column(String(66), nullable=True)
    listed_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, server_default="now()"
    )
    buyer: Mapped[str | None] = mapped_column(String(42), nullable=True)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_marketplace_listings_active_listed", "active", "listed_at"),
    )
