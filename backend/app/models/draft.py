from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class DerivativeDraft(Base):
    """
    An AI derivative saved by a wallet before minting.

    wallet and base_nft are stored lower-cased; only the owning wallet
    may delete a draft.
    """

    __tablename__ = "derivative_drafts"

    id: Mapped[int] = mapped_column(primary_key=True)
    wallet: Mapped[str] = mapped_column(String(42))
    base_nft: Mapped[str] = mapped_column(String(42))
    base_token_id: Mapped[str] = mapped_column(String(100))
    image_url: Mapped[str] = mapped_column(Text)
    prompt: Mapped[str] = mapped_column(Text)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    metadata_: Mapped[dict] = mapped_column(
        "metadata", JSON().with_variant(JSONB, "postgresql"), default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, server_default="now()"
    )

    __table_args__ = (
        Index("ix_derivative_drafts_wallet_created", "wallet", "created_at"),
    )
