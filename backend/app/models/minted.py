from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class MintedNFT(Base):
    """Off-chain record of a DerivativeMinted event. Immutable once written."""

    __tablename__ = "minted_nfts"

    id: Mapped[int] = mapped_column(primary_key=True)
    token_id: Mapped[str] = mapped_column(String(100))
    contract_address: Mapped[str] = mapped_column(String(42))
    wallet: Mapped[str] = mapped_column(String(42), index=True)
    base_nft: Mapped[str] = mapped_column(String(42))
    base_token_id: Mapped[str] = mapped_column(String(100))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    image_url: Mapped[str] = mapped_column(Text)
    metadata_url: Mapped[str] = mapped_column(Text)
    transaction_hash: Mapped[str] = mapped_column(String(66))
    block_number: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    minted_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, server_default="now()"
    )

    __table_args__ = (
        UniqueConstraint("token_id", "contract_address", name="uq_minted_nfts_token_contract"),
        Index("ix_minted_nfts_contract", "contract_address"),
    )
