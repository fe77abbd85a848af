"""
Off-chain log of derivative mints (one row per DerivativeMinted event).
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError
from app.models.minted import MintedNFT
from app.schemas.minted import RecordMintRequest
from app.services.cache import CacheService

logger = logging.getLogger(__name__)


async def record_mint(session: AsyncSession, req: RecordMintRequest) -> MintedNFT:
    existing = await session.execute(
        select(MintedNFT.id).where(
            MintedNFT.token_id == req.token_id,
            MintedNFT.contract_address == req.contract_address,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("NFT already recorded")

    minted = MintedNFT(
        token_id=req.token_id,
        contract_address=req.contract_address,
        wallet=req.wallet,
        base_nft=req.base_nft,
        base_token_id=req.base_token_id,
        name=req.name,
        description=req.description,
        image_url=req.image_url,
        metadata_url=req.metadata_url,
        transaction_hash=req.transaction_hash,
        block_number=req.block_number,
    )
    session.add(minted)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("NFT already recorded")
    await session.refresh(minted)

    logger.info(
        "Mint recorded: %s #%s for %s (tx %s)",
        minted.contract_address, minted.token_id, minted.wallet, minted.transaction_hash,
    )
    # The minter's cached gallery no longer matches the chain
    await CacheService.invalidate_owner(minted.wallet)
    return minted


async def list_minted(
    session: AsyncSession,
    wallet: Optional[str] = None,
    contract: Optional[str] = None,
) -> list[MintedNFT]:
    """Mint records filtered by wallet / contract, most recent first."""
    stmt = select(MintedNFT)
    if wallet:
        stmt = stmt.where(MintedNFT.wallet == wallet.lower())
    if contract:
        stmt = stmt.where(MintedNFT.contract_address == contract.lower())
    stmt = stmt.order_by(MintedNFT.minted_at.desc(), MintedNFT.id.desc())

    result = await session.execute(stmt)
    return list(result.scalars())
