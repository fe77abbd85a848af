"""
Derivative drafts: AI results a wallet saved before minting.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidInputError, NotFoundError
from app.models.draft import DerivativeDraft
from app.schemas.common import is_valid_address
from app.schemas.draft import SaveDraftRequest

logger = logging.getLogger(__name__)


def _check_wallet(wallet: str) -> str:
    if not is_valid_address(wallet):
        raise InvalidInputError("Invalid wallet address")
    return wallet.lower()


async def list_drafts(session: AsyncSession, wallet: str) -> list[DerivativeDraft]:
    """Drafts of one wallet, newest first."""
    wallet = _check_wallet(wallet)
    result = await session.execute(
        select(DerivativeDraft)
        .where(DerivativeDraft.wallet == wallet)
        .order_by(DerivativeDraft.created_at.desc(), DerivativeDraft.id.desc())
    )
    return list(result.scalars())


async def create_draft(session: AsyncSession, req: SaveDraftRequest) -> DerivativeDraft:
    # Addresses arrive lower-cased from the schema
    draft = DerivativeDraft(
        wallet=req.wallet,
        base_nft=req.base_nft,
        base_token_id=req.base_token_id,
        image_url=req.image_url,
        prompt=req.prompt,
        name=req.name,
        description=req.description,
        metadata_=req.metadata or {},
    )

    session.add(draft)
    await session.commit()
    await session.refresh(draft)

    logger.info("Draft %s saved for %s (base %s #%s)", draft.id, draft.wallet, draft.base_nft, draft.base_token_id)
    return draft


async def delete_draft(session: AsyncSession, wallet: str, draft_id: Optional[int]) -> None:
    """
    Delete a draft owned by ``wallet``.

    A missing draft and a draft of another wallet fail the same way, so the
    endpoint does not reveal which ids exist.
    """
    wallet = _check_wallet(wallet)
    if draft_id is None:
        raise InvalidInputError("Draft ID is required")

    result = await session.execute(
        select(DerivativeDraft).where(
            DerivativeDraft.id == draft_id,
            DerivativeDraft.wallet == wallet,
        )
    )
    draft = result.scalar_one_or_none()
    if draft is None:
        raise NotFoundError("Draft not found or unauthorized")

    await session.delete(draft)
    await session.commit()
    logger.info("Draft %s deleted by %s", draft_id, wallet)
