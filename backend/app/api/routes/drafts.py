from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.draft import (
    DraftListResponse,
    DraftOut,
    DraftResponse,
    SaveDraftRequest,
    SuccessResponse,
)
from app.services.drafts import create_draft, delete_draft, list_drafts

router = APIRouter(prefix="/drafts", tags=["drafts"])


@router.post("/save", response_model=DraftResponse)
async def save_draft_endpoint(
    body: SaveDraftRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Save a generated derivative as a draft.

    Example: { wallet: "0xAb...", baseNFT: "0xCd...", baseTokenId: "7",
               imageURL: "https://...", prompt: "...", name: "...",
               description: "...", metadata: {"style": "ghibli"} }
    """
    draft = await create_draft(session, body)
    return DraftResponse(draft=DraftOut.model_validate(draft))


@router.get("/{wallet}", response_model=DraftListResponse)
async def list_drafts_endpoint(
    wallet: str,
    session: AsyncSession = Depends(get_session),
):
    """All drafts of a wallet, newest first."""
    drafts = await list_drafts(session, wallet)
    return DraftListResponse(drafts=[DraftOut.model_validate(d) for d in drafts])


@router.delete("/{wallet}", response_model=SuccessResponse)
async def delete_draft_endpoint(
    wallet: str,
    draft_id: Optional[int] = Query(None, alias="id"),
    session: AsyncSession = Depends(get_session),
):
    """Delete one draft; 404 when it is missing or owned by another wallet."""
    await delete_draft(session, wallet, draft_id)
    return SuccessResponse()
