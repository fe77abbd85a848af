from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field

from app.schemas.common import Address, CamelModel, NonEmptyStr, UrlStr


class SaveDraftRequest(CamelModel):
    wallet: Address
    base_nft: Address = Field(alias="baseNFT")
    base_token_id: str
    image_url: UrlStr = Field(alias="imageURL")
    prompt: NonEmptyStr
    name: NonEmptyStr
    description: NonEmptyStr
    metadata: Optional[dict[str, Any]] = None


class DraftOut(CamelModel):
    id: int
    wallet: str
    base_nft: str = Field(alias="baseNFT")
    base_token_id: str
    image_url: str = Field(alias="imageURL")
    prompt: str
    name: str
    description: str
    # ORM attribute is metadata_ (``metadata`` is reserved by SQLAlchemy)
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadata_", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime


class DraftResponse(CamelModel):
    success: bool = True
    draft: DraftOut


class DraftListResponse(CamelModel):
    success: bool = True
    drafts: list[DraftOut]


class SuccessResponse(CamelModel):
    success: bool = True
