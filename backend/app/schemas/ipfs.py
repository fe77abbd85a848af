from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import Address, CamelModel, NonEmptyStr, UrlStr
from app.schemas.nft import NFTAttribute


class NFTMetadata(BaseModel):
    """
    ERC-721 metadata JSON as pinned to IPFS.

    The derivative-tracking fields (base_nft_address ... created_at) are our
    own extension of the standard.
    """

    name: str
    description: str
    image: str = ""
    attributes: Optional[list[NFTAttribute]] = None
    external_url: Optional[str] = None
    background_color: Optional[str] = None
    animation_url: Optional[str] = None
    base_nft_address: Optional[str] = None
    base_token_id: Optional[str] = None
    generation_style: Optional[str] = None
    generation_prompt: Optional[str] = None
    created_at: Optional[str] = None


class UploadResult(CamelModel):
    hash: str
    url: str
    mock: bool = False


class DerivativeUploadRequest(CamelModel):
    image_url: UrlStr = Field(alias="imageURL")
    name: NonEmptyStr
    description: str
    base_nft_address: Optional[Address] = Field(default=None, alias="baseNFTAddress")
    base_token_id: Optional[str] = None
    generation_style: Optional[str] = None
    generation_prompt: Optional[str] = None
    attributes: Optional[list[NFTAttribute]] = None
    external_url: Optional[str] = None

    def to_metadata(self) -> NFTMetadata:
        return NFTMetadata(
            name=self.name,
            description=self.description,
            attributes=self.attributes,
            external_url=self.external_url,
            base_nft_address=self.base_nft_address,
            base_token_id=self.base_token_id,
            generation_style=self.generation_style,
            generation_prompt=self.generation_prompt,
        )


class DerivativeUploadResponse(CamelModel):
    success: bool = True
    image_result: UploadResult
    metadata_result: UploadResult
