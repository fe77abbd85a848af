from typing import Optional

from app.schemas.common import CamelModel, NonEmptyStr


class StyleOut(CamelModel):
    value: str
    label: str
    prompt: str


class StyleListResponse(CamelModel):
    success: bool = True
    styles: list[StyleOut]


class GenerationRequest(CamelModel):
    # Gallery images may be data: URIs, so this is not checked as an http URL
    base_image_url: NonEmptyStr
    style: str
    base_nft_name: Optional[str] = None
    base_nft_description: Optional[str] = None


class GeneratedImage(CamelModel):
    image_url: str
    prompt: str
    style: str
    name: str
    description: str


class GenerationResponse(CamelModel):
    success: bool = True
    result: GeneratedImage


class GenerationProgress(CamelModel):
    stage: str  # preparing | generating | processing | complete | error
    progress: int
    message: str
