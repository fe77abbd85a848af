import json
from typing import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from app.schemas.generation import (
    GeneratedImage,
    GenerationRequest,
    GenerationResponse,
    StyleListResponse,
    StyleOut,
)
from app.services.generation import STYLES, generate, generate_with_progress, get_style

router = APIRouter(prefix="/generate", tags=["generate"])


@router.get("/styles", response_model=StyleListResponse)
async def list_styles():
    return StyleListResponse(
        styles=[StyleOut(value=s.value, label=s.label, prompt=s.prompt) for s in STYLES]
    )


@router.post("", response_model=GenerationResponse)
async def generate_derivative(body: GenerationRequest):
    """
    MOCK: returns a placeholder image after a 2-5s delay.
    No AI model is called yet.
    """
    result = await generate(body)
    return GenerationResponse(result=result)


async def _ndjson(events) -> AsyncIterator[str]:
    async for event in events:
        kind = "result" if isinstance(event, GeneratedImage) else "progress"
        payload = event.model_dump(mode="json", by_alias=True)
        yield json.dumps({"type": kind, "data": payload}) + "\n"


@router.post("/stream")
async def generate_derivative_stream(body: GenerationRequest):
    """Same as POST /generate, streamed as NDJSON progress events then the result."""
    # Fail with a 400 before the 200 stream starts
    get_style(body.style)
    return StreamingResponse(
        _ndjson(generate_with_progress(body)),
        media_type="application/x-ndjson",
    )
