from fastapi import APIRouter, Depends

from app.schemas.ipfs import DerivativeUploadRequest, DerivativeUploadResponse
from app.services.ipfs import IPFSService, get_ipfs_service

router = APIRouter(prefix="/ipfs", tags=["ipfs"])


@router.post("/derivative", response_model=DerivativeUploadResponse)
async def upload_derivative(
    body: DerivativeUploadRequest,
    ipfs: IPFSService = Depends(get_ipfs_service),
):
    """
    Pin a generated image and its ERC-721 metadata before minting.

    The returned metadataResult.url is the tokenURI for mintDerivative().
    """
    image_result, metadata_result = await ipfs.upload_derivative(
        body.image_url, body.to_metadata()
    )
    return DerivativeUploadResponse(image_result=image_result, metadata_result=metadata_result)
