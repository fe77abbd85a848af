"""
Pinata IPFS pinning client.

Endpoints (JWT bearer auth):
  POST {PINATA_API_URL}/pinning/pinFileToIPFS   multipart "file"
  POST {PINATA_API_URL}/pinning/pinJSONToIPFS   {"pinataContent": ..., "pinataMetadata": ...}

Without a JWT, or when Pinata fails, mock results are returned only if
MOCK_FALLBACK_ENABLED is set; otherwise UpstreamServiceError is raised.
"""

import json
import logging
import secrets
import string
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.core.errors import UpstreamServiceError
from app.schemas.ipfs import NFTMetadata, UploadResult
from app.services.rate_limiting import retry_with_backoff

logger = logging.getLogger(__name__)

_HASH_ALPHABET = string.ascii_lowercase + string.digits


def get_ipfs_url(ref: str) -> str:
    """Turn a CID, ``ipfs://`` URI or http URL into a gateway URL."""
    if ref.startswith("http"):
        return ref
    if ref.startswith("ipfs://"):
        ref = ref[len("ipfs://"):]
    return f"{settings.PINATA_GATEWAY.rstrip('/')}/{ref}"


class IPFSService:
    def __init__(
        self,
        jwt: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._jwt = jwt
        self._transport = transport

    @property
    def jwt(self) -> str:
        return settings.PINATA_JWT if self._jwt is None else self._jwt

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT_SEC, transport=self._transport, **kwargs
        )

    def _pinata_client(self) -> httpx.AsyncClient:
        return self._client(
            base_url=settings.PINATA_API_URL,
            headers={"Authorization": f"Bearer {self.jwt}"},
        )

    def _fallback(self, what: str, reason: str) -> None:
        """Raise unless the mock fallback is allowed."""
        if not settings.MOCK_FALLBACK_ENABLED:
            logger.error("IPFS %s failed: %s", what, reason)
            raise UpstreamServiceError(f"IPFS {what} failed: {reason}")
        logger.warning("IPFS %s failed (%s); returning mock result", what, reason)

    async def upload_image(
        self, data: bytes, filename: str, content_type: str = "image/png"
    ) -> UploadResult:
        if not self.jwt:
            self._fallback("image upload", "PINATA_JWT not configured")
            return _mock_upload()

        try:
            body = await self._pin_file(data, filename, content_type)
            ipfs_hash = body["IpfsHash"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            self._fallback("image upload", repr(exc))
            return _mock_upload()

        logger.info("Pinned image %s as %s", filename, ipfs_hash)
        return UploadResult(hash=ipfs_hash, url=get_ipfs_url(ipfs_hash))

    async def upload_image_from_url(self, image_url: str, filename: str) -> UploadResult:
        try:
            async with self._client(follow_redirects=True) as client:
                resp = await client.get(image_url)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            self._fallback("image download", repr(exc))
            # Keep pointing at the original image
            return UploadResult(hash="mock_hash", url=image_url, mock=True)

        content_type = resp.headers.get("content-type", "image/png").split(";")[0]
        return await self.upload_image(resp.content, filename, content_type)

    async def upload_metadata(self, metadata: NFTMetadata) -> UploadResult:
        content = metadata.model_dump(exclude_none=True)
        if not self.jwt:
            self._fallback("metadata upload", "PINATA_JWT not configured")
            return _mock_metadata(content)

        try:
            body = await self._pin_json(content, name=f"{metadata.name}.json")
            ipfs_hash = body["IpfsHash"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            self._fallback("metadata upload", repr(exc))
            return _mock_metadata(content)

        logger.info("Pinned metadata for '%s' as %s", metadata.name, ipfs_hash)
        return UploadResult(hash=ipfs_hash, url=get_ipfs_url(ipfs_hash))

    async def upload_derivative(
        self, image_url: str, metadata: NFTMetadata
    ) -> tuple[UploadResult, UploadResult]:
        """Pin the image, then the metadata pointing at the pinned image."""
        image_result = await self.upload_image_from_url(
            image_url, f"{metadata.name or 'derivative'}.png"
        )
        complete = metadata.model_copy(
            update={
                "image": image_result.url,
                "created_at": datetime.utcnow().isoformat() + "Z",
            }
        )
        metadata_result = await self.upload_metadata(complete)
        return image_result, metadata_result

    async def fetch_metadata(self, ref: str) -> Optional[NFTMetadata]:
        """Load pinned metadata; None if it cannot be fetched or parsed."""
        try:
            async with self._client(follow_redirects=True) as client:
                resp = await client.get(get_ipfs_url(ref))
                resp.raise_for_status()
            return NFTMetadata.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not fetch metadata %s: %s", ref, exc)
            return None

    @retry_with_backoff()
    async def _pin_file(self, data: bytes, filename: str, content_type: str) -> dict:
        async with self._pinata_client() as client:
            resp = await client.post(
                "/pinning/pinFileToIPFS",
                files={"file": (filename, data, content_type)},
                data={"pinataMetadata": json.dumps({"name": filename})},
            )
            resp.raise_for_status()
            return resp.json()

    @retry_with_backoff()
    async def _pin_json(self, content: dict, name: str) -> dict:
        async with self._pinata_client() as client:
            resp = await client.post(
                "/pinning/pinJSONToIPFS",
                json={"pinataContent": content, "pinataMetadata": {"name": name}},
            )
            resp.raise_for_status()
            return resp.json()


def _mock_upload() -> UploadResult:
    mock_hash = "Qm" + "".join(secrets.choice(_HASH_ALPHABET) for _ in range(13))
    return UploadResult(hash=mock_hash, url=get_ipfs_url(mock_hash), mock=True)


def _mock_metadata(content: dict) -> UploadResult:
    return UploadResult(
        hash="mock_metadata_hash",
        url="data:application/json," + quote(json.dumps(content), safe=""),
        mock=True,
    )


ipfs_service = IPFSService()


def get_ipfs_service() -> IPFSService:
    return ipfs_service
