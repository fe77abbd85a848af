"""
NFT endpoints: live ownership through the indexer dispatcher, plus the
off-chain log of minted derivatives.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import InvalidInputError, NotFoundError
from app.schemas.common import is_valid_address
from app.schemas.minted import (
    MintedNFTListResponse,
    MintedNFTOut,
    MintedNFTResponse,
    RecordMintRequest,
)
from app.schemas.nft import (
    MultichainOwnershipResponse,
    NetworkListResponse,
    NFTMetadataResponse,
    OwnershipResponse,
)
from app.services.minted import list_minted, record_mint
from app.services.ownership import (
    DEFAULT_CHAIN_ID,
    MONAD_TESTNET_CHAIN_ID,
    OwnershipDispatcher,
    get_ownership_dispatcher,
)

router = APIRouter(prefix="/nfts", tags=["nfts"])

# Chains the gallery shows when the client does not pick any
DEFAULT_MULTICHAIN_IDS = [DEFAULT_CHAIN_ID, MONAD_TESTNET_CHAIN_ID]


def _require_wallet(wallet: Optional[str]) -> str:
    if not wallet:
        raise InvalidInputError("Wallet address is required")
    if not is_valid_address(wallet):
        raise InvalidInputError("Invalid wallet address")
    return wallet.lower()


def _parse_chain_ids(raw: Optional[str]) -> list[int]:
    if not raw:
        return list(DEFAULT_MULTICHAIN_IDS)
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise InvalidInputError("chainIds must be a comma-separated list of integers")


@router.get("", response_model=OwnershipResponse)
async def get_owned_nfts(
    wallet: Optional[str] = Query(None),
    chain_id: Optional[int] = Query(None, alias="chainId"),
    page_key: Optional[str] = Query(None, alias="pageKey"),
    dispatcher: OwnershipDispatcher = Depends(get_ownership_dispatcher),
):
    """
    NFTs currently held by a wallet on one chain.

    Unknown chainId values use the default network. Indexer failures give a
    200 with ``degraded: true`` instead of an error.
    """
    owner = _require_wallet(wallet)
    page = await dispatcher.fetch_owned(owner, chain_id=chain_id, page_key=page_key)
    return OwnershipResponse(data=page)


@router.get("/multichain", response_model=MultichainOwnershipResponse)
async def get_owned_nfts_multichain(
    wallet: Optional[str] = Query(None),
    chain_ids: Optional[str] = Query(None, alias="chainIds", description="e.g. 421614,10143"),
    dispatcher: OwnershipDispatcher = Depends(get_ownership_dispatcher),
):
    """Holdings on several chains, fetched concurrently; failed chains are omitted."""
    owner = _require_wallet(wallet)
    pages = await dispatcher.fetch_many(owner, _parse_chain_ids(chain_ids))
    return MultichainOwnershipResponse(data=pages)


@router.get("/networks", response_model=NetworkListResponse)
async def get_networks(
    dispatcher: OwnershipDispatcher = Depends(get_ownership_dispatcher),
):
    return NetworkListResponse(
        default_chain_id=dispatcher.default_chain_id,
        networks=dispatcher.supported_networks(),
    )


@router.get("/metadata", response_model=NFTMetadataResponse)
async def get_nft_metadata(
    contract: str = Query(...),
    token_id: str = Query(..., alias="tokenId"),
    chain_id: Optional[int] = Query(None, alias="chainId"),
    dispatcher: OwnershipDispatcher = Depends(get_ownership_dispatcher),
):
    if not is_valid_address(contract):
        raise InvalidInputError("Invalid contract address")
    nft = await dispatcher.fetch_metadata(contract.lower(), token_id, chain_id=chain_id)
    if nft is None:
        raise NotFoundError("NFT metadata not found")
    return NFTMetadataResponse(nft=nft)


@router.post("/minted", response_model=MintedNFTResponse)
async def record_minted_nft(
    body: RecordMintRequest,
    session: AsyncSession = Depends(get_session),
):
    """Record a mint; 409 if (tokenId, contractAddress) is already recorded."""
    minted = await record_mint(session, body)
    return MintedNFTResponse(minted_nft=MintedNFTOut.model_validate(minted))


@router.get("/minted", response_model=MintedNFTListResponse)
async def list_minted_nfts(
    wallet: Optional[str] = Query(None),
    contract: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    minted = await list_minted(session, wallet=wallet, contract=contract)
    return MintedNFTListResponse(minted_nfts=[MintedNFTOut.model_validate(m) for m in minted])
