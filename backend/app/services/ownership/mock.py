"""
Static placeholder NFTs for development and the explicit mock fallback.

Never returned unless settings.MOCK_FALLBACK_ENABLED is set.
"""

import base64
from datetime import datetime

from app.schemas.nft import NFTAttribute, OwnedNFT

MOCK_CONTRACT_A = "0x1234567890123456789012345678901234567890"
MOCK_CONTRACT_B = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"


def placeholder_image(bg: str, fg: str, text: str, size: int = 400) -> str:
    return f"https://via.placeholder.com/{size}x{size}/{bg}/{fg}?text={text.replace(' ', '+')}"


def svg_data_uri(color: str, text: str) -> str:
    svg = (
        '<svg width="400" height="400" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="400" height="400" fill="{color}"/>'
        '<text x="200" y="200" font-family="Arial" font-size="24" fill="white" '
        f'text-anchor="middle" dominant-baseline="middle">{text}</text>'
        "</svg>"
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode()).decode()


def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"


def mock_evm_nfts() -> list[OwnedNFT]:
    """Three generic tokens across two contracts."""
    specs = [
        (MOCK_CONTRACT_A, "1", "00ff41", "A mock NFT for testing purposes", "Common"),
        (MOCK_CONTRACT_A, "2", "ff007f", "Another mock NFT for testing", "Rare"),
        (MOCK_CONTRACT_B, "3", "00ffff", "A third mock NFT", "Epic"),
    ]
    return [
        OwnedNFT(
            contract_address=contract,
            token_id=token_id,
            name=f"Mock NFT #{token_id}",
            description=description,
            image_url=placeholder_image(color, "000000", f"Mock NFT {token_id}"),
            attributes=[
                NFTAttribute(trait_type="Type", value="Mock"),
                NFTAttribute(trait_type="Rarity", value=rarity),
            ],
            time_last_updated=_now(),
        )
        for contract, token_id, color, description, rarity in specs
    ]


def mock_monad_nfts() -> list[OwnedNFT]:
    # data: URIs so the gallery renders without reaching a placeholder host
    return [
        OwnedNFT(
            contract_address=MOCK_CONTRACT_A,
            token_id="1",
            name="Monad Test NFT #1",
            description="A test NFT minted on Monad Testnet via Magic Eden",
            image_url=svg_data_uri("#9945FF", "Monad NFT 1"),
            attributes=[
                NFTAttribute(trait_type="Network", value="Monad Testnet"),
                NFTAttribute(trait_type="Marketplace", value="Magic Eden"),
                NFTAttribute(trait_type="Rarity", value="Common"),
            ],
            time_last_updated=_now(),
        ),
        OwnedNFT(
            contract_address=MOCK_CONTRACT_B,
            token_id="42",
            name="Monad Collection #42",
            description="Part of a special Monad NFT collection",
            image_url=svg_data_uri("#FF6B9D", "Monad 42"),
            attributes=[
                NFTAttribute(trait_type="Network", value="Monad Testnet"),
                NFTAttribute(trait_type="Collection", value="Special"),
                NFTAttribute(trait_type="Rarity", value="Rare"),
            ],
            time_last_updated=_now(),
        ),
    ]
