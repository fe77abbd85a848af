from app.models.base import Base
from app.models.draft import DerivativeDraft
from app.models.listing import MarketplaceListing
from app.models.minted import MintedNFT

__all__ = ["Base", "DerivativeDraft", "MarketplaceListing", "MintedNFT"]
