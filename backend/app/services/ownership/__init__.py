"""
Ownership adapter registry, multi-network.

Routes (chain ID -> indexer):
- 421614 Arbitrum Sepolia: Alchemy (default for unknown chains)
- 1 Ethereum, 137 Polygon, 42161 Arbitrum One, 10 Optimism: Alchemy
- 10143 Monad Testnet: Envio HyperSync (Alchemy does not index it)
"""

import logging
from typing import Optional

import httpx

from app.services.ownership.alchemy import AlchemyAdapter
from app.services.ownership.base import BaseOwnershipAdapter, OwnershipLookupError
from app.services.ownership.dispatcher import NetworkRoute, OwnershipDispatcher
from app.services.ownership.envio import EnvioAdapter

logger = logging.getLogger(__name__)

ARBITRUM_SEPOLIA_CHAIN_ID = 421614
MONAD_TESTNET_CHAIN_ID = 10143
DEFAULT_CHAIN_ID = ARBITRUM_SEPOLIA_CHAIN_ID

# (chain_id, display name, Alchemy subdomain)
ALCHEMY_NETWORKS = [
    (ARBITRUM_SEPOLIA_CHAIN_ID, "Arbitrum Sepolia", "arb-sepolia"),
    (1, "Ethereum", "eth-mainnet"),
    (137, "Polygon", "polygon-mainnet"),
    (42161, "Arbitrum One", "arb-mainnet"),
    (10, "Optimism", "opt-mainnet"),
]


def build_dispatcher(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OwnershipDispatcher:
    routes = [
        NetworkRoute(chain_id, name, AlchemyAdapter(chain_id, name, subdomain, transport=transport))
        for chain_id, name, subdomain in ALCHEMY_NETWORKS
    ]
    routes.append(
        NetworkRoute(
            MONAD_TESTNET_CHAIN_ID,
            "Monad Testnet",
            EnvioAdapter(MONAD_TESTNET_CHAIN_ID, "Monad Testnet", transport=transport),
        )
    )
    return OwnershipDispatcher(routes, default_chain_id=DEFAULT_CHAIN_ID)


ownership_dispatcher = build_dispatcher()

logger.info(
    "Ownership registry initialized: %d networks (default %d)",
    len(ownership_dispatcher.routes),
    DEFAULT_CHAIN_ID,
)


def get_ownership_dispatcher() -> OwnershipDispatcher:
    """FastAPI dependency; overridden in tests."""
    return ownership_dispatcher


__all__ = [
    "ALCHEMY_NETWORKS",
    "DEFAULT_CHAIN_ID",
    "MONAD_TESTNET_CHAIN_ID",
    "AlchemyAdapter",
    "BaseOwnershipAdapter",
    "EnvioAdapter",
    "NetworkRoute",
    "OwnershipDispatcher",
    "OwnershipLookupError",
    "build_dispatcher",
    "get_ownership_dispatcher",
    "ownership_dispatcher",
]
