"""
Chain-ID routing for ownership lookups.

Each chain ID maps to one adapter; unknown or missing IDs fall back to the
default route. Adapter failures never reach the caller: they are logged and
turned into a degraded page (mock data only when MOCK_FALLBACK_ENABLED).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from app.core.config import settings
from app.schemas.nft import NetworkInfo, OwnedNFT, OwnershipPage
from app.services.cache import CacheService
from app.services.ownership.base import BaseOwnershipAdapter, OwnershipLookupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkRoute:
    chain_id: int
    name: str
    adapter: BaseOwnershipAdapter

    def info(self) -> NetworkInfo:
        return NetworkInfo(
            chain_id=self.chain_id,
            name=self.name,
            service=type(self.adapter).__name__.removesuffix("Adapter"),
        )


class OwnershipDispatcher:
    def __init__(self, routes: Iterable[NetworkRoute], default_chain_id: int):
        self.routes: dict[int, NetworkRoute] = {r.chain_id: r for r in routes}
        if default_chain_id not in self.routes:
            raise ValueError(f"Default chain {default_chain_id} has no route")
        self.default_chain_id = default_chain_id

    def resolve(self, chain_id: Optional[int]) -> NetworkRoute:
        route = self.routes.get(chain_id) if chain_id is not None else None
        if route is None:
            default = self.routes[self.default_chain_id]
            logger.info("Chain %s not routed, defaulting to %s", chain_id, default.name)
            return default
        return route

    def supported_networks(self) -> list[NetworkInfo]:
        return [route.info() for route in self.routes.values()]

    async def fetch_owned(
        self,
        owner: str,
        chain_id: Optional[int] = None,
        page_key: Optional[str] = None,
    ) -> OwnershipPage:
        route = self.resolve(chain_id)

        cached = await CacheService.get_ownership(route.chain_id, owner, page_key)
        if cached is not None:
            return cached

        try:
            page = await route.adapter.fetch_owned(owner, page_key)
        except OwnershipLookupError as exc:
            return self._degraded(route, owner, exc)
        except Exception as exc:
            logger.exception("Unexpected error from %s adapter for %s", route.name, owner)
            return self._degraded(route, owner, exc)

        await CacheService.set_ownership(owner, page, page_key)
        return page

    async def fetch_many(self, owner: str, chain_ids: Iterable[int]) -> list[OwnershipPage]:
        """
        Look up several chains concurrently (settle-all).

        Chain IDs resolving to the same route are queried once. A failing
        adapter yields a degraded page; a branch that still raises (e.g. the
        cache layer) is logged and left out of the result.
        """
        routes: dict[int, NetworkRoute] = {}
        for chain_id in chain_ids:
            route = self.resolve(chain_id)
            routes.setdefault(route.chain_id, route)

        results = await asyncio.gather(
            *(self.fetch_owned(owner, chain_id) for chain_id in routes),
            return_exceptions=True,
        )

        pages: list[OwnershipPage] = []
        for route, result in zip(routes.values(), results):
            if isinstance(result, BaseException):
                logger.error(
                    "Ownership lookup on %s failed for %s: %r", route.name, owner, result
                )
                continue
            pages.append(result)
        return pages

    async def fetch_metadata(
        self, contract: str, token_id: str, chain_id: Optional[int] = None
    ) -> Optional[OwnedNFT]:
        route = self.resolve(chain_id)
        try:
            return await route.adapter.fetch_metadata(contract, token_id)
        except OwnershipLookupError as exc:
            logger.warning(
                "Metadata lookup for %s #%s on %s failed: %s",
                contract, token_id, route.name, exc,
            )
            return None
        except Exception:
            logger.exception(
                "Unexpected error looking up %s #%s on %s", contract, token_id, route.name
            )
            return None

    def _degraded(
        self, route: NetworkRoute, owner: str, exc: Exception
    ) -> OwnershipPage:
        if settings.MOCK_FALLBACK_ENABLED:
            nfts = route.adapter.mock_nfts(owner)
            source = "mock"
        else:
            nfts = []
            source = "unavailable"

        logger.warning(
            "Ownership lookup on %s failed for %s (%s); serving %s page",
            route.name, owner, exc, source,
        )
        return OwnershipPage(
            owned_nfts=nfts,
            total_count=len(nfts),
            chain_id=route.chain_id,
            network=route.name,
            source=source,
            degraded=True,
        )
