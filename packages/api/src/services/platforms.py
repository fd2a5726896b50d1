# This project was developed with assistance from AI tools.
"""Accounting platform lookup.

Codat alerts identify the connected source by platform key; only accounting
platforms count towards an application's accounting connection. The list of
accounting platform keys is fetched once per cache and reused afterwards.
"""

import asyncio
import logging

from .codat import CodatDataClient

logger = logging.getLogger(__name__)


class AccountingPlatformCache:
    """Lazily loaded, single-flight set of accounting platform keys."""

    def __init__(self, client: CodatDataClient) -> None:
        self._client = client
        self._keys: frozenset[str] | None = None
        self._lock = asyncio.Lock()

    async def is_accounting_platform(self, platform_key: str) -> bool:
        keys = await self._get_keys()
        return platform_key in keys

    async def _get_keys(self) -> frozenset[str]:
        if self._keys is not None:
            return self._keys
        async with self._lock:
            # A concurrent caller may have loaded the keys while we waited
            if self._keys is None:
                platforms = await self._client.get_accounting_platforms()
                self._keys = frozenset(p.key for p in platforms)
                logger.info("Cached %d accounting platform keys", len(self._keys))
        return self._keys
