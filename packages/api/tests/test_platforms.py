# This project was developed with assistance from AI tools.
"""Tests for the accounting platform key cache."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.schemas.codat import Platform
from src.services.codat import CodatClientError, CodatDataClient
from src.services.platforms import AccountingPlatformCache


def _client(*keys: str) -> AsyncMock:
    client = AsyncMock(spec=CodatDataClient)
    client.get_accounting_platforms.return_value = [Platform(key=k) for k in keys]
    return client


async def test_known_and_unknown_keys():
    cache = AccountingPlatformCache(_client("gbol", "qhyg"))

    assert await cache.is_accounting_platform("gbol") is True
    assert await cache.is_accounting_platform("qhyg") is True
    assert await cache.is_accounting_platform("stripe") is False


async def test_platforms_fetched_once():
    client = _client("gbol")
    cache = AccountingPlatformCache(client)

    for _ in range(3):
        await cache.is_accounting_platform("gbol")

    client.get_accounting_platforms.assert_awaited_once()


async def test_concurrent_first_lookups_share_one_fetch():
    client = _client("gbol")
    release = asyncio.Event()

    async def _slow_fetch():
        await release.wait()
        return [Platform(key="gbol")]

    client.get_accounting_platforms.side_effect = _slow_fetch
    cache = AccountingPlatformCache(client)

    lookups = [asyncio.create_task(cache.is_accounting_platform("gbol")) for _ in range(5)]
    await asyncio.sleep(0)
    release.set()

    assert await asyncio.gather(*lookups) == [True] * 5
    client.get_accounting_platforms.assert_awaited_once()


async def test_empty_platform_list_is_cached():
    client = _client()
    cache = AccountingPlatformCache(client)

    assert await cache.is_accounting_platform("gbol") is False
    assert await cache.is_accounting_platform("gbol") is False
    client.get_accounting_platforms.assert_awaited_once()


async def test_failed_fetch_is_retried():
    client = _client()
    client.get_accounting_platforms.side_effect = [
        CodatClientError("unavailable", status_code=503),
        [Platform(key="gbol")],
    ]
    cache = AccountingPlatformCache(client)

    with pytest.raises(CodatClientError):
        await cache.is_accounting_platform("gbol")
    assert await cache.is_accounting_platform("gbol") is True
    assert client.get_accounting_platforms.await_count == 2
