# This project was developed with assistance from AI tools.
"""Shared fixtures: an in-memory SQLite store and Codat/underwriter doubles."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from db import DatabaseService

from src.schemas.codat import Company, FinancialMetrics, Platform
from src.services.codat import CodatDataClient
from src.services.orchestrator import ApplicationOrchestrator
from src.services.store import ApplicationStore
from src.services.underwriter import LoanUnderwriter

from factories import ACCOUNTING_PLATFORM, approving_balance_sheet, approving_profit_and_loss


@pytest_asyncio.fixture
async def db_service(tmp_path):
    """Fresh SQLite database file per test, one connection per session."""
    service = DatabaseService(f"sqlite+aiosqlite:///{tmp_path / 'underwriting.db'}")
    await service.init_db()
    yield service
    await service.dispose()


@pytest.fixture
def store(db_service):
    return ApplicationStore(db_service.session_factory)


@pytest.fixture
def codat_client():
    """CodatDataClient double returning data that leads to an approval."""
    client = AsyncMock(spec=CodatDataClient)
    client.create_company.return_value = Company(id="company-1")
    client.get_accounting_platforms.return_value = [
        Platform(key=ACCOUNTING_PLATFORM, source_type="Accounting")
    ]
    client.get_previous_twelve_months_metrics.return_value = FinancialMetrics(metrics=[])
    client.get_previous_twelve_months_enhanced_profit_and_loss.return_value = (
        approving_profit_and_loss()
    )
    client.get_previous_twelve_months_enhanced_balance_sheet.return_value = (
        approving_balance_sheet()
    )
    return client


@pytest.fixture
def underwriter():
    """Real underwriter wrapped so calls can be counted."""
    return MagicMock(wraps=LoanUnderwriter())


@pytest.fixture
def orchestrator(store, codat_client, underwriter):
    return ApplicationOrchestrator(store, codat_client, underwriter)
