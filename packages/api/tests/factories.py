# This project was developed with assistance from AI tools.
"""Shared test factory functions for reports, alerts and application records."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from db.enums import ApplicationStatus, DataRequirement

from src.schemas.alerts import (
    AccountCategorisationAlert,
    DataConnectionStatusAlert,
    DataSyncCompleteAlert,
)
from src.schemas.application import ApplicationForm, ApplicationResponse
from src.schemas.codat import AccountCategory, AccountCategoryLevel, Report, ReportItem

ACCOUNTING_PLATFORM = "gbol"
CONNECTION_ID = "connection-1"
COMPANY_ID = "company-1"


def make_item(date: datetime, balance, *levels: str) -> ReportItem:
    return ReportItem(
        date=date,
        balance=Decimal(str(balance)),
        account_category=AccountCategory(
            levels=[AccountCategoryLevel(level_name=name) for name in levels]
        ),
    )


def make_profit_and_loss(
    monthly_revenue, monthly_cost_of_sales, months: int = 12, monthly_overheads=0
) -> Report:
    """Build a P&L with identical figures for each of ``months`` months of 2025."""
    items = []
    for month in range(1, months + 1):
        date = datetime(2025, month, 1, tzinfo=UTC)
        items.append(make_item(date, monthly_revenue, "Income", "Revenue"))
        items.append(make_item(date, monthly_cost_of_sales, "Expense", "CostOfSales"))
        if monthly_overheads:
            items.append(make_item(date, monthly_overheads, "Expense", "Overheads"))
    return Report(report_items=items)


def make_balance_sheet(liabilities, equity, assets=None) -> Report:
    """Build a balance sheet with an older and a latest period."""
    older = datetime(2025, 11, 30, tzinfo=UTC)
    latest = datetime(2025, 12, 31, tzinfo=UTC)
    assets = liabilities + equity if assets is None else assets
    items = []
    # The older period would fail gearing; only the latest counts
    items.append(make_item(older, 1_000_000, "Liability", "NonCurrent"))
    items.append(make_item(older, 1, "Equity", "ShareCapital"))
    items.append(make_item(latest, assets, "Asset", "Current"))
    items.append(make_item(latest, liabilities, "Liability", "NonCurrent"))
    items.append(make_item(latest, equity, "Equity", "ShareCapital"))
    return Report(report_items=items)


def approving_profit_and_loss() -> Report:
    # 50% gross margin, 10k monthly revenue
    return make_profit_and_loss(monthly_revenue=10_000, monthly_cost_of_sales=5_000)


def approving_balance_sheet() -> Report:
    # gearing 0.25
    return make_balance_sheet(liabilities=25_000, equity=100_000)


def make_application(
    *,
    requirements=(),
    status: ApplicationStatus = ApplicationStatus.COLLECTING_DATA,
    accounting_connection: str | None = CONNECTION_ID,
    form: ApplicationForm | None = None,
    company_id: str = COMPANY_ID,
) -> ApplicationResponse:
    return ApplicationResponse(
        id=uuid.uuid4(),
        codat_company_id=company_id,
        accounting_connection=accounting_connection,
        form=form,
        requirements=frozenset(requirements),
        status=status,
        date_created=datetime(2026, 1, 15, tzinfo=UTC),
    )


def valid_form() -> ApplicationForm:
    return ApplicationForm(loan_amount=Decimal("10000"), loan_term=12)


ALL_BUT_APPLICATION_DETAILS = frozenset(
    {
        DataRequirement.CHART_OF_ACCOUNTS,
        DataRequirement.BALANCE_SHEET,
        DataRequirement.PROFIT_AND_LOSS,
        DataRequirement.ACCOUNTS_CLASSIFIED,
    }
)


def connection_alert(
    new_status: str = "Linked",
    platform_key: str = ACCOUNTING_PLATFORM,
    connection_id: str = CONNECTION_ID,
    company_id: str = COMPANY_ID,
) -> DataConnectionStatusAlert:
    return DataConnectionStatusAlert.model_validate(
        {
            "CompanyId": company_id,
            "RuleType": "DataConnectionStatusChanged",
            "Data": {
                "DataConnectionId": connection_id,
                "PlatformKey": platform_key,
                "NewStatus": new_status,
                "OldStatus": "PendingAuth",
            },
        }
    )


def sync_alert(
    data_type: str,
    connection_id: str = CONNECTION_ID,
    company_id: str = COMPANY_ID,
) -> DataSyncCompleteAlert:
    return DataSyncCompleteAlert.model_validate(
        {
            "CompanyId": company_id,
            "DataConnectionId": connection_id,
            "RuleType": "Data sync completed",
            "Data": {"DataType": data_type, "DatasetId": "dataset-1"},
        }
    )


def categorisation_alert(company_id: str = COMPANY_ID) -> AccountCategorisationAlert:
    return AccountCategorisationAlert.model_validate(
        {
            "CompanyId": company_id,
            "DataConnectionId": CONNECTION_ID,
            "RuleType": "Account categories updated",
            "Data": {"ModifiedDate": "2026-01-16T09:30:00Z"},
        }
    )
