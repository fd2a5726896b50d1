# This project was developed with assistance from AI tools.
"""Financial report retrieval for underwriting."""

import asyncio

from ..schemas.application import ApplicationResponse
from ..schemas.codat import Report
from .codat import CodatDataClient
from .errors import ApplicationOrchestratorError


async def get_financial_data(
    client: CodatDataClient, application: ApplicationResponse
) -> tuple[Report, Report]:
    """Fetch the profit and loss and balance sheet reports concurrently.

    Both reports cover the twelve months ending at the application's creation
    date. If either request fails the error propagates and neither report is
    returned.

    Returns:
        ``(profit_and_loss, balance_sheet)``
    """
    connection_id = application.accounting_connection
    if connection_id is None:
        raise ApplicationOrchestratorError(
            f"No accounting data connection registered for application id {application.id}"
        )

    profit_and_loss, balance_sheet = await asyncio.gather(
        client.get_previous_twelve_months_enhanced_profit_and_loss(
            application.codat_company_id, connection_id, application.date_created
        ),
        client.get_previous_twelve_months_enhanced_balance_sheet(
            application.codat_company_id, connection_id, application.date_created
        ),
    )
    return profit_and_loss, balance_sheet
