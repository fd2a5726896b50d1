# This project was developed with assistance from AI tools.
"""Codat webhook receivers.

Each endpoint hands the parsed alert to the orchestrator. Alerts that do not
concern the application (non-accounting platforms, stale connections,
unrelated data types) are accepted and ignored.
"""

from fastapi import APIRouter, Depends, Response, status

from ..schemas.alerts import (
    AccountCategorisationAlert,
    DataConnectionStatusAlert,
    DataSyncCompleteAlert,
)
from ..services.orchestrator import ApplicationOrchestrator, get_orchestrator

router = APIRouter()


@router.post("/data-connection-status", status_code=status.HTTP_204_NO_CONTENT)
async def data_connection_status(
    alert: DataConnectionStatusAlert,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> Response:
    await orchestrator.update_data_connection_status(alert)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/datatype-sync-complete", status_code=status.HTTP_204_NO_CONTENT)
async def data_type_sync_complete(
    alert: DataSyncCompleteAlert,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> Response:
    await orchestrator.update_data_type_sync_status(alert)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/account-categorisation-update", status_code=status.HTTP_204_NO_CONTENT)
async def account_categorisation_update(
    alert: AccountCategorisationAlert,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> Response:
    await orchestrator.update_account_categorisation_status(alert)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
