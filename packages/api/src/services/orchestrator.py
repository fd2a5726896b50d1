# This project was developed with assistance from AI tools.
"""Underwriting application orchestrator.

Tracks each application's fulfilled data requirements, derives its status
from them, reacts to Codat alerts, and runs the underwriting decision once
every requirement is present.

Status lifecycle::

    created -> collecting_data <-> data_collection_complete -> underwriting
        -> underwriting_approved | underwriting_declined | underwriting_failure

Data-collection writes, the loan form included, only apply while the
application is still collecting data, and entry into ``underwriting`` is a
conditional store update, so a late or duplicated alert never rewinds an
application or underwrites it twice.
"""

import logging
import uuid
from decimal import Decimal

from db.enums import REQUIRED_DATA, ApplicationStatus, DataRequirement

from ..core.config import Settings
from ..schemas.alerts import (
    AccountCategorisationAlert,
    DataConnectionStatusAlert,
    DataSyncCompleteAlert,
)
from ..schemas.application import ApplicationForm, ApplicationResponse, NewApplicationDetails
from .codat import CodatDataClient
from .errors import ApplicationOrchestratorError, ErrorKind
from .financials import get_financial_data
from .platforms import AccountingPlatformCache
from .store import ApplicationStore, ApplicationStoreError
from .underwriter import LoanUnderwriter, LoanUnderwriterError, UnderwritingThresholds

logger = logging.getLogger(__name__)

_MIN_LOAN_TERM_MONTHS = 12
_PENNY = Decimal("0.01")
_MAX_LOAN_AMOUNT = Decimal("9999999999.99")
_LINKED = "Linked"
_UNCATEGORIZED_ACCOUNTS = "UncategorizedAccounts"

_REQUIREMENT_BY_DATA_TYPE: dict[str, DataRequirement] = {
    "chartOfAccounts": DataRequirement.CHART_OF_ACCOUNTS,
    "balanceSheet": DataRequirement.BALANCE_SHEET,
    "profitAndLoss": DataRequirement.PROFIT_AND_LOSS,
}

_COLLECTING = ApplicationStatus.data_collection_statuses()


def _is_valid_form(form: ApplicationForm) -> bool:
    """Amount must be positive and storable in a ``Numeric(12, 2)`` column."""
    amount = form.loan_amount
    if amount <= 0 or amount > _MAX_LOAN_AMOUNT:
        return False
    if amount != amount.quantize(_PENNY):
        return False
    return form.loan_term >= _MIN_LOAN_TERM_MONTHS


def status_for_requirements(requirements: frozenset[DataRequirement]) -> ApplicationStatus:
    """Data-collection status implied by a set of fulfilled requirements."""
    if REQUIRED_DATA <= requirements:
        return ApplicationStatus.DATA_COLLECTION_COMPLETE
    return ApplicationStatus.COLLECTING_DATA


class ApplicationOrchestrator:
    """Coordinates the store, Codat and the underwriter for each application."""

    def __init__(
        self,
        store: ApplicationStore,
        codat_client: CodatDataClient,
        underwriter: LoanUnderwriter,
        platform_cache: AccountingPlatformCache | None = None,
    ) -> None:
        self._store = store
        self._codat = codat_client
        self._underwriter = underwriter
        self._platforms = platform_cache or AccountingPlatformCache(codat_client)

    async def create_application(self) -> NewApplicationDetails:
        application_id = uuid.uuid4()
        company = await self._codat.create_company(str(application_id))
        details = await self._store.create_application(application_id, company.id)
        logger.info("Created application %s for company %s", application_id, company.id)
        return details

    async def aclose(self) -> None:
        await self._codat.aclose()

    async def submit_application_details(
        self, application_id: uuid.UUID, form: ApplicationForm
    ) -> None:
        if not _is_valid_form(form):
            raise ApplicationOrchestratorError(
                "Loan amount and/or term is invalid. Amount must have a positive, non-zero "
                f"value. Term must be at least {_MIN_LOAN_TERM_MONTHS} months",
                ErrorKind.VALIDATION,
            )

        if not await self._store.set_application_form(application_id, form):
            # Raises ApplicationStoreError for an unknown id
            application = await self._store.get_application(application_id)
            raise ApplicationOrchestratorError(
                f"Application {application_id} is {application.status.value}; "
                "its form can no longer be changed."
            )
        application = await self._store.get_application(application_id)
        await self._store.add_fulfilled_requirement_for_company(
            application.codat_company_id, DataRequirement.APPLICATION_DETAILS
        )
        await self._store.transition_status(
            application_id, _COLLECTING, ApplicationStatus.COLLECTING_DATA
        )

        await self._try_underwrite(application_id)

    async def get_application(self, application_id: uuid.UUID) -> ApplicationResponse:
        try:
            return await self._store.get_application(application_id)
        except ApplicationStoreError as e:
            raise ApplicationOrchestratorError(str(e), ErrorKind.NOT_FOUND) from e

    async def get_application_status(self, application_id: uuid.UUID) -> ApplicationStatus:
        try:
            return await self._store.get_application_status(application_id)
        except ApplicationStoreError as e:
            raise ApplicationOrchestratorError(str(e), ErrorKind.NOT_FOUND) from e

    async def update_data_connection_status(self, alert: DataConnectionStatusAlert) -> None:
        if not await self._platforms.is_accounting_platform(alert.data.platform_key):
            logger.debug(
                "Ignoring connection alert for non-accounting platform %s", alert.data.platform_key
            )
            return

        await self._store.set_accounting_connection_for_company(
            alert.company_id, alert.data.data_connection_id
        )
        if alert.data.new_status == _LINKED:
            application = await self._store.get_application_by_company_id(alert.company_id)
            await self._store.transition_status(
                application.id, _COLLECTING, ApplicationStatus.COLLECTING_DATA
            )
            logger.info(
                "Accounting connection %s linked for application %s",
                alert.data.data_connection_id,
                application.id,
            )

    async def update_data_type_sync_status(self, alert: DataSyncCompleteAlert) -> None:
        application = await self._store.get_application_by_company_id(alert.company_id)

        if application.accounting_connection is None:
            raise ApplicationOrchestratorError(
                "Cannot update data type sync status as no accounting data connection "
                f"exists with id {alert.data_connection_id}"
            )
        if application.accounting_connection != alert.data_connection_id:
            logger.debug(
                "Ignoring sync alert for connection %s; application %s uses %s",
                alert.data_connection_id,
                application.id,
                application.accounting_connection,
            )
            return

        requirement = _REQUIREMENT_BY_DATA_TYPE.get(alert.data.data_type)
        if requirement is None:
            return
        await self._store.add_fulfilled_requirement_for_company(alert.company_id, requirement)

        await self._try_underwrite(application.id)

    async def update_account_categorisation_status(
        self, alert: AccountCategorisationAlert
    ) -> None:
        application = await self._store.get_application_by_company_id(alert.company_id)
        if application.accounting_connection is None:
            raise ApplicationOrchestratorError(
                f"No accounting data connection registered for application id {application.id}"
            )

        # Financial metrics report uncategorised accounts as an error on each metric
        metrics = await self._codat.get_previous_twelve_months_metrics(
            application.codat_company_id,
            application.accounting_connection,
            application.date_created,
        )
        if _UNCATEGORIZED_ACCOUNTS not in metrics.error_types():
            await self._store.add_fulfilled_requirement_for_company(
                application.codat_company_id, DataRequirement.ACCOUNTS_CLASSIFIED
            )
        else:
            logger.info("Application %s still has uncategorised accounts", application.id)

        await self._try_underwrite(application.id)

    async def _try_underwrite(self, application_id: uuid.UUID) -> None:
        status = await self._update_status_given_requirements(application_id)
        if status != ApplicationStatus.DATA_COLLECTION_COMPLETE:
            return

        claimed = await self._store.transition_status(
            application_id,
            ApplicationStatus.underwritable_statuses(),
            ApplicationStatus.UNDERWRITING,
        )
        if not claimed:
            logger.info("Application %s is already being underwritten", application_id)
            return
        await self._underwrite(application_id)

    async def _update_status_given_requirements(
        self, application_id: uuid.UUID
    ) -> ApplicationStatus | None:
        """Recompute and store the data-collection status.

        Returns None when the application has already left data collection.
        """
        application = await self._store.get_application(application_id)
        status = status_for_requirements(application.requirements)
        if not await self._store.transition_status(application_id, _COLLECTING, status):
            return None
        return status

    async def _underwrite(self, application_id: uuid.UUID) -> None:
        """Decide an application this caller has claimed for underwriting.

        Any error before the outcome is stored releases the claim back to
        ``data_collection_complete`` so a later alert can retry.
        """
        try:
            application = await self._store.get_application(application_id)
            form = application.form
            if form is None:
                raise ApplicationOrchestratorError(
                    f"No form exists for application {application_id}."
                )
            profit_and_loss, balance_sheet = await get_financial_data(self._codat, application)

            try:
                outcome = self._underwriter.process(
                    form.loan_amount, form.loan_term, profit_and_loss, balance_sheet
                )
            except LoanUnderwriterError as exc:
                logger.warning("Underwriting failed for application %s: %s", application_id, exc)
                outcome = ApplicationStatus.UNDERWRITING_FAILURE

            await self._store.update_application_status(application_id, outcome)
        except Exception:
            logger.warning("Releasing underwriting claim on application %s", application_id)
            await self._store.update_application_status(
                application_id, ApplicationStatus.DATA_COLLECTION_COMPLETE
            )
            raise

        logger.info("Application %s underwritten: %s", application_id, outcome.value)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_orchestrator: ApplicationOrchestrator | None = None


def init_orchestrator(cfg: Settings, store: ApplicationStore) -> ApplicationOrchestrator:
    """Initialise the singleton (called once from app lifespan)."""
    global _orchestrator  # noqa: PLW0603
    _orchestrator = ApplicationOrchestrator(
        store=store,
        codat_client=CodatDataClient.from_settings(cfg),
        underwriter=LoanUnderwriter(UnderwritingThresholds.from_settings(cfg)),
    )
    logger.info("ApplicationOrchestrator initialised (codat=%s)", cfg.CODAT_BASE_URL)
    return _orchestrator


def get_orchestrator() -> ApplicationOrchestrator:
    """Return the initialised ApplicationOrchestrator singleton."""
    if _orchestrator is None:
        raise RuntimeError(
            "ApplicationOrchestrator not initialised -- call init_orchestrator() first"
        )
    return _orchestrator


async def shutdown_orchestrator() -> None:
    global _orchestrator  # noqa: PLW0603
    if _orchestrator is not None:
        await _orchestrator.aclose()
    _orchestrator = None
