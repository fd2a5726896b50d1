# This project was developed with assistance from AI tools.
"""Application store backed by SQLAlchemy.

Every method opens its own short-lived session and commits before returning,
so the orchestrator never holds a session across awaits on the Codat API.
Status changes that must not race use ``transition_status``, a single
conditional UPDATE that reports whether it matched the row.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime

from db import Application, FulfilledRequirement
from db.enums import ApplicationStatus, DataRequirement
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..schemas.application import ApplicationForm, ApplicationResponse, NewApplicationDetails

logger = logging.getLogger(__name__)


class ApplicationStoreError(LookupError):
    """Raised when no application matches the given id or company id."""

    pass


class ApplicationStore:
    """Persists applications and their fulfilled data requirements."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_application(
        self, application_id: uuid.UUID, company_id: str
    ) -> NewApplicationDetails:
        async with self._session_factory() as session:
            session.add(
                Application(
                    id=application_id,
                    codat_company_id=company_id,
                    status=ApplicationStatus.CREATED,
                    created_at=datetime.now(UTC),
                )
            )
            await session.commit()
        return NewApplicationDetails(id=application_id, codat_company_id=company_id)

    async def get_application(self, application_id: uuid.UUID) -> ApplicationResponse:
        async with self._session_factory() as session:
            app = await self._load(session, Application.id == application_id, application_id)
            return ApplicationResponse.from_orm_application(app)

    async def get_application_by_company_id(self, company_id: str) -> ApplicationResponse:
        async with self._session_factory() as session:
            app = await self._load(
                session, Application.codat_company_id == company_id, company_id, by="company id"
            )
            return ApplicationResponse.from_orm_application(app)

    async def get_application_status(self, application_id: uuid.UUID) -> ApplicationStatus:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Application.status).where(Application.id == application_id)
            )
            status = result.scalar_one_or_none()
        if status is None:
            raise ApplicationStoreError(f"No application exists with id {application_id}")
        return status

    async def set_application_form(self, application_id: uuid.UUID, form: ApplicationForm) -> bool:
        """Store the loan terms while the application is still collecting data.

        Returns False when no application with ``application_id`` is in a
        data-collection status, leaving any stored form untouched.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                update(Application)
                .where(
                    Application.id == application_id,
                    Application.status.in_(list(ApplicationStatus.data_collection_statuses())),
                )
                .values(loan_amount=form.loan_amount, loan_term=form.loan_term)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        return result.rowcount == 1

    async def set_accounting_connection_for_company(
        self, company_id: str, connection_id: str
    ) -> None:
        async with self._session_factory() as session:
            app = await self._load(
                session, Application.codat_company_id == company_id, company_id, by="company id"
            )
            app.accounting_connection_id = connection_id
            await session.commit()

    async def add_fulfilled_requirement_for_company(
        self, company_id: str, requirement: DataRequirement
    ) -> None:
        """Record ``requirement`` as fulfilled; a no-op if it already is."""
        async with self._session_factory() as session:
            app = await self._load(
                session, Application.codat_company_id == company_id, company_id, by="company id"
            )
            if any(r.requirement == requirement for r in app.requirements):
                return
            session.add(FulfilledRequirement(application_id=app.id, requirement=requirement))
            try:
                await session.commit()
            except IntegrityError:
                # Another writer recorded the same requirement first
                await session.rollback()
                logger.debug(
                    "Requirement %s already fulfilled for company %s",
                    requirement.value,
                    company_id,
                )

    async def update_application_status(
        self, application_id: uuid.UUID, status: ApplicationStatus
    ) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(Application)
                .where(Application.id == application_id)
                .values(status=status)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        if result.rowcount == 0:
            raise ApplicationStoreError(f"No application exists with id {application_id}")

    async def transition_status(
        self,
        application_id: uuid.UUID,
        from_statuses: Iterable[ApplicationStatus],
        to_status: ApplicationStatus,
    ) -> bool:
        """Set ``to_status`` only if the current status is in ``from_statuses``.

        Returns True when this call made the change. Exactly one of several
        concurrent callers racing for the same transition gets True.
        """
        allowed = list(from_statuses)
        async with self._session_factory() as session:
            result = await session.execute(
                update(Application)
                .where(Application.id == application_id, Application.status.in_(allowed))
                .values(status=to_status)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        return result.rowcount == 1

    @staticmethod
    async def _load(session: AsyncSession, clause, key, by: str = "id") -> Application:
        result = await session.execute(select(Application).where(clause))
        app = result.scalar_one_or_none()
        if app is None:
            raise ApplicationStoreError(f"No application exists with {by} {key}")
        return app
