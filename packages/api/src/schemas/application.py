# This project was developed with assistance from AI tools.
"""Application request/response schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from db import Application
from db.enums import ApplicationStatus, DataRequirement
from pydantic import BaseModel, ConfigDict


class ApplicationForm(BaseModel):
    """Loan terms submitted by the applicant.

    Bounds are checked by the orchestrator so an invalid form is reported
    with the domain validation message rather than a schema error.
    """

    loan_amount: Decimal
    loan_term: int


class NewApplicationDetails(BaseModel):
    """Identifiers handed back when an application is started."""

    id: uuid.UUID
    codat_company_id: str


class ApplicationResponse(BaseModel):
    """Single application, as read from the store."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    codat_company_id: str
    accounting_connection: str | None = None
    form: ApplicationForm | None = None
    requirements: frozenset[DataRequirement] = frozenset()
    status: ApplicationStatus
    date_created: datetime

    @classmethod
    def from_orm_application(cls, app: Application) -> "ApplicationResponse":
        """Build from an ORM row whose requirements are already loaded."""
        form = None
        if app.loan_amount is not None and app.loan_term is not None:
            form = ApplicationForm(loan_amount=app.loan_amount, loan_term=app.loan_term)
        return cls(
            id=app.id,
            codat_company_id=app.codat_company_id,
            accounting_connection=app.accounting_connection_id,
            form=form,
            requirements=frozenset(r.requirement for r in app.requirements),
            status=app.status,
            date_created=app.created_at,
        )


class ApplicationStatusResponse(BaseModel):
    """Current lifecycle status of an application."""

    application_id: uuid.UUID
    status: ApplicationStatus
