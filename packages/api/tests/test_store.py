# This project was developed with assistance from AI tools.
"""Tests for ApplicationStore against SQLite."""

import asyncio
import uuid
from decimal import Decimal

import pytest
from db.enums import ApplicationStatus, DataRequirement

from src.schemas.application import ApplicationForm
from src.services.store import ApplicationStoreError

from factories import COMPANY_ID, CONNECTION_ID


@pytest.fixture
async def application_id(store):
    application_id = uuid.uuid4()
    await store.create_application(application_id, COMPANY_ID)
    return application_id


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


async def test_create_application(store):
    application_id = uuid.uuid4()

    details = await store.create_application(application_id, COMPANY_ID)

    assert details.id == application_id
    assert details.codat_company_id == COMPANY_ID
    application = await store.get_application(application_id)
    assert application.status == ApplicationStatus.CREATED
    assert application.date_created is not None


async def test_get_application_by_company_id(store, application_id):
    application = await store.get_application_by_company_id(COMPANY_ID)
    assert application.id == application_id


async def test_missing_application_raises(store):
    missing = uuid.uuid4()

    with pytest.raises(ApplicationStoreError, match=str(missing)):
        await store.get_application(missing)
    with pytest.raises(ApplicationStoreError, match="company id nobody"):
        await store.get_application_by_company_id("nobody")
    with pytest.raises(ApplicationStoreError):
        await store.get_application_status(missing)
    with pytest.raises(ApplicationStoreError):
        await store.update_application_status(missing, ApplicationStatus.UNDERWRITING)


async def test_set_application_form(store, application_id):
    stored = await store.set_application_form(
        application_id, ApplicationForm(loan_amount=Decimal("25000.50"), loan_term=36)
    )

    assert stored is True
    form = (await store.get_application(application_id)).form
    assert form.loan_amount == Decimal("25000.50")
    assert form.loan_term == 36


async def test_set_application_form_after_collection_keeps_terms(store, application_id):
    await store.set_application_form(
        application_id, ApplicationForm(loan_amount=Decimal("10000"), loan_term=12)
    )
    await store.update_application_status(application_id, ApplicationStatus.UNDERWRITING_APPROVED)

    stored = await store.set_application_form(
        application_id, ApplicationForm(loan_amount=Decimal("99999999"), loan_term=60)
    )

    assert stored is False
    form = (await store.get_application(application_id)).form
    assert form.loan_amount == Decimal("10000")
    assert form.loan_term == 12


async def test_set_application_form_unknown_application(store):
    form = ApplicationForm(loan_amount=Decimal("10000"), loan_term=12)
    assert await store.set_application_form(uuid.uuid4(), form) is False


async def test_set_accounting_connection_overwrites(store, application_id):
    await store.set_accounting_connection_for_company(COMPANY_ID, CONNECTION_ID)
    await store.set_accounting_connection_for_company(COMPANY_ID, "connection-2")

    application = await store.get_application(application_id)
    assert application.accounting_connection == "connection-2"


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------


async def test_add_fulfilled_requirement_is_idempotent(store, application_id):
    await store.add_fulfilled_requirement_for_company(COMPANY_ID, DataRequirement.BALANCE_SHEET)
    await store.add_fulfilled_requirement_for_company(COMPANY_ID, DataRequirement.BALANCE_SHEET)
    await store.add_fulfilled_requirement_for_company(COMPANY_ID, DataRequirement.PROFIT_AND_LOSS)

    application = await store.get_application(application_id)
    assert application.requirements == {
        DataRequirement.BALANCE_SHEET,
        DataRequirement.PROFIT_AND_LOSS,
    }


async def test_concurrent_duplicate_requirements_are_recorded_once(store, application_id):
    await asyncio.gather(
        *(
            store.add_fulfilled_requirement_for_company(COMPANY_ID, DataRequirement.CHART_OF_ACCOUNTS)
            for _ in range(3)
        )
    )

    application = await store.get_application(application_id)
    assert application.requirements == {DataRequirement.CHART_OF_ACCOUNTS}


async def test_add_requirement_for_unknown_company_raises(store):
    with pytest.raises(ApplicationStoreError):
        await store.add_fulfilled_requirement_for_company("nobody", DataRequirement.BALANCE_SHEET)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


async def test_update_application_status(store, application_id):
    await store.update_application_status(application_id, ApplicationStatus.UNDERWRITING_FAILURE)

    assert await store.get_application_status(application_id) == (
        ApplicationStatus.UNDERWRITING_FAILURE
    )


async def test_transition_status_applies_from_allowed_status(store, application_id):
    changed = await store.transition_status(
        application_id,
        ApplicationStatus.data_collection_statuses(),
        ApplicationStatus.COLLECTING_DATA,
    )

    assert changed is True
    assert await store.get_application_status(application_id) == ApplicationStatus.COLLECTING_DATA


async def test_transition_status_skips_other_status(store, application_id):
    await store.update_application_status(application_id, ApplicationStatus.UNDERWRITING_APPROVED)

    changed = await store.transition_status(
        application_id,
        ApplicationStatus.data_collection_statuses(),
        ApplicationStatus.COLLECTING_DATA,
    )

    assert changed is False
    assert await store.get_application_status(application_id) == (
        ApplicationStatus.UNDERWRITING_APPROVED
    )


async def test_transition_status_has_a_single_winner(store, application_id):
    await store.update_application_status(
        application_id, ApplicationStatus.DATA_COLLECTION_COMPLETE
    )

    results = await asyncio.gather(
        *(
            store.transition_status(
                application_id,
                ApplicationStatus.underwritable_statuses(),
                ApplicationStatus.UNDERWRITING,
            )
            for _ in range(4)
        )
    )

    assert sorted(results) == [False, False, False, True]
    assert await store.get_application_status(application_id) == ApplicationStatus.UNDERWRITING


async def test_transition_status_unknown_application(store):
    changed = await store.transition_status(
        uuid.uuid4(), ApplicationStatus.data_collection_statuses(), ApplicationStatus.COLLECTING_DATA
    )
    assert changed is False
