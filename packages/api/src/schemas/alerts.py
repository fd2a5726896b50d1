# This project was developed with assistance from AI tools.
"""Inbound Codat webhook alerts.

Codat posts alerts with PascalCase keys; only the fields the orchestrator
reads are modelled, everything else in the payload is ignored.
"""

from datetime import datetime

from . import CodatWebhookModel


class _Alert(CodatWebhookModel):
    company_id: str
    rule_id: str | None = None
    rule_type: str | None = None
    alert_id: str | None = None
    message: str | None = None


class DataConnectionStatusData(CodatWebhookModel):
    data_connection_id: str
    platform_key: str
    platform_name: str | None = None
    new_status: str
    old_status: str | None = None


class DataConnectionStatusAlert(_Alert):
    """A data connection for a company changed status (e.g. became Linked)."""

    data: DataConnectionStatusData


class DataSyncCompleteData(CodatWebhookModel):
    data_type: str
    dataset_id: str | None = None


class DataSyncCompleteAlert(_Alert):
    """A data type finished syncing for one of the company's connections."""

    data_connection_id: str
    data: DataSyncCompleteData


class AccountCategorisationData(CodatWebhookModel):
    modified_date: datetime | None = None


class AccountCategorisationAlert(_Alert):
    """Account categories for a company connection were updated."""

    data_connection_id: str | None = None
    data: AccountCategorisationData | None = None
