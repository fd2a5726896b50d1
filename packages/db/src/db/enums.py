# This project was developed with assistance from AI tools.
"""
Domain enums for the underwriting application lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class ApplicationStatus(str, enum.Enum):
    CREATED = "created"
    COLLECTING_DATA = "collecting_data"
    DATA_COLLECTION_COMPLETE = "data_collection_complete"
    UNDERWRITING = "underwriting"
    UNDERWRITING_APPROVED = "underwriting_approved"
    UNDERWRITING_DECLINED = "underwriting_declined"
    UNDERWRITING_FAILURE = "underwriting_failure"

    @classmethod
    def data_collection_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses in which inbound data may still move the application."""
        return frozenset({cls.CREATED, cls.COLLECTING_DATA, cls.DATA_COLLECTION_COMPLETE})

    @classmethod
    def underwritable_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses from which an application may enter underwriting."""
        return frozenset({cls.COLLECTING_DATA, cls.DATA_COLLECTION_COMPLETE})

    @classmethod
    def outcome_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses the underwriting step can finish in."""
        return frozenset(
            {cls.UNDERWRITING_APPROVED, cls.UNDERWRITING_DECLINED, cls.UNDERWRITING_FAILURE}
        )


class DataRequirement(str, enum.Enum):
    APPLICATION_DETAILS = "application_details"
    CHART_OF_ACCOUNTS = "chart_of_accounts"
    BALANCE_SHEET = "balance_sheet"
    PROFIT_AND_LOSS = "profit_and_loss"
    ACCOUNTS_CLASSIFIED = "accounts_classified"


# Every requirement that must be fulfilled before underwriting can start.
REQUIRED_DATA: frozenset[DataRequirement] = frozenset(
    {
        DataRequirement.APPLICATION_DETAILS,
        DataRequirement.CHART_OF_ACCOUNTS,
        DataRequirement.BALANCE_SHEET,
        DataRequirement.PROFIT_AND_LOSS,
        DataRequirement.ACCOUNTS_CLASSIFIED,
    }
)
