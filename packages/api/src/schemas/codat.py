# This project was developed with assistance from AI tools.
"""Codat REST API payloads used by the underwriting flow."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from . import CodatModel


class Company(CodatModel):
    id: str
    name: str | None = None


class Platform(CodatModel):
    key: str
    name: str | None = None
    source_type: str | None = None


class PlatformPage(CodatModel):
    results: list[Platform] = Field(default_factory=list)
    page_number: int = 1
    page_size: int = 0
    total_results: int = 0


class MetricError(CodatModel):
    type: str
    message: str | None = None


class Metric(CodatModel):
    name: str | None = None
    errors: list[MetricError] | None = None


class FinancialMetrics(CodatModel):
    metrics: list[Metric] | None = None

    def error_types(self) -> set[str]:
        """Every error type reported against any metric."""
        return {e.type for m in self.metrics or [] for e in m.errors or []}


class AccountCategoryLevel(CodatModel):
    level_name: str


class AccountCategory(CodatModel):
    levels: list[AccountCategoryLevel] = Field(default_factory=list)

    def level(self, index: int) -> str | None:
        """Name of the level at ``index`` (0-based), or None when absent."""
        if index < len(self.levels):
            return self.levels[index].level_name
        return None


class ReportItem(CodatModel):
    date: datetime
    account_name: str | None = None
    account_category: AccountCategory | None = None
    balance: Decimal = Decimal("0")


class Report(CodatModel):
    """Enhanced financial report: one item per account per period."""

    report_items: list[ReportItem] = Field(default_factory=list)
