# This project was developed with assistance from AI tools.
"""Automated loan underwriting decision.

A pure computation over the requested loan terms and the applicant's
enhanced profit and loss and balance sheet reports. Three checks must all
pass for approval:

- gross profit margin over the twelve months is at least the minimum;
- the monthly repayment is at most a fixed share of average monthly revenue;
- the gearing ratio (liabilities / equity) at the latest balance sheet date
  is at most the maximum.

Reports that cannot support a decision (no lines, no revenue, no positive
equity) raise ``LoanUnderwriterError``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from db.enums import ApplicationStatus

from ..core.config import Settings
from ..schemas.codat import Report, ReportItem

logger = logging.getLogger(__name__)

_INCOME = "Income"
_EXPENSE = "Expense"
_LIABILITY = "Liability"
_EQUITY = "Equity"
_COST_OF_SALES = "CostOfSales"


class LoanUnderwriterError(Exception):
    """Raised when the reports do not allow a decision to be computed."""

    pass


@dataclass(frozen=True)
class UnderwritingThresholds:
    min_gross_profit_margin: Decimal = Decimal("0.4")
    max_repayment_to_revenue: Decimal = Decimal("0.3")
    max_gearing_ratio: Decimal = Decimal("0.5")

    @classmethod
    def from_settings(cls, cfg: Settings) -> "UnderwritingThresholds":
        return cls(
            min_gross_profit_margin=Decimal(str(cfg.UNDERWRITING_MIN_GROSS_PROFIT_MARGIN)),
            max_repayment_to_revenue=Decimal(str(cfg.UNDERWRITING_MAX_REPAYMENT_TO_REVENUE)),
            max_gearing_ratio=Decimal(str(cfg.UNDERWRITING_MAX_GEARING_RATIO)),
        )


def _matches(item: ReportItem, *levels: str) -> bool:
    category = item.account_category
    if category is None:
        return False
    return all(category.level(i) == name for i, name in enumerate(levels))


def _total(items: list[ReportItem], *levels: str) -> Decimal:
    return sum((i.balance for i in items if _matches(i, *levels)), Decimal("0"))


class LoanUnderwriter:
    """Turns loan terms plus financial reports into an underwriting outcome."""

    def __init__(self, thresholds: UnderwritingThresholds | None = None) -> None:
        self._thresholds = thresholds or UnderwritingThresholds()

    def process(
        self,
        loan_amount: Decimal,
        loan_term: int,
        profit_and_loss: Report,
        balance_sheet: Report,
    ) -> ApplicationStatus:
        if loan_term <= 0:
            raise LoanUnderwriterError(f"Loan term must be positive, got {loan_term}")

        gross_profit_margin, average_monthly_revenue = self._profit_and_loss_inputs(profit_and_loss)
        gearing_ratio = self._gearing_ratio(balance_sheet)
        repayment_to_revenue = (Decimal(loan_amount) / loan_term) / average_monthly_revenue

        checks = {
            "gross_profit_margin": gross_profit_margin >= self._thresholds.min_gross_profit_margin,
            "repayment_to_revenue": repayment_to_revenue
            <= self._thresholds.max_repayment_to_revenue,
            "gearing_ratio": gearing_ratio <= self._thresholds.max_gearing_ratio,
        }
        failed = [name for name, passed in checks.items() if not passed]
        logger.info(
            "Underwriting inputs: margin=%.3f repayment/revenue=%.3f gearing=%.3f failed=%s",
            gross_profit_margin,
            repayment_to_revenue,
            gearing_ratio,
            failed or "none",
        )
        if failed:
            return ApplicationStatus.UNDERWRITING_DECLINED
        return ApplicationStatus.UNDERWRITING_APPROVED

    @staticmethod
    def _profit_and_loss_inputs(report: Report) -> tuple[Decimal, Decimal]:
        """Return (gross profit margin, average monthly revenue)."""
        items = report.report_items
        if not items:
            raise LoanUnderwriterError("Profit and loss report has no lines")

        revenue = _total(items, _INCOME)
        if revenue <= 0:
            raise LoanUnderwriterError("Profit and loss report shows no revenue")
        cost_of_sales = _total(items, _EXPENSE, _COST_OF_SALES)

        months = len({(i.date.year, i.date.month) for i in items})
        return (revenue - cost_of_sales) / revenue, revenue / months

    @staticmethod
    def _gearing_ratio(report: Report) -> Decimal:
        items = report.report_items
        if not items:
            raise LoanUnderwriterError("Balance sheet report has no lines")

        latest: datetime = max(i.date for i in items)
        current = [i for i in items if i.date == latest]
        equity = _total(current, _EQUITY)
        if equity <= 0:
            raise LoanUnderwriterError(
                f"Balance sheet at {latest.date().isoformat()} shows no positive equity"
            )
        return _total(current, _LIABILITY) / equity
