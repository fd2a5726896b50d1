# This project was developed with assistance from AI tools.
"""Async client for the Codat REST API.

Wraps a single ``httpx.AsyncClient`` configured with the Codat base URL and
API key. Financial reads cover the twelve monthly periods ending at a report
date, which for the underwriting flow is the application's creation date.
"""

import base64
import logging
from datetime import datetime
from typing import Any

import httpx

from ..core.config import Settings
from ..schemas.codat import Company, FinancialMetrics, Platform, PlatformPage, Report

logger = logging.getLogger(__name__)

_PERIODS = 12
_REPORT_DATE_FORMAT = "%d-%m-%Y"


class CodatClientError(Exception):
    """Raised when Codat returns a non-success response or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _auth_header(api_key: str) -> str:
    return "Basic " + base64.b64encode(api_key.encode()).decode()


class CodatDataClient:
    """Thin wrapper around the Codat endpoints the orchestrator needs."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        platform_page_size: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._platform_page_size = platform_page_size
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": _auth_header(api_key),
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, cfg: Settings) -> "CodatDataClient":
        return cls(
            base_url=cfg.CODAT_BASE_URL,
            api_key=cfg.CODAT_API_KEY,
            timeout=cfg.CODAT_TIMEOUT,
            platform_page_size=cfg.CODAT_PLATFORM_PAGE_SIZE,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_company(self, name: str) -> Company:
        """Create a Codat company; the underwriting flow names it after the application id."""
        data = await self._request("POST", "/companies", json={"name": name})
        company = Company.model_validate(data)
        logger.info("Created Codat company %s (%s)", company.id, name)
        return company

    async def get_accounting_platforms(self) -> list[Platform]:
        """List every integration whose source type is Accounting, across all pages."""
        platforms: list[Platform] = []
        page_number = 1
        while True:
            data = await self._request(
                "GET",
                "/integrations",
                params={
                    "page": page_number,
                    "pageSize": self._platform_page_size,
                    "query": "sourceType=Accounting",
                },
            )
            page = PlatformPage.model_validate(data)
            platforms.extend(page.results)
            if not page.results or len(platforms) >= page.total_results:
                break
            page_number += 1
        logger.debug("Fetched %d accounting platforms", len(platforms))
        return platforms

    async def get_previous_twelve_months_metrics(
        self, company_id: str, connection_id: str, report_date: datetime
    ) -> FinancialMetrics:
        data = await self._request(
            "GET",
            self._assess_path(company_id, connection_id, "financialMetrics"),
            params={**self._period_params(report_date), "showMetricInputs": "false"},
        )
        return FinancialMetrics.model_validate(data)

    async def get_previous_twelve_months_enhanced_profit_and_loss(
        self, company_id: str, connection_id: str, report_date: datetime
    ) -> Report:
        data = await self._request(
            "GET",
            self._assess_path(company_id, connection_id, "enhancedProfitAndLoss"),
            params={**self._period_params(report_date), "includeDisplayNames": "false"},
        )
        return Report.model_validate(data)

    async def get_previous_twelve_months_enhanced_balance_sheet(
        self, company_id: str, connection_id: str, report_date: datetime
    ) -> Report:
        data = await self._request(
            "GET",
            self._assess_path(company_id, connection_id, "enhancedBalanceSheet"),
            params={**self._period_params(report_date), "includeDisplayNames": "false"},
        )
        return Report.model_validate(data)

    @staticmethod
    def _assess_path(company_id: str, connection_id: str, resource: str) -> str:
        return f"/data/companies/{company_id}/connections/{connection_id}/assess/{resource}"

    @staticmethod
    def _period_params(report_date: datetime) -> dict[str, Any]:
        return {
            "reportDate": report_date.strftime(_REPORT_DATE_FORMAT),
            "periodLength": 1,
            "numberOfPeriods": _PERIODS,
            "periodUnit": "Month",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Codat request %s %s failed: %s", method, path, exc)
            raise CodatClientError(f"Codat request {method} {path} failed: {exc}") from exc
        if response.is_error:
            logger.error(
                "Codat request %s %s returned %s", method, path, response.status_code
            )
            raise CodatClientError(
                f"Codat request {method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()
