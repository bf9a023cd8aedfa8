from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from domain.ledger import AccountId, EntryKind, LedgerEntry

logger = logging.getLogger(__name__)


class FinanceAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class FinanceAPIClient:
    """Reads account ledgers from the finance backend."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            msg = "base_url must be provided"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_account_ledger(self, account_id: AccountId) -> list[LedgerEntry]:
        payload = self._request("GET", f"/bank-accounts/{account_id}/ledger")
        if not isinstance(payload, list):
            raise FinanceAPIError("Finance API returned unexpected payload type", payload=payload)

        entries = [self._parse_row(row) for row in payload]
        logger.info("Fetched %d ledger rows for account=%s", len(entries), account_id)
        return entries

    def _request(self, method: str, path: str) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._session.request(method, url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            payload: Any | None = None
            if resp is not None:
                try:
                    payload = resp.json()
                except ValueError:
                    payload = resp.text
            raise FinanceAPIError("Finance API request failed", status_code=status_code, payload=payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise FinanceAPIError("Finance API request failed", status_code=status_code) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise FinanceAPIError("Finance API returned invalid JSON", payload=response.text) from exc

    @classmethod
    def _parse_row(cls, row: Any) -> LedgerEntry:
        if not isinstance(row, dict) or not row.get("date"):
            raise FinanceAPIError("Finance API ledger row missing required fields", payload=row)

        kind_raw = str(row.get("kind") or "").upper()
        kind = EntryKind(kind_raw) if kind_raw in EntryKind.__members__ else EntryKind.JOURNAL
        return LedgerEntry(
            occurred_at=cls._to_date(row["date"], row),
            kind=kind,
            debit_amount=cls._to_amount(row.get("debit"), row),
            credit_amount=cls._to_amount(row.get("credit"), row),
            note=str(row.get("description") or row.get("narration") or ""),
        )

    @staticmethod
    def _to_date(value: Any, row: Any) -> date:
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise FinanceAPIError(f"Finance API ledger row has invalid date {value!r}", payload=row) from exc

    @staticmethod
    def _to_amount(value: Any, row: Any) -> Decimal | None:
        # The backend sends "" for an empty debit/credit column.
        if value is None or value == "":
            return None
        try:
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise FinanceAPIError(f"Finance API ledger row has invalid amount {value!r}", payload=row) from exc
        return amount or None


__all__ = ["FinanceAPIClient", "FinanceAPIError"]
