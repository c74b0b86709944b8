"""
Tripletex API client
Thin wrapper over the Tripletex v2 REST API using session-token basic auth
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import httpx

from driftai.core.config import settings

logger = logging.getLogger(__name__)


class TripletexError(Exception):
    """Raised when a Tripletex request fails or cannot be made."""

    def __init__(self, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(f"Tripletex API Error: {status_code or 'Unknown'}")


def fetch_window(today: Optional[date] = None, days: int = settings.TRIPLETEX_FETCH_DAYS) -> Tuple[str, str]:
    """Inclusive (dateFrom, dateTo) ISO range covering the last `days` days."""
    today = today or date.today()
    return (today - timedelta(days=days)).isoformat(), today.isoformat()


class TripletexClient:
    def __init__(
        self,
        session_token: str,
        base_url: str = settings.TRIPLETEX_BASE_URL,
        page_size: int = settings.TRIPLETEX_PAGE_SIZE,
        timeout: float = settings.TRIPLETEX_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.session_token = session_token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._timeout = timeout
        self._transport = transport

    def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        # Tripletex expects company id 0 (the token's own company) as the username
        auth = httpx.BasicAuth("0", self.session_token)
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(f"{self.base_url}{endpoint}", params=params or {}, auth=auth)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Tripletex {endpoint} returned {e.response.status_code}: {e.response.text[:200]}")
            raise TripletexError(e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Tripletex {endpoint} request failed: {str(e)}")
            raise TripletexError() from e

    def get_accounts(self) -> Dict[str, Any]:
        return self._request("/ledger/account", {"count": self.page_size})

    def get_transactions(self, date_from: str, date_to: str) -> Dict[str, Any]:
        return self._request(
            "/ledger/voucher",
            {"dateFrom": date_from, "dateTo": date_to, "count": self.page_size},
        )

    def get_customers(self) -> Dict[str, Any]:
        return self._request("/customer", {"count": self.page_size})

    def get_suppliers(self) -> Dict[str, Any]:
        return self._request("/supplier", {"count": self.page_size})

    def list_transactions(self, date_from: str, date_to: str) -> List[Dict[str, Any]]:
        """Transactions in the range as a plain list (the response's `values`)."""
        payload = self.get_transactions(date_from, date_to)
        return payload.get("values") or []
