"""
Module: session.remote

Purpose:
    Thin HTTP client for the append-only stress-map history endpoint.

    POST {base}  body {"entries": [...]}  -> append entries
    GET  {base}                            -> array of entries with createdAt

    The client raises ``requests.RequestException`` on transport or HTTP
    errors; SessionPersistence converts those into results and fallbacks.

Key Classes:
    - RemoteHistoryClient

Dependencies:
    - requests: HTTP session
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
IDEMPOTENCY_HEADER = "Idempotency-Key"


class RemoteHistoryClient:
    """
    HTTP client bound to one history endpoint.

    Args:
        base_url: Full URL of the history resource
        session: Optional requests.Session (injected in tests)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not base_url:
            raise ValueError("base_url cannot be empty")
        self.base_url = base_url
        self.timeout = timeout
        self._session = session or requests.Session()

    def post_entries(self, payload: dict[str, Any], idempotency_key: Optional[str] = None) -> requests.Response:
        """
        POST a commit payload.

        Raises:
            requests.RequestException: Transport failure or non-2xx status
        """
        headers = {IDEMPOTENCY_HEADER: idempotency_key} if idempotency_key else None
        response = self._session.post(
            self.base_url,
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def get_entries(self) -> Any:
        """
        GET the history and return the decoded JSON body.

        Raises:
            requests.RequestException: Transport failure or non-2xx status
            ValueError: Body is not JSON
        """
        response = self._session.get(self.base_url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self._session.close()
