"""
api_client.py

Responsibility: send HTTP requests to the selected hosting platform.

This module is the only place that touches the network. What a response
means is decided by the provider (`HostingProvider.classify_response`);
this client just attaches credentials, sends, and hands back the text.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog

from repocreate.errors import ApiError
from repocreate.preflight import Credential
from repocreate.providers import HostingProvider

logger = structlog.get_logger(__name__)


class ApiClient:
    def __init__(
        self,
        provider: HostingProvider,
        credential: Credential,
        session: requests.Session | None = None,
    ) -> None:
        self._provider = provider
        self._credential = credential
        self._session = session or requests.Session()

    def request(self, method: str, url: str, *, json_body: dict[str, Any] | None = None) -> str:
        """
        Send one request and return the classified response body as text.

        Transport failures become `ApiError`; everything else is left to the
        provider's classification.
        """
        headers = self._provider.auth_headers(self._credential.value)
        logger.debug("Sending API request", method=method, url=url)
        try:
            r = self._session.request(method, url, headers=headers, json=json_body, allow_redirects=True)
        except requests.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        logger.debug("Received API response", method=method, url=url, status_code=r.status_code)
        return self._provider.classify_response(r.text)
