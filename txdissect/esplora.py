"""Minimal Esplora REST client used to fetch raw transactions by txid.

Only the raw hex endpoint is needed: the decoder works on bytes and never
consults an explorer for anything else.
"""

from __future__ import annotations

import logging
import re

import requests
from requests import RequestException, Response

from .config import InspectorConfig

logger = logging.getLogger(__name__)

_TXID_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class EsploraError(RuntimeError):
    """Raised when the explorer rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EsploraTransportError(EsploraError):
    """Raised when the explorer is unreachable or returns unusable data."""


class EsploraClient:
    """Thin wrapper around ``requests.Session`` for an Esplora-compatible API."""

    def __init__(self, config: InspectorConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session or requests.Session()
        self._base_url = config.base_url

    def _get(self, path: str) -> Response:
        url = f"{self._base_url}{path}"
        logger.debug("Esplora GET %s", url)
        try:
            response = self._session.get(url, timeout=self.config.timeout)
        except RequestException as exc:
            logger.error(
                "Esplora request failed: %s",
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise EsploraTransportError(
                f"Could not reach {self._base_url}; check TXDISSECT_ESPLORA_URL or esplora.url"
            ) from exc
        if response.status_code == 404:
            raise EsploraError(f"Not found: {path}", status_code=404)
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error("Esplora HTTP error %s from %s", response.status_code, url)
            raise EsploraError(
                f"Explorer returned HTTP {response.status_code}: {response.text.strip()[:200]}",
                status_code=response.status_code,
            ) from exc
        return response

    def get_tx_hex(self, txid: str) -> str:
        """Return the raw transaction hex for *txid*."""

        txid = txid.strip()
        if not _TXID_RE.match(txid):
            raise EsploraError(f"Invalid txid: {txid!r}")
        body = self._get(f"/tx/{txid.lower()}/hex").text.strip()
        if not body:
            raise EsploraTransportError(f"Explorer returned an empty body for {txid}")
        return body
