from __future__ import annotations

import pytest
import requests

from tests.samples import LEGACY_TX_HEX
from txdissect.config import ConfigurationError, InspectorConfig
from txdissect.esplora import EsploraClient, EsploraError, EsploraTransportError

TXID = "ab" * 32


class StubResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class StubSession:
    def __init__(self, response: StubResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: StubSession, **config) -> EsploraClient:
    return EsploraClient(InspectorConfig(**config), session=session)


def test_get_tx_hex_requests_raw_endpoint() -> None:
    session = StubSession(StubResponse(text=LEGACY_TX_HEX + "\n"))

    tx_hex = _client(session, esplora_url="https://esplora.example/api/", timeout=4.0).get_tx_hex(
        TXID.upper()
    )

    assert tx_hex == LEGACY_TX_HEX
    assert session.calls == [(f"https://esplora.example/api/tx/{TXID}/hex", 4.0)]


def test_network_selects_default_url() -> None:
    session = StubSession(StubResponse(text="00"))

    _client(session, network="testnet").get_tx_hex(TXID)

    assert session.calls[0][0].startswith("https://mempool.space/testnet/api/tx/")


def test_missing_transaction_reports_404() -> None:
    session = StubSession(StubResponse(status_code=404, text="Transaction not found"))

    with pytest.raises(EsploraError) as excinfo:
        _client(session).get_tx_hex(TXID)

    assert excinfo.value.status_code == 404
    assert not isinstance(excinfo.value, EsploraTransportError)


def test_server_error_includes_status_and_body() -> None:
    session = StubSession(StubResponse(status_code=503, text="overloaded"))

    with pytest.raises(EsploraError, match="HTTP 503: overloaded") as excinfo:
        _client(session).get_tx_hex(TXID)

    assert excinfo.value.status_code == 503


def test_connection_failure_is_a_transport_error() -> None:
    session = StubSession(error=requests.ConnectionError("refused"))

    with pytest.raises(EsploraTransportError, match="Could not reach"):
        _client(session, esplora_url="http://127.0.0.1:1").get_tx_hex(TXID)


def test_empty_body_is_a_transport_error() -> None:
    session = StubSession(StubResponse(text="  \n"))

    with pytest.raises(EsploraTransportError):
        _client(session).get_tx_hex(TXID)


@pytest.mark.parametrize("txid", ["", "abc", "zz" * 32, TXID + "00"])
def test_invalid_txid_is_rejected_without_a_request(txid: str) -> None:
    session = StubSession(StubResponse(text="00"))

    with pytest.raises(EsploraError, match="Invalid txid"):
        _client(session).get_tx_hex(txid)

    assert session.calls == []


def test_regtest_requires_explicit_url() -> None:
    with pytest.raises(ConfigurationError):
        _client(StubSession(), network="regtest")
