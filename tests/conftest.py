from __future__ import annotations

import pytest

from tests.samples import ALL_SAMPLE_TXS


@pytest.fixture(params=sorted(ALL_SAMPLE_TXS))
def sample_tx_hex(request: pytest.FixtureRequest) -> str:
    return ALL_SAMPLE_TXS[request.param]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from a real ~/.txdissect.yaml and TXDISSECT_* variables."""

    monkeypatch.setattr("txdissect.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml")
    for name in ("TXDISSECT_NETWORK", "TXDISSECT_ESPLORA_URL", "TXDISSECT_ESPLORA_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
