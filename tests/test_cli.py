from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from tests.samples import LEGACY_OUTPUT_SCRIPT_0, LEGACY_TX_HEX, P2WPKH_TX_HEX
from txdissect import cli


def test_decode_prints_field_list(capsys) -> None:
    cli.main(["decode", LEGACY_TX_HEX])

    output = capsys.readouterr().out
    assert output.startswith("[ 0] Version: 1")
    assert "Output 1 scriptPubKey (p2pkh)" in output


def test_decode_json_round_trips(capsys) -> None:
    cli.main(["decode", P2WPKH_TX_HEX, "--format", "json"])

    fields = json.loads(capsys.readouterr().out)
    assert "".join(field["hex"] for field in fields) == P2WPKH_TX_HEX
    assert fields[1]["kind"] == "marker"


def test_decode_byte_view(capsys) -> None:
    cli.main(["decode", LEGACY_TX_HEX, "--format", "bytes"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["0", "version", "01000000"]


def test_decode_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(LEGACY_TX_HEX + "\n"))

    cli.main(["decode", "-", "--format", "json"])

    fields = json.loads(capsys.readouterr().out)
    assert len(fields) == 15


def test_decode_network_flag_changes_addresses(capsys) -> None:
    cli.main(["decode", P2WPKH_TX_HEX, "--network", "testnet", "--format", "json"])

    fields = json.loads(capsys.readouterr().out)
    assert fields[12]["label_args"]["address"].startswith("tb1q")


def test_decode_uses_network_from_config_file(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("decoder:\n  network: regtest\n")

    cli.main(["--config", str(config_path), "decode", P2WPKH_TX_HEX, "--format", "json"])

    fields = json.loads(capsys.readouterr().out)
    assert fields[12]["label_args"]["address"].startswith("bcrt1q")


def test_decode_fetches_by_txid(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    requested = []

    class StubClient:
        def __init__(self, config) -> None:
            self.config = config

        def get_tx_hex(self, txid: str) -> str:
            requested.append((txid, self.config.network))
            return LEGACY_TX_HEX

    monkeypatch.setattr(cli, "EsploraClient", StubClient)

    cli.main(["decode", "--txid", "ab" * 32, "--network", "testnet", "--format", "json"])

    fields = json.loads(capsys.readouterr().out)
    assert "".join(field["hex"] for field in fields) == LEGACY_TX_HEX
    assert requested == [("ab" * 32, "testnet")]


def test_decode_malformed_transaction_exits_with_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["decode", LEGACY_TX_HEX[:-2]])

    assert excinfo.value.code == 1
    assert "error: malformed transaction at offset" in capsys.readouterr().err


def test_decode_invalid_hex_exits_with_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["decode", "xyz1"])

    assert excinfo.value.code == 1
    assert "non-hex character" in capsys.readouterr().err


def test_decode_requires_input(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["decode"])

    assert excinfo.value.code == 1
    assert "hex input must be non-empty" in capsys.readouterr().err


def test_decode_rejects_hex_and_txid_together(capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main(["decode", LEGACY_TX_HEX, "--txid", "ab" * 32])

    assert "not both" in capsys.readouterr().err


def test_unknown_network_exits_with_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["decode", LEGACY_TX_HEX, "--network", "litecoin"])

    assert excinfo.value.code == 1
    assert "Unknown network" in capsys.readouterr().err


def test_tokenize_asm(capsys) -> None:
    cli.main(["tokenize", LEGACY_OUTPUT_SCRIPT_0, "--format", "asm"])

    assert capsys.readouterr().out.strip() == (
        "OP_DUP OP_HASH160 7d1980cd67f0ed29a94793823b866bf47eab965e OP_EQUALVERIFY OP_CHECKSIG"
    )


def test_tokenize_json(capsys) -> None:
    cli.main(["tokenize", "5187", "--format", "json"])

    tokens = json.loads(capsys.readouterr().out)
    assert [token["mnemonic"] for token in tokens] == ["OP_1", "OP_EQUAL"]


def test_tokenize_truncated_script_exits_with_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["tokenize", "05aa"])

    assert excinfo.value.code == 1
    assert "script truncated at offset 0" in capsys.readouterr().err


def test_classify_reports_template_and_address(capsys) -> None:
    cli.main(["classify", LEGACY_OUTPUT_SCRIPT_0])

    result = json.loads(capsys.readouterr().out)
    assert result["template"] == "p2pkh"
    assert result["address"].startswith("1")


def test_classify_reports_multisig_parameters(capsys) -> None:
    key = "02" + "33" * 32
    cli.main(["classify", "52" + "21" + key + "21" + key + "52ae"])

    result = json.loads(capsys.readouterr().out)
    assert result == {"template": "bare_multisig", "m": 2, "n": 2}


def test_tokenize_empty_script(capsys) -> None:
    cli.main(["tokenize", "", "--format", "json"])

    assert json.loads(capsys.readouterr().out) == []


def test_classify_empty_script(capsys) -> None:
    cli.main(["classify", ""])

    assert json.loads(capsys.readouterr().out) == {"template": "non_standard"}
