"""Command line interface for inspecting raw transactions and scripts."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .address import address_from_script
from .classifier import classify, multisig_parameters
from .config import ConfigurationError, InspectorConfig, load_config, set_default_config_path
from .cursor import bytes_from_hex
from .decoder import TransactionDecoder
from .errors import DecodeError
from .esplora import EsploraClient, EsploraError
from .model import join_hex
from .presentation import (
    field_to_dict,
    format_byte_view,
    format_field_list,
    format_token_list,
    token_to_dict,
)
from .script import to_asm, tokenize

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Raw Bitcoin transaction and script inspector")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser(
        "decode", help="split a raw transaction into tagged fields"
    )
    decode_parser.add_argument(
        "tx_hex",
        nargs="?",
        default=None,
        help="Raw transaction hex, or '-' to read it from stdin",
    )
    decode_parser.add_argument(
        "--txid",
        default=None,
        help="Fetch the raw transaction from the configured Esplora API instead",
    )
    decode_parser.add_argument(
        "--format",
        choices=("list", "bytes", "json"),
        default="list",
        help="Output format (default: %(default)s)",
    )
    decode_parser.add_argument(
        "--network",
        default=None,
        help="Network used for output addresses (mainnet, testnet, signet, regtest)",
    )

    tokenize_parser = subparsers.add_parser(
        "tokenize", help="split a script into opcodes and data pushes"
    )
    tokenize_parser.add_argument("script_hex", help="Script hex, or '-' to read it from stdin")
    tokenize_parser.add_argument(
        "--format",
        choices=("list", "asm", "json"),
        default="list",
        help="Output format (default: %(default)s)",
    )

    classify_parser = subparsers.add_parser(
        "classify", help="report the standard template of a scriptPubKey"
    )
    classify_parser.add_argument("script_hex", help="scriptPubKey hex, or '-' to read it from stdin")
    classify_parser.add_argument(
        "--network",
        default=None,
        help="Network used for the address (mainnet, testnet, signet, regtest)",
    )
    return parser


def _read_hex_argument(value: str | None, *, allow_empty: bool = False) -> str:
    if value == "-":
        value = sys.stdin.read()
    text = (value or "").strip()
    if not text and not allow_empty:
        raise CLIError("hex input must be non-empty")
    return text


def _load_settings(args: argparse.Namespace) -> InspectorConfig:
    overrides: dict[str, Any] = {}
    network = getattr(args, "network", None)
    if network:
        overrides["network"] = network
    return load_config(overrides=overrides)


def cmd_decode(args: argparse.Namespace) -> None:
    settings = _load_settings(args)
    if args.txid and args.tx_hex:
        raise CLIError("Specify either a transaction hex or --txid, not both")
    if args.txid:
        tx_hex = EsploraClient(settings).get_tx_hex(args.txid)
    else:
        tx_hex = _read_hex_argument(args.tx_hex)

    fields = TransactionDecoder(settings.network).decode_from_hex(tx_hex)
    if args.format == "json":
        print(json.dumps([field_to_dict(field) for field in fields], indent=2))
    elif args.format == "bytes":
        print(format_byte_view(fields))
    else:
        print(format_field_list(fields))
    logger.debug("Decoded %d fields covering %d bytes", len(fields), len(join_hex(fields)) // 2)


def cmd_tokenize(args: argparse.Namespace) -> None:
    tokens = tokenize(_read_hex_argument(args.script_hex, allow_empty=True))
    if args.format == "json":
        print(json.dumps([token_to_dict(token) for token in tokens], indent=2))
    elif args.format == "asm":
        print(to_asm(tokens))
    else:
        print(format_token_list(tokens))


def cmd_classify(args: argparse.Namespace) -> None:
    settings = _load_settings(args)
    script = bytes_from_hex(_read_hex_argument(args.script_hex, allow_empty=True))
    template = classify(script)
    result: dict[str, Any] = {"template": template.value}
    address = address_from_script(script, settings.network)
    if address:
        result["address"] = address
    params = multisig_parameters(script)
    if params:
        result["m"], result["n"] = params
    print(json.dumps(result, indent=2))


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        if args.config:
            set_default_config_path(args.config)
        if args.command == "decode":
            cmd_decode(args)
        elif args.command == "tokenize":
            cmd_tokenize(args)
        elif args.command == "classify":
            cmd_classify(args)
        else:  # pragma: no cover - argparse enforces choices
            raise CLIError(f"Unknown command: {args.command}")
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
    except (CLIError, ConfigurationError, DecodeError, EsploraError) as exc:
        parser.exit(1, f"error: {exc}\n")
    finally:
        if args.config:
            set_default_config_path(None)


if __name__ == "__main__":
    main(sys.argv[1:])
