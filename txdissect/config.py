"""Shared configuration loader for txdissect."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .address import NETWORKS


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".txdissect.yaml"
_CONFIG_PATH_OVERRIDE: Path | None = None

DEFAULT_NETWORK = "mainnet"
DEFAULT_TIMEOUT = 30.0
DEFAULT_ESPLORA_URLS = {
    "mainnet": "https://mempool.space/api",
    "testnet": "https://mempool.space/testnet/api",
    "signet": "https://mempool.space/signet/api",
}


@dataclass
class InspectorConfig:
    """Settings shared by the decoder and the Esplora client."""

    network: str = DEFAULT_NETWORK
    esplora_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        url = self.esplora_url or DEFAULT_ESPLORA_URLS.get(self.network)
        if not url:
            raise ConfigurationError(
                f"No Esplora URL configured for network {self.network}; "
                "set TXDISSECT_ESPLORA_URL or esplora.url in the config file"
            )
        return url.rstrip("/")


def set_default_config_path(path: str | Path | None) -> None:
    """Remember a user-supplied config path for future loads."""

    global _CONFIG_PATH_OVERRIDE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML mapping")
    return loaded


def _section(file_config: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    section = file_config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Expected '{name}' to be a mapping in {path}")
    return section


def _coerce_network(raw: Any, *, source: str) -> str | None:
    if raw is None:
        return None
    network = str(raw).strip().lower()
    if network not in NETWORKS:
        choices = ", ".join(sorted(NETWORKS))
        raise ConfigurationError(f"Unknown network in {source}: {raw} (expected one of {choices})")
    return network


def _coerce_timeout(raw: Any, *, source: str) -> float | None:
    if raw is None:
        return None
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid timeout in {source}: {raw}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"Timeout in {source} must be positive: {raw}")
    return timeout


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def load_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> InspectorConfig:
    """Load settings from overrides, environment variables and optional YAML, in that order."""

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None or _CONFIG_PATH_OVERRIDE is not None
    path = (
        Path(config_path).expanduser()
        if config_path is not None
        else _CONFIG_PATH_OVERRIDE or DEFAULT_CONFIG_PATH
    )

    file_config = _load_config_file(path, required=explicit_path)
    decoder_section = _section(file_config, "decoder", path)
    esplora_section = _section(file_config, "esplora", path)
    override_map = dict(overrides or {})

    network = _first_value(
        _coerce_network(override_map.get("network"), source="overrides"),
        _coerce_network(env_map.get("TXDISSECT_NETWORK"), source="environment"),
        _coerce_network(decoder_section.get("network"), source=f"{path} decoder.network"),
        default=DEFAULT_NETWORK,
    )
    esplora_url = _first_value(
        override_map.get("esplora_url"),
        env_map.get("TXDISSECT_ESPLORA_URL") or None,
        esplora_section.get("url"),
    )
    timeout = _first_value(
        _coerce_timeout(override_map.get("timeout"), source="overrides"),
        _coerce_timeout(env_map.get("TXDISSECT_ESPLORA_TIMEOUT"), source="environment"),
        _coerce_timeout(esplora_section.get("timeout"), source=f"{path} esplora.timeout"),
        default=DEFAULT_TIMEOUT,
    )

    return InspectorConfig(network=network, esplora_url=esplora_url, timeout=timeout)
