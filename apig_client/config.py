"""
Configuration loading for ExchangeRateClient.

Both loaders return keyword arguments for ``ExchangeRateClient``:

    client = ExchangeRateClient(**load_config("apig.json"))
"""

import json
import os
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError

# JSON key -> client argument
_JSON_KEYS = {
    'exchangeRateUrl': 'exchange_rate_url',
    'accessKey': 'access_key',
    'secretKey': 'secret_key',
}

# Environment variable -> client argument
_ENV_KEYS = {
    'APIG_EXCHANGE_RATE_URL': 'exchange_rate_url',
    'APIG_ACCESS_KEY': 'access_key',
    'APIG_SECRET_KEY': 'secret_key',
}


def _collect(source: Mapping[str, Any], keys: Dict[str, str]) -> Dict[str, Any]:
    config = {}
    missing = []
    for source_key, arg in keys.items():
        value = source.get(source_key)
        if not value:
            missing.append(source_key)
        else:
            config[arg] = value
    if missing:
        raise ConfigurationError(f"missing configuration keys: {', '.join(missing)}")
    return config


def _timeout(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid timeout {value!r}") from e


def load_config(path: str) -> Dict[str, Any]:
    """
    Load client configuration from a JSON file.

    The file uses the keys ``accessKey``, ``secretKey`` and
    ``exchangeRateUrl``, plus an optional ``timeout`` in seconds.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or a key is missing
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"cannot load config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"config {path} must be a JSON object")

    config = _collect(data, _JSON_KEYS)
    if data.get('timeout') is not None:
        config['timeout'] = _timeout(data['timeout'])
    return config


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load client configuration from ``APIG_*`` environment variables."""
    environ = os.environ if environ is None else environ
    config = _collect(environ, _ENV_KEYS)
    if environ.get('APIG_TIMEOUT'):
        config['timeout'] = _timeout(environ['APIG_TIMEOUT'])
    return config
