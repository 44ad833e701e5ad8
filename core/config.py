"""Configuration management for the bridge connection.

This module handles:
- Loading the user config file (~/.huectl/config.json)
- Environment variable overrides (HUE_BRIDGE_ADDR, HUE_BRIDGE_KEY, HUE_TIMEOUT)
- Parsing bridge addresses into the API root URL
"""

import json
import os
from pathlib import Path
from urllib.parse import urlsplit

from core.errors import ConfigError
from models.types import BridgeSettings

# Configuration file path
USER_CONFIG_FILE = Path.home() / '.huectl' / 'config.json'

ENV_ADDRESS = 'HUE_BRIDGE_ADDR'
ENV_KEY = 'HUE_BRIDGE_KEY'
ENV_TIMEOUT = 'HUE_TIMEOUT'

# Seconds allowed for each request to the bridge
DEFAULT_TIMEOUT = 10.0


def load_config(path: Path | None = None) -> dict:
    """Load the user configuration file.

    Args:
        path: Alternative config file (defaults to USER_CONFIG_FILE)

    Returns:
        Dict with optional 'bridge_ip', 'api_token' and 'timeout' keys;
        empty if the file does not exist
    """
    path = path or USER_CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return config


def get_bridge_settings(address: str | None = None, key: str | None = None,
                        timeout: float | None = None, path: Path | None = None) -> BridgeSettings:
    """Resolve connection settings.

    Priority order:
    1. Explicit arguments
    2. Environment variables
    3. User config file

    Raises:
        ConfigError: if no address or key could be found
    """
    config = load_config(path)

    address = address or os.environ.get(ENV_ADDRESS) or config.get('bridge_ip')
    key = key or os.environ.get(ENV_KEY) or config.get('api_token')
    if timeout is None:
        raw = os.environ.get(ENV_TIMEOUT, config.get('timeout', DEFAULT_TIMEOUT))
        try:
            timeout = float(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout value {raw!r}") from e

    if not address:
        raise ConfigError(f"Bridge address not set (use --address, {ENV_ADDRESS} or {USER_CONFIG_FILE})")
    if not key:
        raise ConfigError(f"Bridge key not set (use --key, {ENV_KEY} or {USER_CONFIG_FILE})")

    return {'address': address, 'key': key, 'timeout': timeout}


def parse_address(address: str) -> tuple[str, str]:
    """Split a bridge address into (scheme, host).

    Accepts 'host', 'host:port', '/host', '//host' and full URLs. The scheme
    defaults to https and any path is ignored.

    Raises:
        ConfigError: if the host is empty or has an empty port
    """
    i = address.find('/')
    if i == 0 and len(address) > 2 and address[1] != '/':
        target = '/' + address
    elif i == -1 or i + 1 >= len(address) or address[i + 1] != '/':
        target = '//' + address
    else:
        target = address

    parts = urlsplit(target)
    if not parts.netloc:
        raise ConfigError(f'invalid URL "{address}" empty host field')
    if parts.netloc.endswith(':'):
        raise ConfigError(f'invalid URL "{address}" invalid port specified')
    return parts.scheme or 'https', parts.netloc


def build_api_url(address: str, key: str) -> str:
    """Return the v1 API root for the bridge, e.g. https://10.0.0.2/api/<key>."""
    scheme, host = parse_address(address)
    return f"{scheme}://{host}/api/{key}"
