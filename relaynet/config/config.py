import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from ..clients.http import DEFAULT_TIMEOUT
from ..core.resolver import is_absolute

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


@dataclass
class ClientConfig:
    base_url: str
    timeout_seconds: float = DEFAULT_TIMEOUT
    relay_url: Optional[str] = None
    bypass_body_delete: bool = False
    bypass_expose_headers: bool = False
    auth_token: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def load_config(path: Optional[str] = None) -> ClientConfig:
    """Load and validate client configuration from a YAML file and the environment.

    Environment variables take precedence over values read from the file.

    Args:
        path: Optional YAML file. Defaults to ``RELAYNET_CONFIG_FILE`` when set.

    Returns:
        A validated ClientConfig instance.

    Raises:
        ConfigurationError: If the base URL is missing or a value is invalid.
        FileNotFoundError: If the YAML file does not exist.
        yaml.YAMLError: If the YAML file contains invalid syntax.
    """
    path = path or os.getenv("RELAYNET_CONFIG_FILE", "").strip() or None
    file_values = _load_yaml(path) if path else {}
    if path:
        logger.info("Loaded client configuration from %s", path)

    def setting(env_name: str, key: str, default: Any = None) -> Any:
        env_value = os.getenv(env_name)
        if env_value is not None and env_value.strip():
            return env_value.strip()
        return file_values.get(key, default)

    base_url = setting("RELAYNET_BASE_URL", "base_url")
    if not base_url:
        raise ConfigurationError("Missing required setting: RELAYNET_BASE_URL (or base_url)")
    if not is_absolute(base_url):
        raise ConfigurationError(f"base_url must be an absolute URL, got {base_url!r}")

    raw_timeout = setting("RELAYNET_TIMEOUT_SECONDS", "timeout_seconds", DEFAULT_TIMEOUT)
    try:
        timeout_seconds = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"timeout_seconds must be a number, got {raw_timeout!r}") from e
    if timeout_seconds <= 0:
        raise ConfigurationError(f"timeout_seconds must be positive, got {timeout_seconds}")

    relay_url = setting("RELAYNET_RELAY_URL", "relay_url") or None
    if relay_url and not is_absolute(relay_url):
        raise ConfigurationError(f"relay_url must be an absolute URL, got {relay_url!r}")

    headers = file_values.get("headers") or {}
    if not isinstance(headers, dict):
        raise ConfigurationError("headers must be a mapping of header names to values")

    return ClientConfig(
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        relay_url=relay_url,
        bypass_body_delete=_parse_bool(
            "bypass_body_delete", setting("RELAYNET_BYPASS_BODY_DELETE", "bypass_body_delete", False)
        ),
        bypass_expose_headers=_parse_bool(
            "bypass_expose_headers", setting("RELAYNET_BYPASS_EXPOSE_HEADERS", "bypass_expose_headers", False)
        ),
        auth_token=setting("RELAYNET_AUTH_TOKEN", "auth_token") or None,
        headers={str(k): str(v) for k, v in headers.items()},
    )
