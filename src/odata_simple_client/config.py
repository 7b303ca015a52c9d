"""Configuration for DataSource construction.

Settings are resolved from multiple sources with priority ordering.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv)
4. Default value

Example:
    ```python
    from odata_simple_client import DataSource, DataSourceConfig

    # ODATA_HOST=oda.ft.dk
    # ODATA_BASE_PATH=/api
    # ODATA_RATE_LIMIT=5
    config = DataSourceConfig.from_env()
    datasource = DataSource.from_config(config)
    ```
"""

import logging
import os
from dataclasses import dataclass
from threading import Lock

from dotenv import load_dotenv

from odata_simple_client.errors.exceptions import ConstructionError, SettingNotFoundError

logger = logging.getLogger(__name__)


class SettingsResolver:
    """Resolve settings from explicit values, the environment, a .env file or defaults.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize settings resolver.

        Args:
            dotenv_path: Path to .env file. If None, searches parent directories
                for .env file (default behavior of python-dotenv).
            load_dotenv: Whether to load .env file. Set to False to skip
                .env file loading (useful for testing).
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Ensure .env file is loaded (thread-safe), at most once."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            # Double-check pattern for thread safety
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                self._dotenv_loaded = True
                logger.debug("Loaded .env file for settings resolution")
            except Exception as e:
                logger.warning(f"Failed to load .env file: {e}")
                # Don't fail - continue without .env
                self._dotenv_loaded = True  # Mark as attempted

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a setting from multiple sources.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check. Values from the
                loaded .env file are visible here too.
            default: Default value if not found elsewhere.
            required: If True, raises SettingNotFoundError when the setting
                cannot be resolved.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            SettingNotFoundError: If required=True and the setting is missing.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved setting from {source}: {result}")

        if required and result is None:
            error_msg = "Required setting not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise SettingNotFoundError(error_msg, env_var_name=env_var_name)

        return result


def _parse_float(name: str, raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConstructionError(f"Setting {name} must be a number, got {raw!r}") from None


@dataclass
class DataSourceConfig:
    """Everything needed to build a DataSource, minus the HTTP client.

    Attributes:
        host: Service authority, e.g. ``oda.ft.dk`` or ``localhost:8080``
        base_path: Path of the service root, e.g. ``/api``
        scheme: ``https`` (default) or ``http``
        rate_limit: Requests per second, or None for no client-side limit
        timeout: Request timeout in seconds for clients built from this config
    """

    host: str
    base_path: str | None = None
    scheme: str = "https"
    rate_limit: float | None = None
    timeout: float = 30.0

    @classmethod
    def from_env(
        cls,
        prefix: str = "ODATA_",
        *,
        resolver: SettingsResolver | None = None,
        host: str | None = None,
        base_path: str | None = None,
        scheme: str | None = None,
    ) -> "DataSourceConfig":
        """Build a config from ``{prefix}HOST``, ``{prefix}BASE_PATH``,
        ``{prefix}SCHEME``, ``{prefix}RATE_LIMIT`` and ``{prefix}TIMEOUT``.

        Explicit keyword arguments take precedence over the environment.

        Raises:
            SettingNotFoundError: If no host can be resolved.
            ConstructionError: If a numeric setting is malformed.
        """
        resolver = resolver or SettingsResolver()

        resolved_host = resolver.resolve(value=host, env_var_name=f"{prefix}HOST", required=True)
        resolved_base_path = resolver.resolve(value=base_path, env_var_name=f"{prefix}BASE_PATH")
        resolved_scheme = resolver.resolve(value=scheme, env_var_name=f"{prefix}SCHEME", default="https")

        rate_limit = _parse_float(f"{prefix}RATE_LIMIT", resolver.resolve(env_var_name=f"{prefix}RATE_LIMIT"))
        if rate_limit is not None and rate_limit <= 0:
            raise ConstructionError(f"Setting {prefix}RATE_LIMIT must be positive, got {rate_limit}")

        timeout = _parse_float(f"{prefix}TIMEOUT", resolver.resolve(env_var_name=f"{prefix}TIMEOUT"))

        return cls(
            host=resolved_host,
            base_path=resolved_base_path,
            scheme=resolved_scheme.lower(),
            rate_limit=rate_limit,
            timeout=timeout if timeout is not None else 30.0,
        )
