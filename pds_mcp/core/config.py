import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from pds_mcp.core.envelope import Credentials

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://ca1.p6.oraclecloud.com/metrolinx/pds/rest-service"
DEFAULT_TIMEOUT = 30.0
CONFIG_ENV_VAR = "PDS_MCP_CONFIG"


class ConfigLoader:
    """Process-wide holder of the parsed config.yaml; read once, on first use."""

    _instance = None
    _config = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._load_config()
        return cls._instance

    @classmethod
    def _load_config(cls):
        """Parse `$PDS_MCP_CONFIG`, or the config.yaml shipped inside the package. An empty file yields {}."""
        config_path = os.environ.get(CONFIG_ENV_VAR) or os.path.join(os.path.dirname(__file__), "..", "config.yaml")
        config_path = os.path.abspath(config_path)
        with open(config_path, "r") as f:
            cls._config = yaml.safe_load(f) or {}

    @classmethod
    def reset(cls):
        """Forget the loaded configuration so the next access reloads it."""
        cls._instance = None
        cls._config = None

    def get_config(self):
        return self._config


def get_config():
    """Shortcut for `ConfigLoader().get_config()`."""
    return ConfigLoader().get_config()


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_dir: Optional[str] = None
    credentials: Dict[str, Credentials] = field(default_factory=dict)

    def credentials_for(self, name: str) -> Credentials:
        creds = self.credentials.get(name)
        if creds is None:
            logger.warning(f"No credentials configured for '{name}'")
            return Credentials("", "")
        return creds


def _read_env(var: Optional[str], environ: Dict[str, str], binding: str) -> str:
    if not var:
        return ""
    value = environ.get(var)
    if value is None:
        logger.warning(f"Environment variable {var} for '{binding}' is not set")
        return ""
    return value


def load_settings(config: Optional[Dict[str, Any]] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Resolve configuration and credential environment variables into Settings.

    This is the only place the process environment is read; tools receive the
    resulting Credentials explicitly.
    """
    cfg = get_config() if config is None else config
    cfg = cfg or {}
    env = dict(os.environ) if environ is None else environ

    credentials: Dict[str, Credentials] = {}
    for name, entry in (cfg.get("credentials") or {}).items():
        entry = entry or {}
        credentials[name] = Credentials(
            username=_read_env(entry.get("username_env"), env, name),
            password=_read_env(entry.get("password_env"), env, name),
        )

    return Settings(
        base_url=(cfg.get("base_url") or DEFAULT_BASE_URL).rstrip("/"),
        timeout=float(cfg.get("timeout") or DEFAULT_TIMEOUT),
        log_dir=cfg.get("log_dir"),
        credentials=credentials,
    )
