"""
Configuration Settings
======================

Configuration for the gateway. Values come from defaults, an optional JSON
or YAML file, and XSLT_GATEWAY_* environment variables, in that order.
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "XSLT_GATEWAY_"
CONFIG_FILE_ENV = f"{ENV_PREFIX}CONFIG"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _default_user_agent() -> str:
    from xslt_gateway import __version__
    return f"xslt-gateway/{__version__}"


@dataclass
class GatewayConfig:
    """
    Complete gateway configuration.

    Attributes:
        stylesheet_dir: Directory holding <name>.xslt style sheets
        fetch_timeout: Upstream timeout in seconds, None or 0 for no timeout
        verify_tls: Whether upstream TLS certificates are verified
        user_agent: User-Agent sent upstream (empty means requests' default)
        log_level: Logging level name

    Example:
        config = GatewayConfig(stylesheet_dir="xslt")
        save_config(config, Path("gateway.yaml"))
    """

    stylesheet_dir: str = "."
    fetch_timeout: Optional[float] = 30.0
    verify_tls: bool = True
    user_agent: str = ""
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.user_agent:
            self.user_agent = _default_user_agent()
        if self.fetch_timeout is not None:
            self.fetch_timeout = float(self.fetch_timeout)
            if self.fetch_timeout < 0:
                raise ValueError(f"fetch_timeout must not be negative: {self.fetch_timeout}")
            if self.fetch_timeout == 0:
                self.fetch_timeout = None
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def stylesheet_path(self) -> Path:
        return Path(self.stylesheet_dir).expanduser()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'GatewayConfig':
        """Create from dictionary. Unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**dict(data))


def parse_bool(value: str) -> bool:
    """Parse a boolean environment value."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def load_config(config_path: Path) -> GatewayConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        GatewayConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return GatewayConfig.from_dict(data)


def save_config(config: GatewayConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")


def config_from_env(environ: Mapping[str, str] = None) -> GatewayConfig:
    """
    Build configuration from environment variables.

    If XSLT_GATEWAY_CONFIG names a file it is loaded first; individual
    XSLT_GATEWAY_* variables override its values.

    Args:
        environ: Environment mapping (defaults to os.environ)
    """
    environ = os.environ if environ is None else environ

    data: Dict[str, Any] = {}
    config_file = environ.get(CONFIG_FILE_ENV)
    if config_file:
        data = load_config(Path(config_file)).to_dict()

    for f in fields(GatewayConfig):
        raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None:
            continue
        if f.name == "verify_tls":
            data[f.name] = parse_bool(raw)
        elif f.name == "fetch_timeout":
            data[f.name] = float(raw) if raw.strip() else None
        else:
            data[f.name] = raw

    return GatewayConfig.from_dict(data)


_config: Optional[GatewayConfig] = None


def get_config() -> GatewayConfig:
    """Get the current configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = config_from_env()
    return _config


def set_config(config: Optional[GatewayConfig]) -> None:
    """Replace the current configuration. None re-reads the environment on next use."""
    global _config
    _config = config


def configure_logging(level: str = "INFO") -> None:
    """Set up process-wide logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    logging.getLogger().setLevel(level.upper())
