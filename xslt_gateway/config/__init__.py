"""
Configuration Management
========================

Configuration utilities for the gateway.
"""

from xslt_gateway.config.settings import (
    GatewayConfig,
    config_from_env,
    configure_logging,
    get_config,
    load_config,
    save_config,
    set_config,
)

__all__ = [
    "GatewayConfig",
    "config_from_env",
    "configure_logging",
    "get_config",
    "load_config",
    "save_config",
    "set_config",
]
