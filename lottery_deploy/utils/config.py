"""
Configuration Management
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..exceptions import ConfigError
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = Path("config") / "lottery.conf"

ENV_SECTIONS = {
    "NETWORK_": "network",
    "FRONTEND_": "frontend",
    "ETHERSCAN_": "etherscan",
    "DEPLOY_": "deploy",
}


def default_config() -> Dict[str, Any]:
    """Defaults used when no config file overrides them"""
    return {
        "deploy": {
            "network": "hardhat",
            "artifacts_dir": "artifacts",
            "deployments_dir": "deployments",
            "contracts_dir": "contracts",
            "solc_version": "0.8.7",
        },
        "network": {
            "gas_multiplier": 1.15,
            "rpc_timeout": 60,
        },
        "networks": {
            "hardhat": {"chain_id": 31337},
            "localhost": {"rpc_url": "http://127.0.0.1:8545", "chain_id": 31337},
            "sepolia": {"chain_id": 11155111, "block_confirmations": 6},
            "goerli": {"chain_id": 5, "block_confirmations": 6},
        },
        "frontend": {
            "addresses_file": "../nextjs-lottery/src/constants/contractAddresses.json",
            "abi_file": "../nextjs-lottery/src/constants/abi.json",
        },
        "etherscan": {
            "api_url": "https://api.etherscan.io/v2/api",
            "poll_interval": 5,
            "max_attempts": 20,
        },
        "lottery": {},
    }


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from files and environment variables"""
    load_dotenv(Path.cwd() / ".env")

    config = default_config()

    path = Path(config_file) if config_file else Path.cwd() / DEFAULT_CONFIG_FILE
    if path.exists():
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e
        _deep_merge(config, file_config)
        logger.info(f"Loaded configuration from {path}")
    elif config_file:
        raise ConfigError(f"Config file {path} not found")
    else:
        logger.debug(f"Config file {path} not found. Using defaults and environment variables.")

    # Override with environment variables, defined in .env
    config = _apply_env_overrides(config)

    return config


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration"""
    for key, value in os.environ.items():
        # Convert key from ENV_VAR_NAME to section.key format
        for prefix, section in ENV_SECTIONS.items():
            if key.startswith(prefix):
                config.setdefault(section, {})[key[len(prefix):].lower()] = value
                break
        else:
            # <NETWORK>_RPC_URL, e.g. SEPOLIA_RPC_URL
            if key.endswith("_RPC_URL"):
                name = key[:-len("_RPC_URL")].lower()
                config.setdefault("networks", {}).setdefault(name, {})["rpc_url"] = value

    return config


def get_config_value(config: Dict[str, Any], key_path: str, default=None):
    """Get configuration value by dot-separated key path"""
    keys = key_path.split('.')
    value = config

    try:
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default


def env_flag(name: str) -> bool:
    """True when the environment variable is set to anything but an empty/false value"""
    value = os.getenv(name, "")
    return value.strip().lower() not in ("", "0", "false", "no")
