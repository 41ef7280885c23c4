"""
Network parameter table for Lottery deployments.

Parameters are keyed by chain id. Local chains carry no coordinator address
or subscription id; the deploy steps provision a VRFCoordinatorV2Mock there.
"""

from typing import Any, Dict, List, Optional

from web3 import Web3

from .exceptions import NetworkConfigError
from .models import NetworkConfig

DEVELOPMENT_CHAINS: List[str] = ["hardhat", "localhost"]

NETWORK_CONFIG: Dict[int, Dict[str, Any]] = {
    31337: {
        "name": "hardhat",
        "entrance_fee": Web3.to_wei("0.01", "ether"),
        # any key hash works against the mock
        "gas_lane": "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c",
        "callback_gas_limit": 500000,
        "interval": 30,
    },
    11155111: {
        "name": "sepolia",
        "vrf_coordinator": "0x8103B0A8A00be2DDC778e6e7eaa21791Cd364625",
        "entrance_fee": Web3.to_wei("0.01", "ether"),
        "gas_lane": "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c",
        "subscription_id": 0,
        "callback_gas_limit": 500000,
        "interval": 30,
    },
    5: {
        "name": "goerli",
        "vrf_coordinator": "0x2Ca8E0C643bDe4C2E08ab1fA0da3401AdAD7734D",
        "entrance_fee": Web3.to_wei("0.01", "ether"),
        "gas_lane": "0x79d3d8832d904592c0bf9818b621522c988bb8b0c05cdc3b15aea1b6e8db0c15",
        "subscription_id": 0,
        "callback_gas_limit": 500000,
        "interval": 30,
    },
}


def is_development_chain(network_name: str) -> bool:
    return network_name in DEVELOPMENT_CHAINS


def get_network_config(chain_id: int, overrides: Optional[Dict[str, Any]] = None,
                       block_confirmations: int = 1) -> NetworkConfig:
    """Resolve Lottery parameters for a chain id.

    `overrides` is the `lottery` section of the configuration, keyed by chain
    id (as a string, since it comes from JSON or the environment). Values in it
    win over the built-in table, so a subscription id created on the VRF
    dashboard can be set without touching code.
    """
    params = dict(NETWORK_CONFIG.get(chain_id, {}))
    if overrides:
        params.update(overrides.get(str(chain_id), {}))

    if not params:
        raise NetworkConfigError(f"No network config for chain id {chain_id}")

    missing = [k for k in ("entrance_fee", "gas_lane", "callback_gas_limit", "interval") if k not in params]
    if missing:
        raise NetworkConfigError(f"Network config for chain id {chain_id} is missing {', '.join(missing)}")

    subscription_id = params.get("subscription_id")
    return NetworkConfig(
        name=params.get("name", str(chain_id)),
        chain_id=chain_id,
        entrance_fee=int(params["entrance_fee"]),
        gas_lane=params["gas_lane"],
        callback_gas_limit=int(params["callback_gas_limit"]),
        interval=int(params["interval"]),
        subscription_id=int(subscription_id) if subscription_id is not None else None,
        vrf_coordinator=params.get("vrf_coordinator"),
        block_confirmations=int(params.get("block_confirmations", block_confirmations)),
    )
