"""Deploy step: copy the Lottery address and ABI into the frontend project."""

import json
from pathlib import Path

from ..utils.config import env_flag, get_config_value

TAGS = ("all", "frontend")


def update_frontend(env) -> None:
    if env_flag("UPDATE_FRONTEND"):
        env.logger.info("Updating frontend...")
        update_contract_addresses(env)
        update_abi(env)


def update_contract_addresses(env) -> None:
    lottery = env.get_contract("Lottery")
    chain_id = str(env.chain_id)
    addresses_file = Path(get_config_value(env.config, "frontend.addresses_file"))

    current_addresses = {}
    if addresses_file.exists():
        with open(addresses_file, "r", encoding="utf-8") as f:
            current_addresses = json.load(f)

    if chain_id in current_addresses:
        if lottery.address not in current_addresses[chain_id]:
            current_addresses[chain_id].append(lottery.address)
    else:
        current_addresses[chain_id] = [lottery.address]

    addresses_file.parent.mkdir(parents=True, exist_ok=True)
    with open(addresses_file, "w", encoding="utf-8") as f:
        json.dump(current_addresses, f)


def update_abi(env) -> None:
    lottery = env.get_contract("Lottery")
    abi_file = Path(get_config_value(env.config, "frontend.abi_file"))
    abi_file.parent.mkdir(parents=True, exist_ok=True)
    with open(abi_file, "w", encoding="utf-8") as f:
        json.dump(lottery.abi, f)
