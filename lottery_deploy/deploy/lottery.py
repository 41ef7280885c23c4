"""Deploy step: the Lottery contract, wired to a funded VRF subscription."""

import os

from web3 import Web3

from ..blockchain.verify import verify
from ..exceptions import NetworkConfigError

VRF_SUB_FUND_AMOUNT = Web3.to_wei("2", "ether")

TAGS = ("all", "lottery")


def deploy_lottery(env) -> None:
    log = env.logger.info
    deployer = env.named_account("deployer")
    params = env.network_config
    vrf_coordinator_mock = None

    if env.is_development:
        vrf_coordinator_mock = env.get_contract("VRFCoordinatorV2Mock", deployer)
        vrf_coordinator_address = vrf_coordinator_mock.address
        subscription_id = vrf_coordinator_mock.create_subscription()
        # the mock accepts funding without LINK; real networks fund through the VRF dashboard
        vrf_coordinator_mock.fund_subscription(subscription_id, VRF_SUB_FUND_AMOUNT)
    else:
        vrf_coordinator_address = params.vrf_coordinator
        subscription_id = params.subscription_id
        if not vrf_coordinator_address or subscription_id is None:
            raise NetworkConfigError(
                f"Network {env.network} needs vrf_coordinator and subscription_id in its lottery config"
            )

    args = [
        vrf_coordinator_address,
        params.entrance_fee,
        params.gas_lane,
        subscription_id,
        params.callback_gas_limit,
        params.interval,
    ]
    lottery = env.deployer.deploy(
        "Lottery",
        sender=deployer,
        args=args,
        confirmations=params.block_confirmations or 1,
        log=True,
    )

    if vrf_coordinator_mock is not None:
        vrf_coordinator_mock.add_consumer(subscription_id, lottery.address)

    api_key = os.getenv("ETHERSCAN_API_KEY")
    if not env.is_development and api_key:
        verify(
            lottery.address,
            args,
            env.deployer.load_artifact("Lottery"),
            api_key,
            env.chain_id,
            env.config.get("etherscan"),
        )
    log("----------------------------------------")
