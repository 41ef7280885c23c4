"""Deploy step: local stand-in for the VRF coordinator on development chains."""

from web3 import Web3

BASE_FEE = Web3.to_wei("0.25", "ether")
# link per gas, calculated value based on the gas price of the chain
GAS_PRICE_LINK = 10**9

TAGS = ("all", "mocks")


def deploy_mocks(env) -> None:
    log = env.logger.info
    deployer = env.named_account("deployer")

    if env.is_development:
        log("Local network detected. Deploying mocks...")
        env.deployer.deploy(
            "VRFCoordinatorV2Mock",
            sender=deployer,
            args=[BASE_FEE, GAS_PRICE_LINK],
            log=True,
        )
        log("Mocks Deployed")
        log("------------------------------")
