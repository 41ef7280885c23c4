import pytest
from eth_tester.exceptions import TransactionFailed
from web3.exceptions import ContractLogicError

from lottery_deploy import deploy
from lottery_deploy.blockchain.artifacts import has_artifacts
from lottery_deploy.blockchain.contracts import decode_revert
from lottery_deploy.environment import DeployEnvironment
from lottery_deploy.utils.config import get_config_value, load_config

REVERT_ERRORS = (ContractLogicError, TransactionFailed)


@pytest.fixture(scope="session")
def env():
    config = load_config()
    environment = DeployEnvironment(config)
    if not environment.is_development:
        pytest.skip(f"unit tests run on development chains only, not {environment.network}")
    artifacts_dir = get_config_value(config, "deploy.artifacts_dir", "artifacts")
    if not has_artifacts(artifacts_dir, "Lottery", "VRFCoordinatorV2Mock"):
        pytest.skip(f"Lottery and VRFCoordinatorV2Mock artifacts not found in {artifacts_dir}")
    environment.connect()
    deploy.fixture(environment, ["all"])
    yield environment
    environment.client.close()


@pytest.fixture(autouse=True)
def isolated_chain(env):
    snapshot_id = env.client.snapshot()
    yield
    env.client.revert(snapshot_id)


@pytest.fixture
def deployer(env):
    return env.named_account("deployer")


@pytest.fixture
def accounts(env):
    return env.client.get_accounts()


@pytest.fixture
def lottery(env, deployer):
    return env.get_contract("Lottery", deployer)


@pytest.fixture
def vrf_coordinator_mock(env, deployer):
    return env.get_contract("VRFCoordinatorV2Mock", deployer)


@pytest.fixture
def entrance_fee(lottery):
    return lottery.get_entrance_fee()


@pytest.fixture
def interval(lottery):
    return lottery.get_interval()


@pytest.fixture
def pass_interval(env, interval):
    def advance(seconds=None):
        env.client.increase_time(interval + 1 if seconds is None else seconds)
        env.client.mine()
    return advance


@pytest.fixture
def assert_reverted():
    def check(action, contract, reason=None):
        with pytest.raises(REVERT_ERRORS) as excinfo:
            action()
        if reason is not None:
            assert reason in str(decode_revert(excinfo.value, contract.abi))
    return check
