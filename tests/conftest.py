from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from helpers import LOTTERY_ABI, LOTTERY_ADDRESS, MOCK_ADDRESS, FakeEnv
from lottery_deploy.networks import get_network_config
from lottery_deploy.utils.config import default_config
from lottery_deploy.utils.logger import get_logger

TOGGLES = ("UPDATE_FRONTEND", "ETHERSCAN_API_KEY", "PRIVATE_KEY", "PLAYER_PRIVATE_KEY")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, request):
    # the chain suites read their network from the environment
    if "chain" in request.keywords:
        return
    for name in TOGGLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(tmp_path):
    cfg = default_config()
    cfg["deploy"]["artifacts_dir"] = str(tmp_path / "artifacts")
    cfg["deploy"]["deployments_dir"] = str(tmp_path / "deployments")
    cfg["frontend"]["addresses_file"] = str(tmp_path / "frontend" / "contractAddresses.json")
    cfg["frontend"]["abi_file"] = str(tmp_path / "frontend" / "abi.json")
    return cfg


@pytest.fixture
def fake_env(config):
    lottery = MagicMock(address=LOTTERY_ADDRESS, abi=LOTTERY_ABI)
    mock = MagicMock(address=MOCK_ADDRESS)
    mock.create_subscription.return_value = 1

    def make(network="hardhat", chain_id=31337, development=True):
        deployer = MagicMock()
        deployer.deploy.return_value = SimpleNamespace(address=LOTTERY_ADDRESS, name="Lottery")
        return FakeEnv(
            network=network,
            chain_id=chain_id,
            is_development=development,
            network_config=get_network_config(chain_id, config.get("lottery")),
            config=config,
            logger=get_logger("tests"),
            deployer=deployer,
            contracts={"Lottery": lottery, "VRFCoordinatorV2Mock": mock},
        )

    return make
