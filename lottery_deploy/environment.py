"""
Runtime environment shared by deploy steps, tasks, the CLI and the tests:
one network, its chain client, its deployment records and a deployer.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .blockchain.client import IN_PROCESS_NETWORK, ChainClient
from .blockchain.contracts import ContractWrapper
from .blockchain.deployer import ContractDeployer
from .blockchain.deployments import DeploymentStore
from .models import NetworkConfig
from .networks import get_network_config
from .utils.config import get_config_value
from .utils.logger import get_logger

logger = get_logger(__name__)


class DeployEnvironment:

    def __init__(self, config: Dict[str, Any], network: Optional[str] = None,
                 client: Optional[ChainClient] = None):
        self.config = config
        self.network = network or get_config_value(config, "deploy.network", IN_PROCESS_NETWORK)
        self.client = client or ChainClient(self.network, config)
        self.logger = logger

        deployments_dir = None
        if not (self.network == IN_PROCESS_NETWORK and not self.client.rpc_url):
            deployments_dir = Path(get_config_value(config, "deploy.deployments_dir", "deployments"))
        self.store = DeploymentStore(self.network, self.client.chain_id, deployments_dir)
        self.deployer = ContractDeployer(
            self.client,
            self.store,
            get_config_value(config, "deploy.artifacts_dir", "artifacts"),
        )

    def connect(self) -> "DeployEnvironment":
        self.client.connect()
        return self

    @property
    def chain_id(self) -> int:
        return self.client.chain_id

    @property
    def is_development(self) -> bool:
        return self.client.is_development

    @property
    def network_config(self) -> NetworkConfig:
        return get_network_config(
            self.chain_id,
            self.config.get("lottery", {}),
            block_confirmations=self.client.block_confirmations,
        )

    def named_account(self, name: str) -> str:
        return self.client.named_account(name)

    def get_contract(self, name: str, sender: Optional[str] = None) -> ContractWrapper:
        return self.deployer.get_contract(name, sender)
