"""
Smart Contract Deployment Module
Deploys compiled artifacts and records them in the deployment store
"""

import json
import time
from pathlib import Path
from typing import Any, List, Optional

from web3 import Web3

from ..exceptions import LotteryDeployError
from ..models import Deployment
from ..utils.logger import get_logger
from .artifacts import Artifact, load_artifact
from .contracts import CONTRACT_WRAPPERS, ContractWrapper
from .deployments import DeploymentStore

logger = get_logger(__name__)

MIN_DEPLOY_BALANCE = Web3.to_wei('0.01', 'ether')


def _jsonable(args: List[Any]) -> List[Any]:
    return json.loads(json.dumps(args, default=lambda o: Web3.to_hex(o) if isinstance(o, (bytes, bytearray)) else str(o)))


class ContractDeployer:
    """Handles smart contract deployment and reuse of existing deployments"""

    def __init__(self, client, store: DeploymentStore, artifacts_dir):
        self.client = client
        self.store = store
        self.artifacts_dir = Path(artifacts_dir)

    def load_artifact(self, name: str) -> Artifact:
        return load_artifact(self.artifacts_dir, name)

    def deploy(self, name: str, sender: str, args: Optional[List[Any]] = None,
               confirmations: int = 1, log: bool = False) -> Deployment:
        """
        Deploy contract `name` from `sender`, or reuse an identical earlier deployment.
        """
        args = list(args or [])
        artifact = self.load_artifact(name)

        existing = self.store.get_or_none(name)
        if existing and self._is_reusable(existing, artifact, args):
            if log:
                logger.info(f'reusing "{name}" at {existing.address}')
            return existing

        self._check_deployment_requirements(sender)

        factory = self.client.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        receipt = self.client.transact(
            factory.constructor(*args),
            sender,
            confirmations=confirmations,
            description=f"{name} deployment",
        )

        address = receipt["contractAddress"]
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        deployment = Deployment(
            name=name,
            address=address,
            abi=artifact.abi,
            args=_jsonable(args),
            transaction_hash=tx_hash,
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            deployer=sender,
            bytecode_hash=artifact.bytecode_hash,
            timestamp=int(time.time()),
        )
        self.store.save(deployment)

        if log:
            logger.info(f'deployed "{name}" (tx: {tx_hash}) at {address} with {deployment.gas_used} gas')
        return deployment

    def _is_reusable(self, existing: Deployment, artifact: Artifact, args: List[Any]) -> bool:
        if existing.bytecode_hash != artifact.bytecode_hash or existing.args != _jsonable(args):
            return False
        code = self.client.w3.eth.get_code(existing.address)
        if not code:
            logger.warning(f"No contract code found at {existing.address}, redeploying {existing.name}")
            return False
        return True

    def _check_deployment_requirements(self, sender: str) -> None:
        """Check the deployer can pay for gas"""
        balance = self.client.get_balance(sender)
        if balance == 0:
            raise LotteryDeployError(f"Insufficient balance for contract deployment from {sender}")
        if balance < MIN_DEPLOY_BALANCE:
            logger.warning(f"Low balance: {Web3.from_wei(balance, 'ether')} ETH. Deployment may fail due to insufficient gas.")

    def get_contract(self, name: str, sender: Optional[str] = None) -> ContractWrapper:
        """Bound wrapper for the recorded deployment of `name`"""
        deployment = self.store.get(name)
        contract = self.client.contract(address=deployment.address, abi=deployment.abi)
        wrapper_cls = CONTRACT_WRAPPERS.get(name, ContractWrapper)
        return wrapper_cls(self.client, contract, sender or self.client.named_account("deployer"))
