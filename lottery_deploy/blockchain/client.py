"""Chain client used by the deploy steps, tasks and tests."""

from __future__ import annotations

import math
import os
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.contract import Contract
from web3.types import TxReceipt

from ..exceptions import ChainControlError, ConfigError, TransactionFailedError
from ..networks import is_development_chain
from ..utils.logger import get_logger

logger = get_logger(__name__)

IN_PROCESS_NETWORK = "hardhat"
NAMED_ACCOUNTS = {"deployer": 0, "player": 1}


class ChainClient:
    """Thin wrapper around web3.py bound to one named network."""

    def __init__(self, network: str, config: Dict[str, Any]):
        self.network = network
        self._config = config

        networks_cfg = config.get("networks", {})
        if network not in networks_cfg:
            raise ConfigError(f"Unknown network '{network}'; known networks: {', '.join(sorted(networks_cfg))}")
        net_cfg = networks_cfg[network]

        self.rpc_url: Optional[str] = net_cfg.get("rpc_url")
        self.chain_id: int = int(net_cfg.get("chain_id", 31337))
        self.block_confirmations: int = int(net_cfg.get("block_confirmations", 1))
        self.rpc_timeout: float = float(config.get("network", {}).get("rpc_timeout", 60))
        self._gas_multiplier = Decimal(str(config.get("network", {}).get("gas_multiplier", "1.15")))

        self._gas_price_override: Optional[int] = None
        gas_price_setting = net_cfg.get("gas_price")
        if gas_price_setting:
            self._gas_price_override = Web3.to_wei(Decimal(str(gas_price_setting)), "gwei")

        # private keys: config list first, then PRIVATE_KEY / PLAYER_PRIVATE_KEY for live networks
        keys: List[str] = list(net_cfg.get("accounts", []))
        if not is_development_chain(network):
            for env_name in ("PRIVATE_KEY", "PLAYER_PRIVATE_KEY"):
                if os.getenv(env_name):
                    keys.append(os.environ[env_name])
        self._local_accounts: Dict[str, LocalAccount] = {}
        self._local_order: List[str] = []
        for key in keys:
            acct = Account.from_key(key)
            self._local_accounts[acct.address] = acct
            self._local_order.append(acct.address)

        self._w3: Optional[Web3] = None
        self._eth_tester = None

    @property
    def is_development(self) -> bool:
        return is_development_chain(self.network)

    @property
    def w3(self) -> Web3:
        if not self._w3:
            raise RuntimeError("Web3 provider not initialised; call connect() first")
        return self._w3

    def connect(self) -> Web3:
        """Open the provider for this network and check it answers."""
        if self._w3 is not None:
            return self._w3

        if self.network == IN_PROCESS_NETWORK and not self.rpc_url:
            from web3 import EthereumTesterProvider

            provider = EthereumTesterProvider()
            self._eth_tester = provider.ethereum_tester
            self._w3 = Web3(provider)
            logger.info("Started in-process chain for network %s", self.network)
        else:
            if not self.rpc_url:
                raise ConfigError(f"No rpc_url configured for network '{self.network}' (set {self.network.upper()}_RPC_URL)")
            self._w3 = Web3(Web3.HTTPProvider(self.rpc_url, request_kwargs={"timeout": self.rpc_timeout}))
            if not self._w3.is_connected():
                raise ConnectionError(f"Failed to connect to RPC at {self.rpc_url}")
            logger.info("Connected to RPC %s (network %s)", self.rpc_url, self.network)

            actual_chain_id = self._w3.eth.chain_id
            if actual_chain_id != self.chain_id:
                logger.warning(f"Chain ID mismatch: expected {self.chain_id}, got {actual_chain_id}")

        return self._w3

    def close(self) -> None:
        self._w3 = None
        self._eth_tester = None

    # accounts

    def get_accounts(self) -> List[str]:
        """Signer addresses: local keys first, then node-unlocked accounts on dev chains."""
        accounts = list(self._local_order)
        if self.is_development:
            accounts.extend(a for a in self.w3.eth.accounts if a not in self._local_accounts)
        return accounts

    def named_account(self, name: str) -> str:
        if name not in NAMED_ACCOUNTS:
            raise KeyError(f"Unknown named account '{name}'")
        accounts = self.get_accounts()
        index = NAMED_ACCOUNTS[name]
        if index >= len(accounts):
            raise ConfigError(f"Named account '{name}' needs at least {index + 1} accounts on {self.network}")
        return accounts[index]

    def get_balance(self, address: str) -> int:
        return self.w3.eth.get_balance(address)

    # transactions

    def contract(self, address: Optional[str] = None, abi: Optional[List[Dict[str, Any]]] = None,
                 bytecode: Optional[str] = None) -> Contract:
        if address:
            return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return self.w3.eth.contract(abi=abi, bytecode=bytecode)

    def send(self, fn, sender: str, value: int = 0) -> HexBytes:
        """Send a contract function or constructor call from `sender`."""
        account = self._local_accounts.get(sender)
        if account is None:
            return fn.transact({"from": sender, "value": value})

        w3 = self.w3
        gas_estimate = fn.estimate_gas({"from": sender, "value": value})
        txn = fn.build_transaction(
            {
                "from": sender,
                "value": value,
                "gas": math.ceil(gas_estimate * self._gas_multiplier),
                "gasPrice": self._gas_price_override or w3.eth.gas_price,
                "nonce": w3.eth.get_transaction_count(sender),
                "chainId": w3.eth.chain_id,
            }
        )
        signed = account.sign_transaction(txn)
        return w3.eth.send_raw_transaction(signed.raw_transaction)

    def transact(self, fn, sender: str, value: int = 0, confirmations: int = 1,
                 description: str = "Transaction") -> TxReceipt:
        tx_hash = self.send(fn, sender, value)
        logger.debug("%s sent: %s", description, Web3.to_hex(tx_hash))
        return self.wait_for_receipt(tx_hash, confirmations=confirmations, description=description)

    def wait_for_receipt(self, tx_hash, confirmations: int = 1, timeout: int = 120,
                         description: str = "Transaction") -> TxReceipt:
        w3 = self.w3
        receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        if receipt["status"] != 1:
            raise TransactionFailedError(Web3.to_hex(tx_hash), description)

        # automining chains never produce more blocks on their own
        if confirmations > 1 and not self.is_development:
            target = receipt["blockNumber"] + confirmations - 1
            deadline = time.monotonic() + timeout
            while w3.eth.block_number < target:
                if time.monotonic() > deadline:
                    logger.warning("Timed out waiting for %d confirmations of %s", confirmations, Web3.to_hex(tx_hash))
                    break
                time.sleep(1)
        return receipt

    # chain control (development chains only)

    def _rpc(self, method: str, params: List[Any]) -> Any:
        if not self.is_development:
            raise ChainControlError(f"{method} is only available on development chains, not {self.network}")
        response = self.w3.provider.make_request(method, params)
        if "error" in response:
            raise ChainControlError(f"{method} failed: {response['error']}")
        return response.get("result")

    def increase_time(self, seconds: int) -> None:
        if self._eth_tester is not None:
            pending = self._eth_tester.get_block_by_number("pending")
            self._eth_tester.time_travel(int(pending["timestamp"]) + int(seconds))
            return
        self._rpc("evm_increaseTime", [int(seconds)])

    def mine(self, blocks: int = 1) -> None:
        if self._eth_tester is not None:
            self._eth_tester.mine_blocks(blocks)
            return
        for _ in range(blocks):
            self._rpc("evm_mine", [])

    def snapshot(self) -> Any:
        if self._eth_tester is not None:
            return self._eth_tester.take_snapshot()
        return self._rpc("evm_snapshot", [])

    def revert(self, snapshot_id: Any) -> None:
        if self._eth_tester is not None:
            self._eth_tester.revert_to_snapshot(snapshot_id)
            return
        self._rpc("evm_revert", [snapshot_id])

    def block_timestamp(self, block_identifier="latest") -> int:
        return int(self.w3.eth.get_block(block_identifier)["timestamp"])

    # events

    def wait_for_event(self, contract: Contract, event_name: str, from_block: int,
                       timeout: float = 600, poll_interval: float = 5) -> Dict[str, Any]:
        """Poll logs until `event_name` is emitted by `contract`; return the first match."""
        event = getattr(contract.events, event_name)
        deadline = time.monotonic() + timeout
        logger.info("Waiting for %s from block %s (timeout %ss)", event_name, from_block, timeout)
        while True:
            logs = event.get_logs(from_block=from_block)
            if logs:
                logger.info("%s event fired in block %s", event_name, logs[0]["blockNumber"])
                return logs[0]
            if time.monotonic() > deadline:
                raise TimeoutError(f"{event_name} not emitted within {timeout}s")
            time.sleep(poll_interval)
