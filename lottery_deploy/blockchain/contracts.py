"""
Smart Contract Interface and Management

Typed wrappers over the Lottery and VRFCoordinatorV2Mock ABIs. The contracts
themselves are external; only their public surface is modelled here.
"""

import ast
from typing import Any, Dict, List, Optional, Tuple

from eth_abi import decode as abi_decode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError
from web3.logs import DISCARD
from web3.types import TxReceipt

from ..models import LotteryState, RevertReason
from ..utils.logger import get_logger

logger = get_logger(__name__)

ERROR_STRING_SELECTOR = "0x08c379a0"
PANIC_SELECTOR = "0x4e487b71"
REVERT_PREFIX = "execution reverted: "


def _raw_revert_bytes(exc: Exception) -> Optional[bytes]:
    """Revert payload carried in the args of eth-tester's TransactionFailed"""
    if not exc.args:
        return None
    arg = exc.args[0]
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg)
    if isinstance(arg, str):
        if arg.startswith(REVERT_PREFIX):
            arg = arg[len(REVERT_PREFIX):]
        if arg.startswith(("b'", 'b"')):
            try:
                value = ast.literal_eval(arg)
            except (ValueError, SyntaxError):
                return None
            if isinstance(value, bytes):
                return value
    return None


def _revert_data(exc: Exception) -> Optional[str]:
    data = getattr(exc, "data", None)
    if data is None:
        data = _raw_revert_bytes(exc)
    if isinstance(data, dict):
        data = data.get("data")
    if isinstance(data, (bytes, bytearray)):
        data = Web3.to_hex(data)
    if isinstance(data, str) and data.startswith("0x"):
        return data
    return None


def _error_signature(item: Dict[str, Any]) -> str:
    return f"{item['name']}({','.join(i['type'] for i in item.get('inputs', []))})"


def decode_revert(exc: Exception, abi: Optional[List[Dict[str, Any]]] = None) -> RevertReason:
    """Turn a web3 revert into the custom error or reason string that caused it."""
    data = _revert_data(exc)
    if data and len(data) >= 10:
        selector, payload = data[:10].lower(), bytes.fromhex(data[10:])
        if selector == ERROR_STRING_SELECTOR:
            return RevertReason(abi_decode(["string"], payload)[0])
        if selector == PANIC_SELECTOR:
            return RevertReason("Panic", tuple(abi_decode(["uint256"], payload)))
        for item in abi or []:
            if item.get("type") != "error":
                continue
            if Web3.to_hex(function_signature_to_4byte_selector(_error_signature(item))) == selector:
                types = [i["type"] for i in item.get("inputs", [])]
                return RevertReason(item["name"], tuple(abi_decode(types, payload)) if types else ())

    message = getattr(exc, "message", None) or (exc.args[0] if exc.args else str(exc))
    message = str(message)
    if message.startswith(REVERT_PREFIX):
        message = message[len(REVERT_PREFIX):]
    return RevertReason(message)


class ContractWrapper:
    """A deployed contract bound to a chain client and a sending account"""

    def __init__(self, client, contract: Contract, sender: str):
        self.client = client
        self.contract = contract
        self.sender = sender

    @property
    def address(self) -> str:
        return self.contract.address

    @property
    def abi(self) -> List[Dict[str, Any]]:
        return self.contract.abi

    def connect(self, sender: str) -> "ContractWrapper":
        """Same contract, transactions sent from `sender`"""
        return type(self)(self.client, self.contract, sender)

    def _call(self, function_name: str, *args) -> Any:
        return getattr(self.contract.functions, function_name)(*args).call({"from": self.sender})

    def _transact(self, function_name: str, *args, value: int = 0) -> TxReceipt:
        fn = getattr(self.contract.functions, function_name)(*args)
        return self.client.transact(fn, self.sender, value=value, description=function_name)

    def decode_events(self, receipt: TxReceipt, event_name: str) -> List[Any]:
        """Events named `event_name` this contract emitted in `receipt`"""
        event = getattr(self.contract.events, event_name)()
        return list(event.process_receipt(receipt, errors=DISCARD))

    def revert_reason(self, exc: ContractLogicError) -> RevertReason:
        return decode_revert(exc, self.abi)


class Lottery(ContractWrapper):

    def enter_lottery(self, value: Optional[int] = None) -> TxReceipt:
        if value is None:
            value = self.get_entrance_fee()
        return self._transact("enterLottery", value=value)

    def check_upkeep(self, check_data: bytes = b"") -> Tuple[bool, bytes]:
        upkeep_needed, perform_data = self._call("checkUpkeep", check_data)
        return bool(upkeep_needed), perform_data

    def perform_upkeep(self, perform_data: bytes = b"") -> TxReceipt:
        return self._transact("performUpkeep", perform_data)

    def request_id(self, receipt: TxReceipt) -> int:
        """Randomness request id announced by `RequestedLotteryWinner` in an upkeep receipt"""
        events = self.decode_events(receipt, "RequestedLotteryWinner")
        if not events:
            raise ValueError("No RequestedLotteryWinner event in receipt")
        return int(events[0]["args"]["reqId"])

    def get_lottery_state(self) -> LotteryState:
        return LotteryState(int(self._call("getLotteryState")))

    def get_entrance_fee(self) -> int:
        return int(self._call("getEntranceFee"))

    def get_interval(self) -> int:
        return int(self._call("getInterval"))

    def get_player(self, index: int) -> str:
        return self._call("getPlayer", index)

    def get_num_of_players(self) -> int:
        return int(self._call("getNumOfPlayers"))

    def get_recent_winner(self) -> str:
        return self._call("getRecentWinner")

    def get_last_time_stamp(self) -> int:
        return int(self._call("getLastTimeStamp"))


class VRFCoordinatorV2Mock(ContractWrapper):

    def create_subscription(self) -> int:
        receipt = self._transact("createSubscription")
        events = self.decode_events(receipt, "SubscriptionCreated")
        if not events:
            raise ValueError("No SubscriptionCreated event in receipt")
        sub_id = int(events[0]["args"]["subId"])
        logger.info(f"Subscription ID is: {sub_id}")
        return sub_id

    def fund_subscription(self, subscription_id: int, amount: int) -> TxReceipt:
        return self._transact("fundSubscription", subscription_id, amount)

    def add_consumer(self, subscription_id: int, consumer: str) -> TxReceipt:
        return self._transact("addConsumer", subscription_id, consumer)

    def fulfill_random_words(self, request_id: int, consumer: str) -> TxReceipt:
        return self._transact("fulfillRandomWords", request_id, consumer)


CONTRACT_WRAPPERS = {
    "Lottery": Lottery,
    "VRFCoordinatorV2Mock": VRFCoordinatorV2Mock,
}
