from unittest.mock import MagicMock

import pytest
from eth_abi import encode as abi_encode
from eth_tester.exceptions import TransactionFailed
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3
from web3.exceptions import ContractCustomError, ContractLogicError

from helpers import DEPLOYER, LOTTERY_ABI, LOTTERY_ADDRESS, PLAYER
from lottery_deploy.blockchain.contracts import Lottery, VRFCoordinatorV2Mock, decode_revert
from lottery_deploy.models import LotteryState


def custom_error_data(signature, types=(), values=()):
    selector = Web3.to_hex(function_signature_to_4byte_selector(signature))
    return selector + abi_encode(list(types), list(values)).hex()


def test_decode_custom_error_without_args():
    data = custom_error_data("Lottery__NotEnoughETHEntered()")
    reason = decode_revert(ContractCustomError(data, data=data), LOTTERY_ABI)
    assert reason.name == "Lottery__NotEnoughETHEntered"
    assert str(reason) == "Lottery__NotEnoughETHEntered"


def test_decode_custom_error_with_args():
    data = custom_error_data("Lottery__UpkeepNotNeeded(uint256,uint256,uint256)", ["uint256"] * 3, [0, 0, 0])
    reason = decode_revert(ContractCustomError(data, data=data), LOTTERY_ABI)
    assert reason.args == (0, 0, 0)
    assert str(reason) == "Lottery__UpkeepNotNeeded(0, 0, 0)"


def test_decode_reason_string():
    data = "0x08c379a0" + abi_encode(["string"], ["nonexistent request"]).hex()
    reason = decode_revert(ContractLogicError("execution reverted: nonexistent request", data=data))
    assert str(reason) == "nonexistent request"


def test_decode_falls_back_to_message():
    reason = decode_revert(ContractLogicError("execution reverted: Lottery__NotOpen"), LOTTERY_ABI)
    assert str(reason) == "Lottery__NotOpen"


def test_decode_in_process_custom_error_message():
    data = custom_error_data("Lottery__UpkeepNotNeeded(uint256,uint256,uint256)", ["uint256"] * 3, [0, 0, 0])
    exc = TransactionFailed(f"execution reverted: {bytes.fromhex(data[2:])!r}")
    assert str(decode_revert(exc, LOTTERY_ABI)) == "Lottery__UpkeepNotNeeded(0, 0, 0)"


def test_decode_in_process_raw_revert_bytes():
    data = custom_error_data("Lottery__NotOpen()")
    exc = TransactionFailed(bytes.fromhex(data[2:]))
    assert str(decode_revert(exc, LOTTERY_ABI)) == "Lottery__NotOpen"


def test_decode_in_process_reason_string():
    exc = TransactionFailed("execution reverted: nonexistent request")
    assert str(decode_revert(exc, LOTTERY_ABI)) == "nonexistent request"


def test_unknown_selector_falls_back_to_message():
    exc = ContractCustomError("0xdeadbeef", data="0xdeadbeef")
    assert decode_revert(exc, LOTTERY_ABI).name == "0xdeadbeef"


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def contract():
    contract = MagicMock(address=LOTTERY_ADDRESS, abi=LOTTERY_ABI)
    return contract


def test_lottery_accessors(client, contract):
    contract.functions.getLotteryState.return_value.call.return_value = 1
    contract.functions.getInterval.return_value.call.return_value = 30
    contract.functions.getPlayer.return_value.call.return_value = DEPLOYER
    lottery = Lottery(client, contract, DEPLOYER)

    assert lottery.get_lottery_state() is LotteryState.CALCULATING
    assert lottery.get_interval() == 30
    assert lottery.get_player(0) == DEPLOYER
    contract.functions.getPlayer.assert_called_with(0)
    contract.functions.getPlayer.return_value.call.assert_called_with({"from": DEPLOYER})


def test_check_upkeep_is_a_static_call(client, contract):
    contract.functions.checkUpkeep.return_value.call.return_value = [True, b""]
    lottery = Lottery(client, contract, DEPLOYER)

    assert lottery.check_upkeep() == (True, b"")
    client.transact.assert_not_called()


def test_enter_lottery_pays_entrance_fee_by_default(client, contract):
    contract.functions.getEntranceFee.return_value.call.return_value = 10**16
    lottery = Lottery(client, contract, DEPLOYER)

    lottery.enter_lottery()

    client.transact.assert_called_once_with(
        contract.functions.enterLottery.return_value, DEPLOYER, value=10**16, description="enterLottery"
    )


def test_connect_changes_sender_only(client, contract):
    lottery = Lottery(client, contract, DEPLOYER)
    player_lottery = lottery.connect(PLAYER)
    assert isinstance(player_lottery, Lottery)
    assert player_lottery.sender == PLAYER
    assert player_lottery.contract is contract
    assert lottery.sender == DEPLOYER


def test_request_id_from_upkeep_receipt(client, contract):
    contract.events.RequestedLotteryWinner.return_value.process_receipt.return_value = [{"args": {"reqId": 1}}]
    assert Lottery(client, contract, DEPLOYER).request_id({"logs": []}) == 1


def test_request_id_missing(client, contract):
    contract.events.RequestedLotteryWinner.return_value.process_receipt.return_value = []
    with pytest.raises(ValueError):
        Lottery(client, contract, DEPLOYER).request_id({"logs": []})


def test_create_subscription_reads_event(client, contract):
    contract.events.SubscriptionCreated.return_value.process_receipt.return_value = [{"args": {"subId": 1, "owner": DEPLOYER}}]
    mock = VRFCoordinatorV2Mock(client, contract, DEPLOYER)

    assert mock.create_subscription() == 1
    client.transact.assert_called_once_with(
        contract.functions.createSubscription.return_value, DEPLOYER, value=0, description="createSubscription"
    )


def test_fulfill_random_words(client, contract):
    mock = VRFCoordinatorV2Mock(client, contract, DEPLOYER)
    mock.fulfill_random_words(1, LOTTERY_ADDRESS)
    contract.functions.fulfillRandomWords.assert_called_once_with(1, LOTTERY_ADDRESS)
