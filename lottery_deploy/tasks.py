"""Operator tasks against a deployed Lottery."""

from typing import Optional

from web3.types import TxReceipt

from .models import LotteryStatus
from .utils.logger import get_logger

logger = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def enter_lottery(env, sender: Optional[str] = None) -> TxReceipt:
    """Enter with the entrance fee plus one wei"""
    lottery = env.get_contract("Lottery", sender)
    entrance_fee = lottery.get_entrance_fee()
    receipt = lottery.enter_lottery(entrance_fee + 1)
    logger.info(f"Entered lottery {lottery.address} from {lottery.sender}")
    return receipt


def mock_offchain(env) -> Optional[str]:
    """Act as the keeper: perform upkeep if needed and, on dev chains, play the VRF node too.

    Returns the recent winner when the draw completed here.
    """
    lottery = env.get_contract("Lottery")
    upkeep_needed, _ = lottery.check_upkeep(b"")
    if not upkeep_needed:
        logger.info("No upkeep needed!")
        return None

    receipt = lottery.perform_upkeep(b"")
    request_id = lottery.request_id(receipt)
    logger.info(f"Performed upkeep with RequestId: {request_id}")

    if not env.is_development:
        return None

    vrf_coordinator_mock = env.get_contract("VRFCoordinatorV2Mock")
    vrf_coordinator_mock.fulfill_random_words(request_id, lottery.address)
    recent_winner = lottery.get_recent_winner()
    logger.info(f"The winner is: {recent_winner}")
    return recent_winner


def lottery_status(env) -> LotteryStatus:
    lottery = env.get_contract("Lottery")
    recent_winner = lottery.get_recent_winner()
    return LotteryStatus(
        address=lottery.address,
        state=lottery.get_lottery_state(),
        entrance_fee=lottery.get_entrance_fee(),
        interval=lottery.get_interval(),
        num_players=lottery.get_num_of_players(),
        recent_winner=None if recent_winner == ZERO_ADDRESS else recent_winner,
        last_time_stamp=lottery.get_last_time_stamp(),
        balance=env.client.get_balance(lottery.address),
    )
