"""Shared constants and fakes for the offline tests."""

import json
from types import SimpleNamespace

HARDHAT_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEPLOYER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
PLAYER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
LOTTERY_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
MOCK_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"

LOTTERY_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "vrfCoordinatorV2", "type": "address"},
            {"name": "entranceFee", "type": "uint256"},
            {"name": "gasLane", "type": "bytes32"},
            {"name": "subscriptionId", "type": "uint64"},
            {"name": "callbackGasLimit", "type": "uint32"},
            {"name": "interval", "type": "uint256"},
        ],
    },
    {"type": "error", "name": "Lottery__NotEnoughETHEntered", "inputs": []},
    {"type": "error", "name": "Lottery__NotOpen", "inputs": []},
    {
        "type": "error",
        "name": "Lottery__UpkeepNotNeeded",
        "inputs": [
            {"name": "currentBalance", "type": "uint256"},
            {"name": "numPlayers", "type": "uint256"},
            {"name": "lotteryState", "type": "uint256"},
        ],
    },
    {
        "type": "event",
        "name": "RequestedLotteryWinner",
        "anonymous": False,
        "inputs": [{"name": "reqId", "type": "uint256", "indexed": True}],
    },
]


def write_artifact_pair(directory, name, abi, bytecode="0x6080604052"):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / f"{name}.abi").write_text(json.dumps(abi))
    (directory / f"{name}.bin").write_text(bytecode)


class FakeEnv(SimpleNamespace):
    """Stand-in for DeployEnvironment with mocked chain access"""

    def named_account(self, name):
        return {"deployer": DEPLOYER, "player": PLAYER}[name]

    def get_contract(self, name, sender=None):
        return self.contracts[name]
