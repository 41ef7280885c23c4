"""Core data models for the lottery deployment tooling."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class LotteryState(IntEnum):
    """Lottery states as defined in the Solidity contract."""

    OPEN = 0
    CALCULATING = 1


@dataclass
class NetworkConfig:
    """Per-chain parameters passed to the Lottery constructor."""

    name: str
    chain_id: int
    entrance_fee: int
    gas_lane: str
    callback_gas_limit: int
    interval: int
    subscription_id: Optional[int] = None
    vrf_coordinator: Optional[str] = None
    block_confirmations: int = 1


@dataclass
class Deployment:
    """Record of a contract deployed to a network."""

    name: str
    address: str
    abi: List[Dict[str, Any]]
    args: List[Any] = field(default_factory=list)
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    deployer: Optional[str] = None
    bytecode_hash: Optional[str] = None
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deployment":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)


@dataclass
class RevertReason:
    """Decoded revert: custom error name or `Error(string)` message."""

    name: str
    args: tuple = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


@dataclass
class LotteryStatus:
    """Snapshot of the Lottery read accessors."""

    address: str
    state: LotteryState
    entrance_fee: int
    interval: int
    num_players: int
    recent_winner: Optional[str]
    last_time_stamp: int
    balance: int
