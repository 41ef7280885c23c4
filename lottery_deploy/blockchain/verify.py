"""
Block explorer source verification (Etherscan API).

Uses the standard-JSON compiler input recorded in the hardhat build-info of
the artifact, so the explorer compiles exactly what was deployed.
"""

import json
import time
from typing import Any, Dict, List, Optional

import requests
from eth_abi import encode as abi_encode

from ..exceptions import VerificationError
from ..utils.logger import get_logger
from .artifacts import Artifact

logger = get_logger(__name__)

ALREADY_VERIFIED = "already verified"
PENDING = "pending in queue"


def encode_constructor_args(abi: List[Dict[str, Any]], args: List[Any]) -> str:
    """ABI-encode constructor args as the hex string (no 0x) the explorer expects"""
    constructor = next((item for item in abi if item.get("type") == "constructor"), None)
    if constructor is None:
        if args:
            raise VerificationError("Constructor args given but the ABI has no constructor")
        return ""

    types = [i["type"] for i in constructor.get("inputs", [])]
    if len(types) != len(args):
        raise VerificationError(f"Constructor expects {len(types)} args, got {len(args)}")

    values = []
    for abi_type, value in zip(types, args):
        if abi_type.startswith("bytes") and isinstance(value, str):
            value = bytes.fromhex(value[2:] if value.startswith("0x") else value)
        elif abi_type.startswith(("uint", "int")):
            value = int(value)
        values.append(value)
    return abi_encode(types, values).hex()


class EtherscanVerifier:
    """Submits and polls verification requests"""

    def __init__(self, api_key: str, chain_id: int, api_url: str = "https://api.etherscan.io/v2/api",
                 poll_interval: float = 5, max_attempts: int = 20, timeout: float = 30):
        self.api_key = api_key
        self.chain_id = chain_id
        self.api_url = api_url
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.timeout = timeout

    def _request(self, method: str, params: Dict[str, Any], data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = {"chainid": self.chain_id, "apikey": self.api_key, "module": "contract", **params}
        try:
            response = requests.request(method, self.api_url, params=params, data=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise VerificationError(f"Explorer request failed: {e}") from e
        return response.json()

    def submit(self, address: str, artifact: Artifact, constructor_args: str) -> str:
        build_info = artifact.build_info
        if not build_info or "input" not in build_info:
            raise VerificationError(f"No build info with compiler input for {artifact.name}; compile with hardhat to verify")

        payload = {
            "contractaddress": address,
            "sourceCode": json.dumps(build_info["input"]),
            "codeformat": "solidity-standard-json-input",
            "contractname": artifact.fully_qualified_name,
            "compilerversion": "v" + build_info["solcLongVersion"],
            # the explorer's own spelling
            "constructorArguements": constructor_args,
        }
        result = self._request("POST", {"action": "verifysourcecode"}, data=payload)
        if result.get("status") != "1":
            message = str(result.get("result", ""))
            if ALREADY_VERIFIED in message.lower():
                return ""
            raise VerificationError(f"Verification submission rejected: {message}")
        return result["result"]

    def check_status(self, guid: str) -> str:
        result = self._request("GET", {"action": "checkverifystatus", "guid": guid})
        return str(result.get("result", ""))

    def verify(self, address: str, artifact: Artifact, args: List[Any]) -> bool:
        """Verify `address`; True when verified now or already verified."""
        logger.info(f"Verifying contract {artifact.name} at {address}...")
        guid = self.submit(address, artifact, encode_constructor_args(artifact.abi, args))
        if not guid:
            logger.info("Already verified!")
            return True

        for _ in range(self.max_attempts):
            status = self.check_status(guid)
            if status.lower().startswith("pass"):
                logger.info(f"Successfully verified {artifact.name} at {address}")
                return True
            if ALREADY_VERIFIED in status.lower():
                logger.info("Already verified!")
                return True
            if PENDING not in status.lower():
                raise VerificationError(f"Verification failed: {status}")
            time.sleep(self.poll_interval)

        raise VerificationError(f"Verification still pending after {self.max_attempts} checks (guid {guid})")


def verify(address: str, args: List[Any], artifact: Artifact, api_key: str, chain_id: int,
           etherscan_config: Optional[Dict[str, Any]] = None) -> bool:
    cfg = etherscan_config or {}
    verifier = EtherscanVerifier(
        api_key,
        chain_id,
        api_url=cfg.get("api_url", "https://api.etherscan.io/v2/api"),
        poll_interval=float(cfg.get("poll_interval", 5)),
        max_attempts=int(cfg.get("max_attempts", 20)),
    )
    return verifier.verify(address, artifact, args)
