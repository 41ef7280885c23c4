#!/usr/bin/env python3
"""
Lottery deployment tool

Examples:
  lottery-deploy deploy                      Deploy everything to the in-process chain
  lottery-deploy --network sepolia deploy    Deploy to sepolia (needs SEPOLIA_RPC_URL, PRIVATE_KEY)
  lottery-deploy --network localhost upkeep  Act as keeper (and VRF node on dev chains)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# .env first: LOG_LEVEL / LOG_FILE are read when the first logger is created below
load_dotenv(Path.cwd() / ".env")

from web3 import Web3

from .blockchain.artifacts import compile_contracts
from .blockchain.verify import verify
from .deploy import run_deploy
from .environment import DeployEnvironment
from .exceptions import LotteryDeployError, VerificationError
from .tasks import enter_lottery, lottery_status, mock_offchain
from .utils.config import get_config_value, load_config


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lottery-deploy",
        description=__doc__.split("\n\n")[0].strip(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n\n", 1)[1],
    )
    parser.add_argument("--network", help="Network name (default: DEPLOY_NETWORK or hardhat)")
    parser.add_argument("--config", help="Path to JSON config file (default: config/lottery.conf)")

    sub = parser.add_subparsers(dest="command", required=True)

    deploy_p = sub.add_parser("deploy", help="Run deploy steps")
    deploy_p.add_argument("--tags", default="all", help="Comma separated tags (default: all)")
    deploy_p.add_argument("--reset", action="store_true", help="Ignore earlier deployments on this network")

    sub.add_parser("compile", help="Compile Solidity sources into .abi/.bin artifacts")

    verify_p = sub.add_parser("verify", help="Verify a recorded deployment on the block explorer")
    verify_p.add_argument("name", help="Contract name, e.g. Lottery")

    sub.add_parser("enter", help="Enter the lottery from the deployer account")
    sub.add_parser("upkeep", help="Check and perform upkeep")
    sub.add_parser("status", help="Show the lottery state")
    return parser


def _print_status(env: DeployEnvironment) -> None:
    status = lottery_status(env)
    print(f"\n🎲 Lottery on {env.network} (chain {env.chain_id})")
    print("-" * 50)
    print(f"   📍 Address: {status.address}")
    print(f"   🔁 State: {status.state.name}")
    print(f"   💸 Entrance Fee: {Web3.from_wei(status.entrance_fee, 'ether')} ETH")
    print(f"   ⏱️  Interval: {status.interval} seconds")
    print(f"   👥 Players: {status.num_players}")
    print(f"   💎 Balance: {Web3.from_wei(status.balance, 'ether')} ETH")
    print(f"   🏆 Recent Winner: {status.recent_winner or 'None'}")
    print(f"   🕒 Last Timestamp: {status.last_time_stamp}")
    print("-" * 50)


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)

    if args.command == "compile":
        names = compile_contracts(
            get_config_value(config, "deploy.contracts_dir", "contracts"),
            get_config_value(config, "deploy.artifacts_dir", "artifacts"),
            get_config_value(config, "deploy.solc_version", "0.8.7"),
            remappings=get_config_value(config, "deploy.remappings", []),
        )
        print(f"✅ Compiled {len(names)} contract(s)")
        return 0

    env = DeployEnvironment(config, args.network).connect()
    print(f"✅ Connected to {env.network} (chain {env.chain_id})")

    if args.command == "deploy":
        if args.reset:
            env.store.reset()
        tags = [t.strip() for t in args.tags.split(",") if t.strip()]
        ran = run_deploy(env, tags)
        print(f"✅ Ran {len(ran)} deploy step(s): {', '.join(ran) or 'none'}")
        for deployment in env.store.all():
            print(f"   📝 {deployment.name}: {deployment.address}")
    elif args.command == "verify":
        api_key = get_config_value(config, "etherscan.api_key")
        if not api_key:
            raise VerificationError("ETHERSCAN_API_KEY is not set")
        deployment = env.store.get(args.name)
        verify(
            deployment.address,
            deployment.args,
            env.deployer.load_artifact(args.name),
            api_key,
            env.chain_id,
            config.get("etherscan"),
        )
        print(f"✅ {args.name} verified at {deployment.address}")
    elif args.command == "enter":
        receipt = enter_lottery(env)
        print(f"✅ Entered! tx {Web3.to_hex(receipt['transactionHash'])}")
    elif args.command == "upkeep":
        winner = mock_offchain(env)
        if winner:
            print(f"🏆 The winner is: {winner}")
    elif args.command == "status":
        _print_status(env)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except (LotteryDeployError, ConnectionError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
