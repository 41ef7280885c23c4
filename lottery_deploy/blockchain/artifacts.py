"""
Compiled contract artifacts.

Three layouts are understood, checked in this order:

- `<dir>/<Name>.abi` + `<Name>.bin` pairs, as written by `compile_contracts`
- hardhat: `<dir>/contracts/<File>.sol/<Name>.json`, with `<Name>.dbg.json`
  pointing at the build-info used for explorer verification
- foundry: `<dir>/<File>.sol/<Name>.json` with `bytecode.object`
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import solcx
from web3 import Web3

from ..exceptions import ArtifactError, ArtifactNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Artifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    source_name: Optional[str] = None
    build_info: Optional[Dict[str, Any]] = None

    @property
    def bytecode_hash(self) -> str:
        return Web3.to_hex(Web3.keccak(hexstr=self.bytecode))

    @property
    def fully_qualified_name(self) -> str:
        if self.source_name:
            return f"{self.source_name}:{self.name}"
        return self.name


def _normalize_bytecode(bytecode: Any, path: Path) -> str:
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not isinstance(bytecode, str) or not bytecode.strip():
        raise ArtifactError(f"Contract bytecode is empty in {path}")
    bytecode = bytecode.strip()
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    return bytecode


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Invalid JSON in {path}: {e}") from e


def _load_pair(artifacts_dir: Path, name: str) -> Optional[Artifact]:
    abi_file = artifacts_dir / f"{name}.abi"
    bin_file = artifacts_dir / f"{name}.bin"
    if not abi_file.exists():
        return None
    if not bin_file.exists():
        raise ArtifactNotFoundError(f"Contract bytecode not found: {bin_file}")

    abi = _read_json(abi_file)
    if not abi:
        raise ArtifactError(f"Contract ABI is empty: {abi_file}")
    return Artifact(name=name, abi=abi, bytecode=_normalize_bytecode(bin_file.read_text(), bin_file))


def _load_build_info(artifact_file: Path) -> Optional[Dict[str, Any]]:
    dbg_file = artifact_file.with_name(artifact_file.stem + ".dbg.json")
    if not dbg_file.exists():
        return None
    build_info_ref = _read_json(dbg_file).get("buildInfo")
    if not build_info_ref:
        return None
    build_info_file = (dbg_file.parent / build_info_ref).resolve()
    if not build_info_file.exists():
        logger.warning(f"Build info referenced by {dbg_file} not found: {build_info_file}")
        return None
    return _read_json(build_info_file)


def _load_json_artifact(artifacts_dir: Path, name: str) -> Optional[Artifact]:
    candidates = [
        p for p in sorted(artifacts_dir.rglob(f"{name}.json"))
        if "build-info" not in p.parts
    ]
    if not candidates:
        return None
    if len(candidates) > 1:
        logger.warning(f"Several artifacts named {name}; using {candidates[0]}")

    path = candidates[0]
    data = _read_json(path)
    abi = data.get("abi")
    if not abi:
        raise ArtifactError(f"ABI not found in artifact {path}")

    return Artifact(
        name=data.get("contractName", name),
        abi=abi,
        bytecode=_normalize_bytecode(data.get("bytecode"), path),
        source_name=data.get("sourceName"),
        build_info=_load_build_info(path),
    )


def load_artifact(artifacts_dir, name: str) -> Artifact:
    """Load the compiled artifact for contract `name` from `artifacts_dir`"""
    artifacts_dir = Path(artifacts_dir)
    if not artifacts_dir.exists():
        raise ArtifactNotFoundError(f"Artifacts directory not found: {artifacts_dir}")

    artifact = _load_pair(artifacts_dir, name) or _load_json_artifact(artifacts_dir, name)
    if artifact is None:
        raise ArtifactNotFoundError(f"No artifact for contract {name} under {artifacts_dir}")

    logger.debug(f"Loaded contract artifact for {name}")
    return artifact


def has_artifacts(artifacts_dir, *names: str) -> bool:
    try:
        for name in names:
            load_artifact(artifacts_dir, name)
    except ArtifactError:
        return False
    return True


def compile_contracts(contracts_dir, output_dir, solc_version: str,
                      remappings: Optional[List[str]] = None) -> List[str]:
    """Compile every Solidity source under `contracts_dir` into `.abi`/`.bin` pairs.

    Returns the names of the contracts written. Interfaces and abstract
    contracts (empty bytecode) are skipped.
    """
    contracts_dir = Path(contracts_dir)
    output_dir = Path(output_dir)
    sources = sorted(str(p) for p in contracts_dir.rglob("*.sol"))
    if not sources:
        raise ArtifactNotFoundError(f"No Solidity sources found under {contracts_dir}")

    installed = {str(v) for v in solcx.get_installed_solc_versions()}
    if solc_version not in installed:
        logger.info(f"Installing solc {solc_version}...")
        solcx.install_solc(solc_version)
    solcx.set_solc_version(solc_version)

    logger.info(f"Compiling {len(sources)} source file(s) with solc {solc_version}")
    result = solcx.compile_files(
        sources,
        output_values=["abi", "bin"],
        optimize=True,
        import_remappings=remappings or [],
        allow_paths=[str(contracts_dir.resolve())],
    )

    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for key, interface in sorted(result.items()):
        name = key.rsplit(":", 1)[-1]
        if not interface.get("bin"):
            continue
        (output_dir / f"{name}.abi").write_text(json.dumps(interface["abi"], indent=2))
        (output_dir / f"{name}.bin").write_text(interface["bin"])
        written.append(name)

    logger.info(f"Wrote {len(written)} artifact(s) to {output_dir}: {', '.join(written)}")
    return written
