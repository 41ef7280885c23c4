"""
Deployment records, one JSON file per contract under `deployments/<network>/`.

The in-process chain starts empty on every run, so its records are only
kept in memory.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import DeploymentNotFoundError
from ..models import Deployment
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DeploymentStore:
    """Saved deployments for one network"""

    def __init__(self, network: str, chain_id: int, deployments_dir=None):
        self.network = network
        self.chain_id = chain_id
        self.directory: Optional[Path] = Path(deployments_dir) / network if deployments_dir else None
        self._records: Dict[str, Deployment] = {}
        self._load()

    @property
    def persistent(self) -> bool:
        return self.directory is not None

    def _load(self) -> None:
        if not self.persistent or not self.directory.exists():
            return

        chain_id_file = self.directory / ".chainId"
        if chain_id_file.exists() and chain_id_file.read_text().strip() != str(self.chain_id):
            logger.warning(
                f"Deployments in {self.directory} belong to chain {chain_id_file.read_text().strip()}, "
                f"not {self.chain_id}; ignoring them"
            )
            return

        for path in sorted(self.directory.glob("*.json")):
            try:
                with open(path, 'r') as f:
                    record = Deployment.from_dict(json.load(f))
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Could not load {path}: {e}")
                continue
            self._records[record.name] = record

    def save(self, deployment: Deployment) -> None:
        self._records[deployment.name] = deployment
        if not self.persistent:
            return

        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / ".chainId").write_text(str(self.chain_id))
        path = self.directory / f"{deployment.name}.json"
        with open(path, 'w') as f:
            json.dump(deployment.to_dict(), f, indent=2)
        logger.debug(f"Deployment info saved to: {path}")

    def get(self, name: str) -> Deployment:
        try:
            return self._records[name]
        except KeyError:
            raise DeploymentNotFoundError(f"No deployment found for {name} on {self.network}") from None

    def get_or_none(self, name: str) -> Optional[Deployment]:
        return self._records.get(name)

    def all(self) -> List[Deployment]:
        return list(self._records.values())

    def reset(self) -> None:
        """Forget every record, on disk as well"""
        if self.persistent and self.directory.exists():
            for path in self.directory.glob("*.json"):
                path.unlink()
        self._records.clear()
