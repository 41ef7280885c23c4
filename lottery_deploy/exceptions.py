"""Exceptions raised by the deployment tooling."""


class LotteryDeployError(Exception):
    """Base class for all deployment tooling errors"""


class ConfigError(LotteryDeployError):
    """Configuration file or environment is unusable"""


class NetworkConfigError(ConfigError):
    """No parameters are known for the requested network"""


class ArtifactError(LotteryDeployError):
    """Compiled contract artifact is malformed"""


class ArtifactNotFoundError(ArtifactError):
    """Compiled contract artifact could not be located"""


class DeploymentNotFoundError(LotteryDeployError):
    """No deployment record exists for the requested contract"""


class TransactionFailedError(LotteryDeployError):
    """A mined transaction reported status 0"""

    def __init__(self, tx_hash: str, description: str = "Transaction"):
        super().__init__(f"{description} failed: {tx_hash}")
        self.tx_hash = tx_hash


class ChainControlError(LotteryDeployError):
    """Time travel / mining / snapshot requested on a chain that does not support it"""


class VerificationError(LotteryDeployError):
    """Block explorer rejected the source verification"""
