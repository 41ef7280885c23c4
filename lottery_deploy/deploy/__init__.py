"""
Ordered deploy steps. Each step carries tags; a run executes, in order, every
step sharing at least one tag with the request.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from ..utils.logger import get_logger
from . import frontend, lottery, mocks

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeployStep:
    id: str
    run: Callable
    tags: Tuple[str, ...]


DEPLOY_STEPS: List[DeployStep] = [
    DeployStep("00_deploy_mocks", mocks.deploy_mocks, mocks.TAGS),
    DeployStep("01_deploy_lottery", lottery.deploy_lottery, lottery.TAGS),
    DeployStep("99_update_frontend", frontend.update_frontend, frontend.TAGS),
]


def run_deploy(env, tags: Iterable[str] = ("all",)) -> List[str]:
    """Run the steps matching `tags`; returns the ids of the steps that ran"""
    wanted = set(tags)
    ran = []
    for step in DEPLOY_STEPS:
        if wanted.isdisjoint(step.tags):
            continue
        logger.debug(f"Running deploy step {step.id}")
        step.run(env)
        ran.append(step.id)
    return ran


def fixture(env, tags: Iterable[str] = ("all",)) -> List[str]:
    """Forget earlier deployments, then deploy afresh"""
    env.store.reset()
    return run_deploy(env, tags)
