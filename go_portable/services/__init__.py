from .outcome_classifier import OutcomeClassifier
from .run_orchestrator import RunOrchestrator
from .target_verifier import TargetVerifier

__all__ = [
    "OutcomeClassifier",
    "RunOrchestrator",
    "TargetVerifier",
]
