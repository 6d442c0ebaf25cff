from pogoprofile.modules.bootstrap.results import BootstrapState, StepResult, StepStatus
from pogoprofile.modules.bootstrap.service import BootstrapOrchestrator

__all__ = ["BootstrapOrchestrator", "BootstrapState", "StepResult", "StepStatus"]
