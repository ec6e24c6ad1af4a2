"""Concrete provisioning steps and their fixed execution order."""

from kickstart.steps.base import Step, StepContext, StepOutcome
from kickstart.steps.environment import CliCheckStep, SkillsStep, TokensStep
from kickstart.steps.infra import InfraStep
from kickstart.steps.materialize import DesignSystemStep, LegalDocsStep, LocalRepoStep
from kickstart.steps.questions import (
    AppParamsStep,
    DomainsStep,
    I18nStep,
    LegalModeStep,
    LegalProfileStep,
    ProjectInfoStep,
    ScopesStep,
)
from kickstart.steps.remote import GitRemoteStep
from kickstart.steps.summary import FinishStep, SummaryStep

STEP_CLASSES: tuple[type[Step], ...] = (
    SkillsStep,
    CliCheckStep,
    TokensStep,
    ProjectInfoStep,
    DomainsStep,
    ScopesStep,
    AppParamsStep,
    I18nStep,
    LegalModeStep,
    LegalProfileStep,
    LocalRepoStep,
    DesignSystemStep,
    LegalDocsStep,
    InfraStep,
    GitRemoteStep,
    SummaryStep,
    FinishStep,
)

STEP_IDS: tuple[str, ...] = tuple(cls.id for cls in STEP_CLASSES)


def default_steps(ctx: StepContext) -> list[Step]:
    """Instantiate every step, in execution order."""
    return [cls(ctx) for cls in STEP_CLASSES]


__all__ = [
    "STEP_CLASSES",
    "STEP_IDS",
    "Step",
    "StepContext",
    "StepOutcome",
    "default_steps",
]
