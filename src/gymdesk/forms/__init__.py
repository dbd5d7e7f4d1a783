"""Multi-step input forms."""

from .trainer_wizard import STEPS, TrainerWizard, WizardStep

__all__ = ["STEPS", "TrainerWizard", "WizardStep"]
