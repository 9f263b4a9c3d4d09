"""Navigation state machine for the study wizard."""

from __future__ import annotations

from wizard.navigation.controller import Navigator
from wizard.navigation.state import WizardState

__all__ = ["Navigator", "WizardState"]
