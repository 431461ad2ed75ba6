"""Domain models for the onboarding flow."""

from fin_onboarding.models.base import Event
from fin_onboarding.models.enums import (
    AuthProvider,
    FinancialGoal,
    PageKind,
    PermissionStatus,
    RiskProfile,
)
from fin_onboarding.models.profile import ProfileModel

__all__ = [
    "AuthProvider",
    "Event",
    "FinancialGoal",
    "PageKind",
    "PermissionStatus",
    "ProfileModel",
    "RiskProfile",
]
