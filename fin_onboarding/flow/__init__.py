"""Onboarding flow: page sequence, gates, collaborators and the controller."""

from fin_onboarding.flow.collaborators import AuthResult, PaywallResult
from fin_onboarding.flow.controller import FlowController
from fin_onboarding.flow.events import EventEmitter
from fin_onboarding.flow.pages import GATES, REFERENCE_FLOW, gate_satisfied
from fin_onboarding.flow.projection import project_savings, success_rate
from fin_onboarding.flow.referral import ReferralValidator

__all__ = [
    "AuthResult",
    "EventEmitter",
    "FlowController",
    "GATES",
    "PaywallResult",
    "REFERENCE_FLOW",
    "ReferralValidator",
    "gate_satisfied",
    "project_savings",
    "success_rate",
]
