"""Page sequence and advance gates.

Gates belong to the page *kind*, never to a position, so a flow may reorder
pages without changing what each page requires before moving on.
"""

from typing import Callable

from fin_onboarding.models import PageKind, ProfileModel, RiskProfile

Gate = Callable[[ProfileModel], bool]

REFERENCE_FLOW: tuple[PageKind, ...] = (
    PageKind.WELCOME,
    PageKind.AUTHENTICATION,
    PageKind.BIRTH_DATE,
    PageKind.INCOME_EXPENSES,
    PageKind.GOALS,
    PageKind.BUDGET_GOAL,
    PageKind.RISK_PROFILE,
    PageKind.PROJECTION,
    PageKind.REFERRAL_CODE,
    PageKind.NOTIFICATIONS,
    PageKind.TRUST,
    PageKind.CHALLENGE,
    PageKind.REVIEW_REQUEST,
    PageKind.PREMIUM,
)


def _always(profile: ProfileModel) -> bool:
    return True


def _has_user(profile: ProfileModel) -> bool:
    return bool(profile.user_id)


def _has_goal(profile: ProfileModel) -> bool:
    return len(profile.financial_goals) > 0


def _has_budget(profile: ProfileModel) -> bool:
    return profile.budget_amount > 0


def _has_risk_profile(profile: ProfileModel) -> bool:
    return profile.risk_profile != RiskProfile.UNSET


GATES: dict[PageKind, Gate] = {
    PageKind.WELCOME: _always,
    PageKind.AUTHENTICATION: _has_user,
    PageKind.BIRTH_DATE: _always,
    PageKind.INCOME_EXPENSES: _always,  # 0 is a legal amount
    PageKind.GOALS: _has_goal,
    PageKind.BUDGET_GOAL: _has_budget,
    PageKind.RISK_PROFILE: _has_risk_profile,
    PageKind.PROJECTION: _always,
    PageKind.REFERRAL_CODE: _always,  # code is optional
    PageKind.NOTIFICATIONS: _always,  # regardless of granted/denied
    PageKind.TRUST: _always,
    PageKind.CHALLENGE: _always,
    PageKind.REVIEW_REQUEST: _always,
    PageKind.PREMIUM: _always,  # paywall side effect lives in the controller
}


def gate_satisfied(kind: PageKind, profile: ProfileModel) -> bool:
    """Evaluate the advance gate for a page kind."""
    return GATES[kind](profile)
