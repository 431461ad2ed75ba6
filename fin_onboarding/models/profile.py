"""Profile model accumulated across onboarding pages."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from fin_onboarding.models.enums import RiskProfile


@dataclass
class ProfileModel:
    """Everything collected during onboarding.

    Amounts are monthly and non-negative. The presentation layer bounds them
    to [0, 100000]; the model does not.
    """

    user_name: str = ""
    user_email: str = ""
    birth_date: date = field(default_factory=date.today)
    monthly_income: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")
    budget_amount: Decimal = Decimal("0")
    financial_goals: list[str] = field(default_factory=list)  # goal ids, order irrelevant
    selected_categories: list[str] = field(default_factory=list)
    risk_profile: RiskProfile = RiskProfile.UNSET
    notification_preferences: bool = True
    referral_code: str = ""
    is_premium: bool = False
    user_id: str = ""  # set by the auth collaborator
    auth_provider: str = ""
