"""Enumeration types for onboarding entities."""

from enum import Enum


class RiskProfile(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"
    VERY_AGGRESSIVE = "very_aggressive"
    UNSET = ""


class FinancialGoal(str, Enum):
    BUDGET_TRACKING = "budget_tracking"
    SAVING_MONEY = "saving_money"
    DEBT_PAYMENT = "debt_payment"
    EXPENSE_CONTROL = "expense_control"


class PageKind(str, Enum):
    WELCOME = "welcome"
    AUTHENTICATION = "authentication"
    BIRTH_DATE = "birth_date"
    INCOME_EXPENSES = "income_expenses"
    GOALS = "goals"
    BUDGET_GOAL = "budget_goal"
    RISK_PROFILE = "risk_profile"
    PROJECTION = "projection"
    REFERRAL_CODE = "referral_code"
    NOTIFICATIONS = "notifications"
    TRUST = "trust"
    CHALLENGE = "challenge"
    REVIEW_REQUEST = "review_request"
    PREMIUM = "premium"


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class AuthProvider(str, Enum):
    APPLE = "apple"
    GOOGLE = "google"
    EMAIL = "email"
    ANONYMOUS = "anonymous"
