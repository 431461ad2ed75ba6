"""Persistence gateway interface and the stored record format."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from fin_onboarding.models import ProfileModel, RiskProfile
from fin_onboarding.sinks.serialization import serialize_value

logger = logging.getLogger(__name__)

COMPLETED_KEY = "hasCompletedOnboarding"
PAGE_KEY = "onboardingPage"

# ProfileModel attribute -> persisted key
PROFILE_KEYS = {
    "user_name": "userName",
    "user_email": "userEmail",
    "birth_date": "birthDate",
    "monthly_income": "monthlyIncome",
    "monthly_expenses": "monthlyExpenses",
    "financial_goals": "financialGoals",
    "selected_categories": "selectedCategories",
    "notification_preferences": "notificationPreferences",
    "budget_amount": "budgetAmount",
    "risk_profile": "riskProfile",
    "is_premium": "isPremium",
    "referral_code": "referralCode",
    "user_id": "userId",
    "auth_provider": "authProvider",
}


@dataclass
class StoredState:
    """Snapshot of onboarding progress as read back from storage."""

    profile: ProfileModel
    current_page: int = 0
    completed: bool = False


def to_record(profile: ProfileModel, current_page: int, completed: bool) -> dict[str, Any]:
    """Flatten profile, page index and completion flag into one key-value record.

    The record is always written as a single unit so the stored page index can
    never refer to a profile that was not written with it.
    """
    record = {
        key: serialize_value(getattr(profile, attr)) for attr, key in PROFILE_KEYS.items()
    }
    record[PAGE_KEY] = current_page
    record[COMPLETED_KEY] = completed
    return record


def from_record(record: dict[str, Any]) -> StoredState:
    """Rebuild a ``StoredState`` from a record; missing keys take model defaults."""
    values: dict[str, Any] = {}

    for attr, key in PROFILE_KEYS.items():
        if key not in record or record[key] is None:
            continue
        values[attr] = record[key]

    if "birth_date" in values:
        values["birth_date"] = date.fromisoformat(values["birth_date"])
    for attr in ("monthly_income", "monthly_expenses", "budget_amount"):
        if attr in values:
            values[attr] = Decimal(str(values[attr]))
    if "risk_profile" in values:
        values["risk_profile"] = RiskProfile(values["risk_profile"])
    for attr in ("financial_goals", "selected_categories"):
        if attr in values:
            values[attr] = list(values[attr])

    profile = ProfileModel(**values)
    return StoredState(
        profile=profile,
        current_page=int(record.get(PAGE_KEY, 0)),
        completed=bool(record.get(COMPLETED_KEY, False)),
    )


def decode_record(record: Any, source: object) -> StoredState | None:
    """Like ``from_record``, but a malformed record means no stored progress.

    Parameters
    ----------
    record : Any
        Record as read from storage.
    source : object
        Where the record came from, for the log message.

    Returns
    -------
    StoredState | None
        Decoded state, or ``None`` when the record cannot be decoded.
    """
    if not isinstance(record, dict):
        logger.warning("Ignoring onboarding state at %s: not a key-value record", source)
        return None

    try:
        return from_record(record)
    except (ValueError, TypeError, ArithmeticError) as exc:
        # ArithmeticError covers decimal.InvalidOperation
        logger.warning("Ignoring malformed onboarding state at %s: %s", source, exc)
        return None


class PersistenceGateway(ABC):
    """Durable key-value storage for onboarding progress.

    Implementations raise ``PersistenceWriteFailed`` when a write cannot be
    completed.
    """

    @abstractmethod
    def load(self) -> StoredState | None:
        """Return the stored state, or ``None`` when nothing was saved yet."""

    @abstractmethod
    def save(self, profile: ProfileModel, current_page: int, completed: bool) -> None:
        """Persist profile, page index and completion flag together."""


def has_completed_onboarding(gateway: PersistenceGateway) -> bool:
    """Check used by the app shell to decide whether onboarding is shown at all."""
    state = gateway.load()
    return state is not None and state.completed
