"""Persistence gateways for onboarding progress."""

from fin_onboarding.store.base import (
    PersistenceGateway,
    StoredState,
    decode_record,
    from_record,
    has_completed_onboarding,
    to_record,
)
from fin_onboarding.store.json_file import JsonFileGateway
from fin_onboarding.store.memory import InMemoryGateway

__all__ = [
    "InMemoryGateway",
    "JsonFileGateway",
    "PersistenceGateway",
    "StoredState",
    "decode_record",
    "from_record",
    "has_completed_onboarding",
    "to_record",
]
