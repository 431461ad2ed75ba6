"""In-memory persistence gateway."""

import copy
from typing import Any

from fin_onboarding.models import ProfileModel
from fin_onboarding.store.base import PersistenceGateway, StoredState, decode_record, to_record


class InMemoryGateway(PersistenceGateway):
    """Keeps the last saved record in process memory.

    Each save replaces the whole record in one assignment. Useful for tests
    and for simulating an app restart by handing the same gateway to a new
    controller.
    """

    def __init__(self, record: dict[str, Any] | None = None) -> None:
        self._record = copy.deepcopy(record)
        self.save_count = 0

    @property
    def record(self) -> dict[str, Any] | None:
        """Copy of the stored key-value record."""
        return copy.deepcopy(self._record)

    def load(self) -> StoredState | None:
        if self._record is None:
            return None
        return decode_record(self._record, "memory")

    def save(self, profile: ProfileModel, current_page: int, completed: bool) -> None:
        self._record = to_record(profile, current_page, completed)
        self.save_count += 1
