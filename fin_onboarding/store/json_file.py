"""JSON file persistence gateway."""

import json
import logging
import os
import tempfile
from pathlib import Path

from fin_onboarding.exceptions import PersistenceWriteFailed
from fin_onboarding.models import ProfileModel
from fin_onboarding.store.base import PersistenceGateway, StoredState, decode_record, to_record

logger = logging.getLogger(__name__)


class JsonFileGateway(PersistenceGateway):
    """Persist onboarding progress to a single JSON document."""

    def __init__(self, path: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file gateway.

        Parameters
        ----------
        path : str | Path
            File holding the state record. Parent directories are created.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty

    def load(self) -> StoredState | None:
        """Read the stored record; a missing or unreadable file means no progress."""
        if not self.path.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable onboarding state at %s: %s", self.path, exc)
            return None

        return decode_record(record, self.path)

    def save(self, profile: ProfileModel, current_page: int, completed: bool) -> None:
        """Write the record to a temp file and atomically swap it into place."""
        record = to_record(profile, current_page, completed)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(record, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(record, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceWriteFailed(f"Could not write {self.path}: {exc}") from exc

        logger.debug("Saved onboarding state to %s (page=%d)", self.path, current_page)
