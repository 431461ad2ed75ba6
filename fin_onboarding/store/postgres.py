"""PostgreSQL persistence gateway."""

import logging

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from fin_onboarding.config import PostgresConfig
from fin_onboarding.exceptions import PersistenceWriteFailed
from fin_onboarding.models import ProfileModel
from fin_onboarding.store.base import PersistenceGateway, StoredState, decode_record, to_record

logger = logging.getLogger(__name__)


class PostgresGateway(PersistenceGateway):
    """Persist onboarding progress as one JSONB row per state id.

    The whole record is upserted in a single statement, so profile fields and
    page index always change together.
    """

    def __init__(self, config: PostgresConfig | str, state_id: str | None = None) -> None:
        """Initialize PostgreSQL gateway.

        Parameters
        ----------
        config : PostgresConfig | str
            Connection configuration or a connection string.
        state_id : str | None
            Row key; defaults to ``config.state_id``.
        """
        if isinstance(config, str):
            self.conninfo = config
            config = PostgresConfig()
        else:
            self.conninfo = config.connection_string

        self.config = config
        self.state_id = state_id or config.state_id
        self._table = sql.Identifier(config.table)

    def create_table(self) -> None:
        """Create the state table if it does not exist."""
        query = sql.SQL(
            "CREATE TABLE IF NOT EXISTS {} ("
            "state_id TEXT PRIMARY KEY, "
            "record JSONB NOT NULL, "
            "updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
        ).format(self._table)

        with psycopg.connect(self.conninfo) as conn:
            with conn.cursor() as cur:
                cur.execute(query)

        logger.info("Ensured table %s exists", self.config.table)

    def load(self) -> StoredState | None:
        query = sql.SQL("SELECT record FROM {} WHERE state_id = %s").format(self._table)

        with psycopg.connect(self.conninfo) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (self.state_id,))
                row = cur.fetchone()

        if row is None:
            return None
        return decode_record(row[0], f"{self.config.table}[{self.state_id}]")

    def save(self, profile: ProfileModel, current_page: int, completed: bool) -> None:
        record = to_record(profile, current_page, completed)
        query = sql.SQL(
            "INSERT INTO {} (state_id, record, updated_at) VALUES (%s, %s, now()) "
            "ON CONFLICT (state_id) DO UPDATE "
            "SET record = EXCLUDED.record, updated_at = EXCLUDED.updated_at"
        ).format(self._table)

        try:
            with psycopg.connect(self.conninfo) as conn:
                with conn.cursor() as cur:
                    cur.execute(query, (self.state_id, Jsonb(record)))
        except psycopg.Error as exc:
            raise PersistenceWriteFailed(
                f"Could not save onboarding state {self.state_id}: {exc}"
            ) from exc

        logger.debug("Saved onboarding state %s (page=%d)", self.state_id, current_page)
