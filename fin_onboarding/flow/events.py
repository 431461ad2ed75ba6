"""Analytics events emitted while the user moves through onboarding."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from fin_onboarding.exceptions import SinkError
from fin_onboarding.models import Event

logger = logging.getLogger(__name__)

SOURCE = "fin-onboarding"

STARTED = "onboarding.started"
PAGE_CHANGED = "onboarding.page_changed"
AUTH_SUCCEEDED = "onboarding.auth_succeeded"
AUTH_FAILED = "onboarding.auth_failed"
REFERRAL_VALIDATED = "onboarding.referral_validated"
NOTIFICATIONS_ANSWERED = "onboarding.notifications_answered"
PAYWALL_PRESENTED = "onboarding.paywall_presented"
COMPLETED = "onboarding.completed"


class EventSink(Protocol):
    def send(self, topic: str, record: Any) -> None: ...

    def close(self) -> None: ...


class EventEmitter:
    """Wrap events in the standard envelope and hand them to a sink.

    Publishing is best-effort: a failing sink is logged and never interrupts
    the flow. Without a sink events are built but dropped.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        topic: str = "app.onboarding-events",
        source: str = SOURCE,
    ) -> None:
        self.sink = sink
        self.topic = topic
        self.source = source

    def emit(self, event_type: str, subject: str, data: dict | None = None) -> Event:
        event = Event(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            event_time=datetime.now(timezone.utc),
            source=self.source,
            subject=subject,
            data=data or {},
        )

        if self.sink is not None:
            try:
                self.sink.send(self.topic, event)
            except SinkError as exc:
                logger.warning("Dropped %s event: %s", event_type, exc)

        return event

    def close(self) -> None:
        if self.sink is not None:
            self.sink.close()
