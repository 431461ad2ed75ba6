"""Base models shared across the package."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Standard event envelope for analytics streaming."""

    event_id: str
    event_type: str  # onboarding.action (e.g., onboarding.page_changed)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # User or device the event is about
    data: dict
    metadata: dict = field(default_factory=dict)
