"""Console sink for debugging and development."""

import json
from typing import Any

from fin_onboarding.sinks.serialization import to_dict


class ConsoleSink:
    """Output analytics events to console (stdout) for debugging."""

    def __init__(self, pretty: bool = True) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        """
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def send(self, topic: str, record: Any) -> None:
        """Print a single record."""
        data = to_dict(record)
        if self.pretty:
            print(f"[{topic}] " + json.dumps(data, indent=2, ensure_ascii=False, default=str))
        else:
            print(f"[{topic}] " + json.dumps(data, ensure_ascii=False, default=str))

        self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for topic, count in self._counts.items():
            print(f"  {topic}: {count} events")
