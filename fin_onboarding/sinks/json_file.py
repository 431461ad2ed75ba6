"""JSON Lines sink for appending events to a local file."""

import json
from pathlib import Path
from typing import Any

from fin_onboarding.exceptions import SinkError
from fin_onboarding.sinks.serialization import to_dict


class JsonLinesSink:
    """Append events to a JSON Lines file, one record per line."""

    def __init__(self, path: str | Path) -> None:
        """Initialize JSON Lines sink.

        Parameters
        ----------
        path : str | Path
            File to append to. Parent directories are created.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._counts: dict[str, int] = {}

    def send(self, topic: str, record: Any) -> None:
        """Append a single record tagged with its topic."""
        line = json.dumps({"topic": topic, **to_dict(record)}, ensure_ascii=False, default=str)
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as exc:
            raise SinkError(f"Could not append to {self.path}: {exc}") from exc

        self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Print summary."""
        print(f"Events written to: {self.path}")
        for topic, count in self._counts.items():
            print(f"  {topic}: {count} events")
