"""Tests for event sinks and the event emitter."""

import json
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from confluent_kafka import KafkaException

from fin_onboarding.config import KafkaConfig
from fin_onboarding.exceptions import SinkError
from fin_onboarding.flow.events import COMPLETED, PAGE_CHANGED, SOURCE, EventEmitter
from fin_onboarding.models import Event
from fin_onboarding.sinks.console import ConsoleSink
from fin_onboarding.sinks.json_file import JsonLinesSink


@pytest.fixture
def event() -> Event:
    """Sample page change event."""
    return Event(
        event_id="evt-001",
        event_type=PAGE_CHANGED,
        event_time=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
        source=SOURCE,
        subject="user-001",
        data={"from_page": 3, "to_page": 4, "page_kind": "goals"},
    )


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        """Test default initialization."""
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink._counts == {}

    def test_send_compact(self, capsys: pytest.CaptureFixture, event: Event) -> None:
        """Test compact output is one line per event."""
        sink = ConsoleSink(pretty=False)

        sink.send("app.onboarding-events", event)
        out = capsys.readouterr().out

        assert out.startswith("[app.onboarding-events] ")
        payload = json.loads(out.split(" ", 1)[1])
        assert payload["event_type"] == "onboarding.page_changed"
        assert payload["event_time"] == "2025-03-01T12:00:00+00:00"
        assert sink._counts["app.onboarding-events"] == 1

    def test_send_pretty(self, capsys: pytest.CaptureFixture, event: Event) -> None:
        """Test pretty output is indented."""
        ConsoleSink(pretty=True).send("events", event)

        assert '\n  "event_id": "evt-001"' in capsys.readouterr().out

    def test_close(self, capsys: pytest.CaptureFixture, event: Event) -> None:
        """Test summary on close."""
        sink = ConsoleSink(pretty=False)
        sink.send("events", event)
        sink.send("events", event)
        capsys.readouterr()

        sink.close()

        out = capsys.readouterr().out
        assert "Console Sink Summary" in out
        assert "events: 2 events" in out


class TestJsonLinesSink:
    """Tests for JsonLinesSink."""

    def test_init_creates_directory(self, tmp_path: Path) -> None:
        """Test parent directory is created."""
        path = tmp_path / "logs" / "events.jsonl"

        JsonLinesSink(path)

        assert path.parent.exists()

    def test_send_appends_lines(self, tmp_path: Path, event: Event) -> None:
        """Test each event is one JSON line tagged with its topic."""
        path = tmp_path / "events.jsonl"
        sink = JsonLinesSink(path)

        sink.send("app.onboarding-events", event)
        sink.send("app.onboarding-events", {"event_type": COMPLETED})

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["topic"] == "app.onboarding-events"
        assert first["subject"] == "user-001"
        assert first["data"]["page_kind"] == "goals"
        assert json.loads(lines[1])["event_type"] == "onboarding.completed"

    def test_write_failure_raises_sink_error(self, tmp_path: Path, event: Event) -> None:
        """Test OS errors surface as SinkError."""
        sink = JsonLinesSink(tmp_path / "events.jsonl")

        with patch("builtins.open", side_effect=OSError("read-only file system")):
            with pytest.raises(SinkError):
                sink.send("events", event)

    def test_close(self, tmp_path: Path, capsys: pytest.CaptureFixture, event: Event) -> None:
        """Test summary on close."""
        sink = JsonLinesSink(tmp_path / "events.jsonl")
        sink.send("events", event)

        sink.close()

        assert "events: 1 events" in capsys.readouterr().out


class TestKafkaSink:
    """Tests for KafkaSink with a mocked producer."""

    def test_producer_stats_success_rate(self) -> None:
        """Test ProducerStats success rate calculation."""
        from fin_onboarding.sinks.kafka import ProducerStats

        assert ProducerStats(sent=100, delivered=90, failed=10).success_rate == 0.9
        assert ProducerStats().success_rate == 0.0

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        """Test KafkaSink initialization with string."""
        from fin_onboarding.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")

        assert sink.config.bootstrap_servers == "localhost:9092"
        mock_producer_class.assert_called_once_with(KafkaConfig().to_dict())

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_init_with_config(self, mock_producer_class: MagicMock) -> None:
        """Test KafkaSink initialization with KafkaConfig."""
        from fin_onboarding.sinks.kafka import KafkaSink

        config = KafkaConfig(bootstrap_servers="kafka:9092", acks="1")
        sink = KafkaSink(config)

        assert sink.config == config
        assert mock_producer_class.call_args.args[0]["acks"] == "1"

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_send_event_keyed_by_subject(self, mock_producer_class: MagicMock, event: Event) -> None:
        """Test events are keyed by subject and JSON encoded."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("app.onboarding-events", event)

        call_kwargs = mock_producer.produce.call_args.kwargs
        assert call_kwargs["topic"] == "app.onboarding-events"
        assert call_kwargs["key"] == b"user-001"
        assert json.loads(call_kwargs["value"])["event_type"] == "onboarding.page_changed"
        assert sink.stats.sent == 1
        mock_producer.poll.assert_called_once_with(0)

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_send_explicit_key(self, mock_producer_class: MagicMock) -> None:
        """Test an explicit key wins over the record."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        KafkaSink("localhost:9092").send("topic", {"subject": "a"}, key="b")

        assert mock_producer.produce.call_args.kwargs["key"] == b"b"

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_send_without_key(self, mock_producer_class: MagicMock) -> None:
        """Test sending a record without a subject."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        KafkaSink("localhost:9092").send("topic", {"id": 1})

        assert mock_producer.produce.call_args.kwargs["key"] is None

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_send_buffer_full(self, mock_producer_class: MagicMock, event: Event) -> None:
        """Test a full local queue surfaces as SinkError."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.produce.side_effect = BufferError("Local: Queue full")
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        with pytest.raises(SinkError):
            sink.send("topic", event)
        assert sink.stats.sent == 0

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_send_kafka_exception(self, mock_producer_class: MagicMock, event: Event) -> None:
        """Test producer errors surface as SinkError."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.produce.side_effect = KafkaException("broker down")
        mock_producer_class.return_value = mock_producer

        with pytest.raises(SinkError):
            KafkaSink("localhost:9092").send("topic", event)

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        """Test delivery callback on success and failure."""
        from fin_onboarding.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")
        mock_msg = MagicMock()
        mock_msg.topic.return_value = "topic"
        mock_msg.partition.return_value = 0
        mock_msg.offset.return_value = 1

        sink._delivery_callback(None, mock_msg)
        sink._delivery_callback("Connection error", None)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("fin_onboarding.sinks.kafka.Producer")
    def test_close_flushes(self, mock_producer_class: MagicMock) -> None:
        """Test close flushes pending messages."""
        from fin_onboarding.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.flush(timeout=10.0)
        sink.close()

        assert mock_producer.flush.call_args_list[0].args == (10.0,)
        assert mock_producer.flush.call_count == 2


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_emit_builds_envelope(self) -> None:
        """Test the standard envelope fields."""
        sink = MagicMock()
        emitter = EventEmitter(sink, topic="events")

        event = emitter.emit(PAGE_CHANGED, "user-001", {"to_page": 2})

        sink.send.assert_called_once_with("events", event)
        assert event.event_type == "onboarding.page_changed"
        assert event.source == "fin-onboarding"
        assert event.subject == "user-001"
        assert event.data == {"to_page": 2}
        assert event.event_time.tzinfo is not None
        assert event.event_id

    def test_emit_without_sink(self) -> None:
        """Test events are built and dropped without a sink."""
        event = EventEmitter().emit(COMPLETED, "session-1")

        assert event.data == {}

    def test_sink_error_is_swallowed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a failing sink never interrupts the caller."""
        sink = MagicMock()
        sink.send.side_effect = SinkError("broker down")

        EventEmitter(sink).emit(COMPLETED, "user-001")

        assert "broker down" in caplog.text

    def test_close(self) -> None:
        """Test close is forwarded to the sink."""
        sink = MagicMock()

        EventEmitter(sink).close()
        EventEmitter().close()

        sink.close.assert_called_once_with()
