"""Configuration management for fin-onboarding."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_REFERRAL_CODES = ("tuna.2025", "tunafree25", "TUNAFREE25")


@dataclass
class ReferralConfig:
    """Referral code allow-list and simulated round-trip latency."""

    codes: tuple[str, ...] = DEFAULT_REFERRAL_CODES
    latency_seconds: float = 1.0


@dataclass
class KafkaConfig:
    """Kafka producer configuration for analytics events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration for the state gateway."""

    host: str = "localhost"
    port: int = 5432
    database: str = "onboarding"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "onboarding_state"
    state_id: str = "default"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Where onboarding progress is persisted."""

    backend: str = "json"  # memory | json | postgres
    state_path: Path = field(default_factory=lambda: Path("onboarding_state.json"))


@dataclass
class EventsConfig:
    """Analytics event output."""

    sink: str = "none"  # none | console | jsonl | kafka
    topic: str = "app.onboarding-events"
    output_path: Path = field(default_factory=lambda: Path("onboarding_events.jsonl"))


@dataclass
class OnboardingConfig:
    """Main configuration for fin-onboarding."""

    referral: ReferralConfig = field(default_factory=ReferralConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    events: EventsConfig = field(default_factory=EventsConfig)
    paywall_placement: str = "campaign_trigger"
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "OnboardingConfig":
        """Create config from environment variables."""
        import os

        codes_str = os.getenv("REFERRAL_CODES")
        codes = (
            tuple(code.strip() for code in codes_str.split(",") if code.strip())
            if codes_str
            else DEFAULT_REFERRAL_CODES
        )
        referral = ReferralConfig(
            codes=codes,
            latency_seconds=float(os.getenv("REFERRAL_LATENCY", "1.0")),
        )

        storage = StorageConfig(
            backend=os.getenv("STORAGE_BACKEND", "json"),
            state_path=Path(os.getenv("STATE_PATH", "onboarding_state.json")),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "onboarding"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "onboarding_state"),
            state_id=os.getenv("ONBOARDING_STATE_ID", "default"),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        events = EventsConfig(
            sink=os.getenv("EVENT_SINK", "none"),
            topic=os.getenv("EVENT_TOPIC", "app.onboarding-events"),
            output_path=Path(os.getenv("EVENT_LOG_PATH", "onboarding_events.jsonl")),
        )

        return cls(
            referral=referral,
            storage=storage,
            postgres=postgres,
            kafka=kafka,
            events=events,
            paywall_placement=os.getenv("PAYWALL_PLACEMENT", "campaign_trigger"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
