"""Build gateways, sinks and controllers from configuration."""

from __future__ import annotations

from typing import Any

from fin_onboarding.config import OnboardingConfig
from fin_onboarding.exceptions import ConfigurationError
from fin_onboarding.flow.controller import FlowController
from fin_onboarding.flow.events import EventEmitter, EventSink
from fin_onboarding.flow.referral import ReferralValidator
from fin_onboarding.store.base import PersistenceGateway
from fin_onboarding.store.json_file import JsonFileGateway
from fin_onboarding.store.memory import InMemoryGateway


def build_gateway(config: OnboardingConfig) -> PersistenceGateway:
    """Create the persistence gateway selected by ``config.storage.backend``."""
    backend = config.storage.backend.lower()

    if backend == "memory":
        return InMemoryGateway()
    if backend == "json":
        return JsonFileGateway(config.storage.state_path)
    if backend == "postgres":
        from fin_onboarding.store.postgres import PostgresGateway

        return PostgresGateway(config.postgres)

    raise ConfigurationError(f"Unknown storage backend: {config.storage.backend}")


def build_event_sink(config: OnboardingConfig) -> EventSink | None:
    """Create the analytics sink selected by ``config.events.sink``."""
    sink = config.events.sink.lower()

    if sink == "none":
        return None
    if sink == "console":
        from fin_onboarding.sinks.console import ConsoleSink

        return ConsoleSink(pretty=False)
    if sink == "jsonl":
        from fin_onboarding.sinks.json_file import JsonLinesSink

        return JsonLinesSink(config.events.output_path)
    if sink == "kafka":
        from fin_onboarding.sinks.kafka import KafkaSink

        return KafkaSink(config.kafka)

    raise ConfigurationError(f"Unknown event sink: {config.events.sink}")


def build_controller(config: OnboardingConfig, **collaborators: Any) -> FlowController:
    """Wire a controller from configuration plus the given collaborators."""
    return FlowController(
        build_gateway(config),
        referral_validator=ReferralValidator.from_config(config.referral),
        events=EventEmitter(build_event_sink(config), topic=config.events.topic),
        paywall_placement=config.paywall_placement,
        **collaborators,
    )
