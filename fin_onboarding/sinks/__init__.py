"""Output sinks for onboarding analytics events."""

from fin_onboarding.sinks.console import ConsoleSink
from fin_onboarding.sinks.json_file import JsonLinesSink
from fin_onboarding.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonLinesSink", "KafkaSink"]
