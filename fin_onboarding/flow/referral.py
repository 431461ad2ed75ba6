"""Referral code validation."""

import asyncio
import logging
from typing import Iterable

from fin_onboarding.config import DEFAULT_REFERRAL_CODES, ReferralConfig
from fin_onboarding.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ReferralValidator:
    """Validate referral codes against a fixed allow-list.

    Matching is case-insensitive and ignores surrounding whitespace. Every
    answer takes ``latency_seconds`` to arrive, standing in for the network
    round trip of a real backend. There is no error channel: a code is either
    valid or invalid.

    Parameters
    ----------
    codes : Iterable[str]
        Accepted codes (deployment constant).
    latency_seconds : float
        Simulated round trip; must be positive.
    """

    def __init__(
        self,
        codes: Iterable[str] = DEFAULT_REFERRAL_CODES,
        latency_seconds: float = 1.0,
    ) -> None:
        if latency_seconds <= 0:
            raise ConfigurationError("Referral validation latency must be positive")

        self._codes = frozenset(code.strip().casefold() for code in codes if code.strip())
        self.latency_seconds = latency_seconds

    @classmethod
    def from_config(cls, config: ReferralConfig) -> "ReferralValidator":
        return cls(codes=config.codes, latency_seconds=config.latency_seconds)

    def is_accepted(self, code: str) -> bool:
        """Synchronous allow-list check, without the simulated latency."""
        normalized = code.strip().casefold()
        return bool(normalized) and normalized in self._codes

    async def validate(self, code: str) -> bool:
        """Resolve whether ``code`` is accepted after the simulated delay."""
        if not code.strip():
            return False

        await asyncio.sleep(self.latency_seconds)
        valid = self.is_accepted(code)
        logger.debug("Referral code checked: valid=%s", valid)
        return valid
