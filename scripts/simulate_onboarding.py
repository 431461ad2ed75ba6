#!/usr/bin/env python3
"""Simulate users walking through the onboarding flow.

Each synthetic user gets a Faker-generated profile and scripted answers from
the external collaborators (sign-in, push permission, paywall). Analytics
events go to the sink selected with --events (or EVENT_SINK), which makes the
script handy for exercising the Kafka pipeline end to end.
"""

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fin_onboarding.config import OnboardingConfig
from fin_onboarding.exceptions import AuthenticationFailed
from fin_onboarding.factory import build_event_sink
from fin_onboarding.flow import AuthResult, EventEmitter, FlowController, PaywallResult, ReferralValidator
from fin_onboarding.generators import ProfileGenerator
from fin_onboarding.logging import setup_logging
from fin_onboarding.models import AuthProvider, PageKind, PermissionStatus, ProfileModel
from fin_onboarding.store import InMemoryGateway

logger = logging.getLogger("simulate_onboarding")


class SimulatedAuth:
    def __init__(self, rng: random.Random, failure_rate: float) -> None:
        self.rng = rng
        self.failure_rate = failure_rate

    async def sign_in(self, provider: AuthProvider) -> AuthResult:
        await asyncio.sleep(0)
        if provider != AuthProvider.ANONYMOUS and self.rng.random() < self.failure_rate:
            raise AuthenticationFailed(f"{provider.value} sign-in cancelled")
        return AuthResult(success=True, user_id=f"user-{self.rng.getrandbits(48):012x}", provider=provider)


class SimulatedNotifications:
    def __init__(self, rng: random.Random, grant_rate: float) -> None:
        self.rng = rng
        self.grant_rate = grant_rate

    async def request_permission(self) -> PermissionStatus:
        await asyncio.sleep(0)
        return PermissionStatus.GRANTED if self.rng.random() < self.grant_rate else PermissionStatus.DENIED


class SimulatedPaywall:
    def __init__(self, rng: random.Random, conversion_rate: float) -> None:
        self.rng = rng
        self.conversion_rate = conversion_rate

    async def present(self, placement: str) -> PaywallResult:
        await asyncio.sleep(0)
        return PaywallResult(entitled=self.rng.random() < self.conversion_rate, placement=placement)


class SimulatedReview:
    def request_review(self) -> None:
        logger.debug("Review prompt shown")


@dataclass
class SimulationSummary:
    users: int = 0
    completed: int = 0
    premium: int = 0
    referrals: int = 0
    auth_retries: int = 0
    abandoned_at: dict[str, int] = field(default_factory=dict)


def fill_page(kind: PageKind, profile: ProfileModel, answers: ProfileModel) -> None:
    """Copy what the user would enter on ``kind`` from the generated answers."""
    if kind == PageKind.BIRTH_DATE:
        profile.birth_date = answers.birth_date
    elif kind == PageKind.INCOME_EXPENSES:
        profile.monthly_income = answers.monthly_income
        profile.monthly_expenses = answers.monthly_expenses
        profile.selected_categories = list(answers.selected_categories)
    elif kind == PageKind.GOALS:
        profile.financial_goals = list(answers.financial_goals)
    elif kind == PageKind.BUDGET_GOAL:
        profile.budget_amount = answers.budget_amount
    elif kind == PageKind.RISK_PROFILE:
        profile.risk_profile = answers.risk_profile


async def simulate_user(
    controller: FlowController,
    answers: ProfileModel,
    rng: random.Random,
    referral_rate: float,
    summary: SimulationSummary,
) -> None:
    controller.start()

    while not controller.completed:
        kind = controller.current_kind
        fill_page(kind, controller.profile, answers)

        if kind == PageKind.AUTHENTICATION:
            provider = rng.choice(list(AuthProvider))
            result = await controller.authenticate(provider)
            if not result.success:
                summary.auth_retries += 1
                await controller.authenticate(AuthProvider.ANONYMOUS)
            continue

        if kind == PageKind.REFERRAL_CODE and rng.random() < referral_rate:
            code = rng.choice(["TUNAFREE25", "tuna.2025", "not-a-code"])
            if await controller.submit_referral(code):
                summary.referrals += 1
        elif kind == PageKind.NOTIFICATIONS:
            await controller.request_notifications()
        elif kind == PageKind.REVIEW_REQUEST:
            controller.request_review()

        await controller.advance()

        if kind == PageKind.PREMIUM and not controller.completed:
            summary.abandoned_at[kind.value] = summary.abandoned_at.get(kind.value, 0) + 1
            return

    summary.completed += 1
    if controller.profile.is_premium:
        summary.premium += 1


async def run(args: argparse.Namespace, config: OnboardingConfig) -> SimulationSummary:
    rng = random.Random(args.seed)
    generator = ProfileGenerator(seed=args.seed)
    emitter = EventEmitter(build_event_sink(config), topic=config.events.topic)
    validator = ReferralValidator(config.referral.codes, latency_seconds=args.referral_latency)
    summary = SimulationSummary()

    try:
        for answers in generator.generate_batch(args.users):
            controller = FlowController(
                InMemoryGateway(),
                referral_validator=validator,
                auth=SimulatedAuth(rng, args.auth_failure_rate),
                notifications=SimulatedNotifications(rng, args.grant_rate),
                paywall=SimulatedPaywall(rng, args.conversion_rate),
                review=SimulatedReview(),
                events=emitter,
                paywall_placement=config.paywall_placement,
            )
            summary.users += 1
            await simulate_user(controller, answers, rng, args.referral_rate, summary)
    finally:
        emitter.close()

    return summary


def print_summary(summary: SimulationSummary) -> None:
    print(f"\n{'='*60}")
    print("Onboarding Simulation Summary")
    print("=" * 60)
    print(f"  Users:        {summary.users}")
    print(f"  Completed:    {summary.completed}")
    print(f"  Premium:      {summary.premium}")
    print(f"  Referrals:    {summary.referrals}")
    print(f"  Auth retries: {summary.auth_retries}")
    for page, count in summary.abandoned_at.items():
        print(f"  Abandoned at {page}: {count}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Simulate users through the onboarding flow")
    parser.add_argument(
        "--users",
        type=int,
        default=100,
        help="Number of synthetic users (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--events",
        type=str,
        choices=["none", "console", "jsonl", "kafka"],
        default=None,
        help="Event sink (default: EVENT_SINK or none)",
    )
    parser.add_argument(
        "--referral-rate",
        type=float,
        default=0.15,
        help="Share of users who type a referral code (default: 0.15)",
    )
    parser.add_argument(
        "--referral-latency",
        type=float,
        default=0.01,
        help="Simulated referral validation latency in seconds (default: 0.01)",
    )
    parser.add_argument(
        "--auth-failure-rate",
        type=float,
        default=0.1,
        help="Share of social sign-ins that fail (default: 0.1)",
    )
    parser.add_argument(
        "--grant-rate",
        type=float,
        default=0.6,
        help="Share of users granting push permission (default: 0.6)",
    )
    parser.add_argument(
        "--conversion-rate",
        type=float,
        default=0.3,
        help="Share of users entitled after the paywall (default: 0.3)",
    )
    args = parser.parse_args()

    config = OnboardingConfig.from_env()
    if args.events is not None:
        config.events.sink = args.events
    setup_logging(config.log_level, config.log_format)

    summary = asyncio.run(run(args, config))
    print_summary(summary)


if __name__ == "__main__":
    main()
