"""Synthetic onboarding profiles."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from fin_onboarding.generators.base import BaseGenerator
from fin_onboarding.models import FinancialGoal, ProfileModel, RiskProfile

# Presentation sliders stop here
MAX_AMOUNT = 100_000


class ProfileGenerator(BaseGenerator):
    """Generate profiles as a user would leave them after filling every page."""

    GOALS = list(FinancialGoal)
    RISK_PROFILES = [p for p in RiskProfile if p != RiskProfile.UNSET]
    RISK_WEIGHTS = [0.35, 0.40, 0.18, 0.07]

    CATEGORIES = ["housing", "food", "transport", "entertainment", "health", "shopping"]

    def generate(self) -> ProfileModel:
        """Generate a single profile.

        Returns
        -------
        ProfileModel
            Generated profile with every gated field filled in.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[ProfileModel]:
        """Generate multiple profiles.

        Parameters
        ----------
        count : int
            Number of profiles to generate.

        Yields
        ------
        ProfileModel
            Generated profiles.
        """
        for _ in range(count):
            yield self._generate_one()

    def _generate_one(self) -> ProfileModel:
        # Log-normal income, ~5,400 median
        income = min(MAX_AMOUNT, self.random.lognormvariate(mu=8.6, sigma=0.6))
        expenses = income * self.random.uniform(0.5, 1.1)
        budget = self.random.choice([1_000, 2_500, 5_000, 10_000, 25_000, 50_000])

        return ProfileModel(
            user_name=self.fake.name(),
            user_email=self.fake.email(),
            birth_date=self.fake.date_of_birth(minimum_age=18, maximum_age=75),
            monthly_income=_money(income),
            monthly_expenses=_money(min(MAX_AMOUNT, expenses)),
            budget_amount=Decimal(budget),
            financial_goals=[
                g.value for g in self.random.sample(self.GOALS, k=self.random.randint(1, 3))
            ],
            selected_categories=self.random.sample(self.CATEGORIES, k=self.random.randint(0, 3)),
            risk_profile=self.random.choices(self.RISK_PROFILES, weights=self.RISK_WEIGHTS, k=1)[0],
            notification_preferences=self.random.random() < 0.6,
        )


def _money(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))
