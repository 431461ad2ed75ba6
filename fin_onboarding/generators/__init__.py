"""Synthetic data generators for simulations and tests."""

from fin_onboarding.generators.profile import ProfileGenerator

__all__ = ["ProfileGenerator"]
