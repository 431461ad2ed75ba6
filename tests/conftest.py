"""Pytest configuration and fixtures."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from fin_onboarding.flow import AuthResult, FlowController, PaywallResult, ReferralValidator
from fin_onboarding.flow.events import EventEmitter
from fin_onboarding.models import AuthProvider, FinancialGoal, PageKind, PermissionStatus, RiskProfile
from fin_onboarding.store import InMemoryGateway


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def gateway() -> InMemoryGateway:
    """Fresh in-memory gateway."""
    return InMemoryGateway()


@pytest.fixture
def validator() -> ReferralValidator:
    """Referral validator with a tiny latency so tests stay fast."""
    return ReferralValidator(latency_seconds=0.001)


@pytest.fixture
def auth() -> MagicMock:
    """Auth collaborator that signs everyone in."""
    collaborator = MagicMock()
    collaborator.sign_in = AsyncMock(
        return_value=AuthResult(success=True, user_id="user-001", provider=AuthProvider.APPLE)
    )
    return collaborator


@pytest.fixture
def notifications() -> MagicMock:
    """Notification collaborator that grants permission."""
    collaborator = MagicMock()
    collaborator.request_permission = AsyncMock(return_value=PermissionStatus.GRANTED)
    return collaborator


@pytest.fixture
def paywall() -> MagicMock:
    """Paywall collaborator whose offer is accepted."""
    collaborator = MagicMock()
    collaborator.present = AsyncMock(
        return_value=PaywallResult(entitled=True, placement="campaign_trigger")
    )
    return collaborator


@pytest.fixture
def sink() -> MagicMock:
    """Event sink recording every send."""
    return MagicMock()


@pytest.fixture
def controller(
    gateway: InMemoryGateway,
    validator: ReferralValidator,
    auth: MagicMock,
    notifications: MagicMock,
    paywall: MagicMock,
    sink: MagicMock,
) -> FlowController:
    """Controller over the reference flow with all collaborators mocked."""
    ctrl = FlowController(
        gateway,
        referral_validator=validator,
        auth=auth,
        notifications=notifications,
        paywall=paywall,
        review=MagicMock(),
        events=EventEmitter(sink),
    )
    ctrl.start()
    return ctrl


def fill_required_fields(controller: FlowController) -> None:
    """Satisfy every gate of the reference flow."""
    profile = controller.profile
    profile.user_id = profile.user_id or "user-001"
    profile.financial_goals = [FinancialGoal.SAVING_MONEY.value]
    profile.budget_amount = Decimal("5000")
    profile.risk_profile = RiskProfile.MODERATE


async def advance_to(controller: FlowController, kind: PageKind) -> None:
    """Advance until ``kind`` is the current page, filling required fields."""
    fill_required_fields(controller)
    while controller.current_kind != kind:
        await controller.advance()
