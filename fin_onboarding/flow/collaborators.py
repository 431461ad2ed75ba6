"""Interfaces of the external systems the flow controller calls into.

None of these are implemented here: sign-in, push permissions, the paywall
and the store review prompt live outside the core. The controller only needs
the result types below.
"""

from dataclasses import dataclass
from typing import Protocol

from fin_onboarding.models import AuthProvider, PermissionStatus


@dataclass
class AuthResult:
    """Outcome of a sign-in attempt."""

    success: bool
    user_id: str = ""
    provider: AuthProvider | None = None
    error: str = ""


@dataclass
class PaywallResult:
    """Outcome of presenting the premium offer."""

    entitled: bool
    placement: str = ""


class AuthCollaborator(Protocol):
    """Signs the user in. Raises ``AuthenticationFailed`` on failure."""

    async def sign_in(self, provider: AuthProvider) -> AuthResult: ...


class NotificationCollaborator(Protocol):
    """Asks the platform for push-notification permission."""

    async def request_permission(self) -> PermissionStatus: ...


class PaywallCollaborator(Protocol):
    """Presents the premium offer and reports whether the user is entitled."""

    async def present(self, placement: str) -> PaywallResult: ...


class ReviewCollaborator(Protocol):
    """Shows the store review prompt. Fire and forget."""

    def request_review(self) -> None: ...
