"""Custom exception hierarchy for fin-onboarding."""


class OnboardingError(Exception):
    """Base exception for all fin-onboarding errors."""


class GateNotSatisfied(OnboardingError):
    """Raised when the current page's advance gate does not hold.

    Expected and recoverable: the page is simply shown again.
    """

    def __init__(self, page_kind: object, message: str | None = None) -> None:
        self.page_kind = page_kind
        kind = getattr(page_kind, "value", page_kind)
        super().__init__(message or f"Gate not satisfied for page {kind}")


class NavigationError(OnboardingError):
    """Raised when navigation is not allowed in the current flow state."""


class FlowBusy(NavigationError):
    """Raised when navigating while a collaborator call is still in flight."""


class FlowAlreadyCompleted(NavigationError):
    """Raised when navigating a flow that has already completed."""


class AuthenticationFailed(OnboardingError):
    """Raised by authentication collaborators when sign-in fails."""


class PersistenceWriteFailed(OnboardingError):
    """Raised when a persistence gateway cannot write the onboarding state."""


class ConfigurationError(OnboardingError):
    """Raised when configuration is invalid or missing."""


class SinkError(OnboardingError):
    """Raised when an event sink operation fails."""
