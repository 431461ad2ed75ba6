"""Onboarding flow controller.

Owns the page position, the profile collected so far and the completion
flag. Forward navigation is gated per page kind, backward navigation is
always allowed, and progress is persisted through an injected gateway after
every successful step so an interrupted onboarding resumes where it stopped.

All state changes happen on the event loop that drives the controller.
Collaborator calls (sign-in, permissions, paywall) are suspend points; while
one is in flight further navigation is refused with ``FlowBusy``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Sequence

from fin_onboarding.exceptions import (
    AuthenticationFailed,
    ConfigurationError,
    FlowAlreadyCompleted,
    FlowBusy,
    GateNotSatisfied,
    PersistenceWriteFailed,
)
from fin_onboarding.flow import events as event_types
from fin_onboarding.flow.collaborators import (
    AuthCollaborator,
    AuthResult,
    NotificationCollaborator,
    PaywallCollaborator,
    ReviewCollaborator,
)
from fin_onboarding.flow.events import EventEmitter
from fin_onboarding.flow.pages import GATES, REFERENCE_FLOW, gate_satisfied
from fin_onboarding.flow.referral import ReferralValidator
from fin_onboarding.models import AuthProvider, PageKind, PermissionStatus, ProfileModel
from fin_onboarding.store.base import PersistenceGateway

logger = logging.getLogger(__name__)


class FlowController:
    """Drive a user through a fixed, ordered sequence of onboarding pages.

    Parameters
    ----------
    gateway : PersistenceGateway
        Storage for profile, page index and completion flag.
    pages : Sequence[PageKind]
        Page order. Fixed for the controller's lifetime.
    referral_validator : ReferralValidator | None
        Validator used by ``submit_referral``; defaults to the built-in allow-list.
    auth, notifications, paywall, review
        External collaborators. Only needed by the operations that call them.
    events : EventEmitter | None
        Analytics event emitter; events are dropped when omitted.
    on_complete : Callable[[ProfileModel], None] | None
        Hand-off into the main application, called once after completion.
    paywall_placement : str
        Placement name passed to the paywall collaborator.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        pages: Sequence[PageKind] = REFERENCE_FLOW,
        referral_validator: ReferralValidator | None = None,
        auth: AuthCollaborator | None = None,
        notifications: NotificationCollaborator | None = None,
        paywall: PaywallCollaborator | None = None,
        review: ReviewCollaborator | None = None,
        events: EventEmitter | None = None,
        on_complete: Callable[[ProfileModel], None] | None = None,
        paywall_placement: str = "campaign_trigger",
    ) -> None:
        if not pages:
            raise ConfigurationError("Onboarding flow needs at least one page")
        unknown = [page for page in pages if page not in GATES]
        if unknown:
            raise ConfigurationError(f"No gate defined for pages: {unknown}")

        self.gateway = gateway
        self._pages = tuple(pages)
        self.referral_validator = referral_validator or ReferralValidator()
        self.auth = auth
        self.notifications = notifications
        self.paywall = paywall
        self.review = review
        self.events = events or EventEmitter()
        self.on_complete = on_complete
        self.paywall_placement = paywall_placement

        self.profile = ProfileModel()
        self.session_id = str(uuid.uuid4())
        self._current_page = 0
        self._completed = False
        self._busy = False
        self._handed_off = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def pages(self) -> tuple[PageKind, ...]:
        return self._pages

    @property
    def total_pages(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def current_kind(self) -> PageKind:
        """Render target for the presentation layer."""
        return self._pages[self._current_page]

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def busy(self) -> bool:
        """True while a collaborator call is in flight."""
        return self._busy

    @property
    def is_terminal(self) -> bool:
        return self._current_page == self.total_pages - 1

    def can_advance(self) -> bool:
        """Whether the current page's gate holds (for enabling the continue action)."""
        return gate_satisfied(self.current_kind, self.profile)

    def start(self) -> PageKind:
        """Resume stored progress, or begin at the first page with a fresh profile."""
        state = self.gateway.load()
        resumed = state is not None

        if state is not None:
            self.profile = state.profile
            self._current_page = min(max(state.current_page, 0), self.total_pages - 1)
            self._completed = state.completed
            logger.info(
                "Resumed onboarding at page %d/%d (completed=%s)",
                self._current_page + 1,
                self.total_pages,
                self._completed,
                extra={"extra": self._log_context()},
            )

        self.events.emit(
            event_types.STARTED,
            self._subject(),
            {"resumed": resumed, "page": self._current_page, "page_kind": self.current_kind.value},
        )
        return self.current_kind

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def advance(self) -> PageKind:
        """Move forward one page if the current page's gate holds.

        On the terminal page this completes onboarding instead. The premium
        page completes onboarding wherever it sits, once the user is
        entitled: the paywall is presented first unless the user already is,
        and if the offer is declined the flow stays put.

        Raises
        ------
        GateNotSatisfied
            The current page still needs input. Nothing changed.
        FlowBusy
            Another collaborator call is in flight.
        FlowAlreadyCompleted
            Onboarding has already finished.
        """
        self._check_navigable()
        self._busy = True
        try:
            return await self._advance()
        finally:
            self._busy = False

    def retreat(self) -> PageKind:
        """Move back one page. Never gated; a no-op on the first page."""
        self._check_navigable()
        if self._current_page > 0:
            self._move_to(self._current_page - 1)
        return self.current_kind

    def complete(self) -> None:
        """Mark onboarding complete and persist.

        Safe to call again: repeats only the persistence write. The hand-off
        into the main application happens once.
        """
        first_time = not self._completed
        self._completed = True
        self._persist()

        if first_time:
            logger.info(
                "Onboarding completed (premium=%s)",
                self.profile.is_premium,
                extra={"extra": self._log_context()},
            )
            self.events.emit(
                event_types.COMPLETED,
                self._subject(),
                {"is_premium": self.profile.is_premium, "page": self._current_page},
            )

        if not self._handed_off and self.on_complete is not None:
            self._handed_off = True
            self.on_complete(self.profile)

    async def _advance(self) -> PageKind:
        kind = self.current_kind
        if not gate_satisfied(kind, self.profile):
            raise GateNotSatisfied(kind)

        if kind == PageKind.PREMIUM:
            # Entitlement ends onboarding wherever the premium page sits
            if await self._resolve_entitlement():
                self.complete()
            return kind

        if self.is_terminal:
            self.complete()
            return kind

        self._move_to(self._current_page + 1)
        self._persist()
        return self.current_kind

    async def _resolve_entitlement(self) -> bool:
        """Premium users skip the paywall; everyone else is shown the offer."""
        if self.profile.is_premium:
            logger.debug("User already premium, skipping paywall")
            return True

        if self.paywall is None:
            raise ConfigurationError("No paywall collaborator configured for the premium page")

        result = await self.paywall.present(self.paywall_placement)
        self.events.emit(
            event_types.PAYWALL_PRESENTED,
            self._subject(),
            {"placement": self.paywall_placement, "entitled": result.entitled},
        )

        if result.entitled:
            self.profile.is_premium = True
        else:
            logger.info("Paywall dismissed without entitlement", extra={"extra": self._log_context()})
        return result.entitled

    def _move_to(self, page: int) -> None:
        previous = self._current_page
        self._current_page = page
        logger.debug(
            "Page %d -> %d (%s)",
            previous,
            page,
            self.current_kind.value,
            extra={"extra": self._log_context()},
        )
        self.events.emit(
            event_types.PAGE_CHANGED,
            self._subject(),
            {"from_page": previous, "to_page": page, "page_kind": self.current_kind.value},
        )

    def _check_navigable(self) -> None:
        if self._completed:
            raise FlowAlreadyCompleted("Onboarding already completed")
        if self._busy:
            raise FlowBusy("Waiting for a collaborator response")

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    async def authenticate(self, provider: AuthProvider) -> AuthResult:
        """Sign in with ``provider`` and, on the authentication page, move on.

        A failed sign-in is returned as an unsuccessful ``AuthResult``; page
        and profile are left untouched so the user can retry or pick another
        provider (``AuthProvider.ANONYMOUS`` is the "continue without
        account" path).
        """
        self._check_navigable()
        if self.auth is None:
            raise ConfigurationError("No authentication collaborator configured")

        self._busy = True
        try:
            try:
                result = await self.auth.sign_in(provider)
            except AuthenticationFailed as exc:
                result = AuthResult(success=False, provider=provider, error=str(exc))

            if not result.success or not result.user_id:
                failed = AuthResult(
                    success=False,
                    provider=provider,
                    error=result.error or "no user id returned",
                )
                logger.warning(
                    "Sign-in with %s failed: %s",
                    provider.value,
                    failed.error,
                    extra={"extra": self._log_context()},
                )
                self.events.emit(
                    event_types.AUTH_FAILED,
                    self._subject(),
                    {"provider": provider.value, "error": failed.error},
                )
                return failed

            self.profile.user_id = result.user_id
            self.profile.auth_provider = provider.value
            self._persist()
            self.events.emit(event_types.AUTH_SUCCEEDED, self._subject(), {"provider": provider.value})

            if self.current_kind == PageKind.AUTHENTICATION:
                await self._advance()
            return result
        finally:
            self._busy = False

    async def request_notifications(self) -> PermissionStatus:
        """Ask for push permission and record the answer.

        A denial is an ordinary outcome; the notifications page can be left
        either way.
        """
        self._check_navigable()
        if self.notifications is None:
            raise ConfigurationError("No notification collaborator configured")

        self._busy = True
        try:
            status = await self.notifications.request_permission()
        finally:
            self._busy = False

        if status == PermissionStatus.GRANTED:
            self.profile.notification_preferences = True
        elif status == PermissionStatus.DENIED:
            self.profile.notification_preferences = False

        self._persist()
        self.events.emit(event_types.NOTIFICATIONS_ANSWERED, self._subject(), {"status": status.value})
        return status

    def request_review(self) -> None:
        """Show the store review prompt, if a collaborator is configured."""
        if self.review is not None:
            self.review.request_review()

    async def submit_referral(self, code: str) -> bool:
        """Validate a referral code and unlock premium when it is accepted.

        An accepted code is stored exactly as submitted; matching itself
        ignores case and surrounding whitespace.

        The answer arrives after the validator's latency. Navigation stays
        possible meanwhile, and the result still lands unless the profile was
        replaced in between (e.g. by ``start()`` resuming other progress).
        """
        if self._completed:
            raise FlowAlreadyCompleted("Onboarding already completed")

        profile = self.profile
        valid = await self.referral_validator.validate(code)

        if profile is not self.profile:
            logger.info("Discarding referral result for a replaced profile")
            return valid

        if valid:
            profile.referral_code = code
            profile.is_premium = True
            self._persist()

        self.events.emit(event_types.REFERRAL_VALIDATED, self._subject(), {"valid": valid})
        return valid

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        """Best-effort save; a lost write is recovered by the next one."""
        try:
            self.gateway.save(self.profile, self._current_page, self._completed)
        except PersistenceWriteFailed as exc:
            logger.warning(
                "Could not persist onboarding progress: %s",
                exc,
                extra={"extra": self._log_context()},
            )

    def _subject(self) -> str:
        return self.profile.user_id or self.session_id

    def _log_context(self) -> dict[str, Any]:
        """Structured fields picked up by ``JsonFormatter``."""
        return {
            "session_id": self.session_id,
            "subject": self._subject(),
            "page": self._current_page,
            "page_kind": self.current_kind.value,
        }
