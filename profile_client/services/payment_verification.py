"""Payment verification after the provider redirects back to the app.

``verify_payment`` is the protocol: one request, classified into a
``VerificationOutcome``. ``PaymentVerificationFlow`` applies an outcome to the
host application's credential store, notifier, navigator and scheduler.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from pydantic import ValidationError

from profile_client.core.config import settings
from profile_client.core.errors import (
    AuthExpired,
    BusinessRejected,
    ProfileClientError,
    RequestFailed,
)
from profile_client.core.http import bearer_headers, read_json
from profile_client.core.interfaces import (
    CredentialStore,
    LoopScheduler,
    Navigator,
    Notifier,
    Scheduler,
)
from profile_client.schemas.verification import VerificationResult

logger = logging.getLogger(__name__)

VERIFY_PATH = "/api/subscription/verify"

ERROR_TITLE = "Verification Failed"
MISSING_REFERENCE_TITLE = "Verification Error"
MISSING_REFERENCE_MESSAGE = "Payment reference not found. Your transaction could not be verified."
NOT_LOGGED_IN_TITLE = "Authentication Error"
NOT_LOGGED_IN_MESSAGE = "You are not logged in. Redirecting to login page."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
PAYMENT_NOT_FOUND_MESSAGE = "Could not find the payment to verify. Please contact support."
SERVER_ERROR_MESSAGE = "Our servers are experiencing issues. Please try again later."
GENERIC_FAILURE_MESSAGE = "Failed to verify your payment."
NOT_SUCCESSFUL_MESSAGE = "The transaction could not be verified or was not successful."
UNEXPECTED_MESSAGE = "An unexpected error occurred during verification."
SUCCESS_TITLE = "Payment Successful!"
SUCCESS_MESSAGE = "Your account has been upgraded. Redirecting to dashboard..."


class VerificationStatus(str, enum.Enum):
    VERIFYING = "verifying"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class VerificationOutcome:
    status: VerificationStatus
    title: str
    description: str
    access_token: Optional[str] = None
    redirect_to: Optional[str] = None
    redirect_delay_ms: int = 0


async def request_verification(client: httpx.AsyncClient, reference: str, token: str) -> VerificationResult:
    """Call the verification endpoint and return the result on business success.

    Raises ``AuthExpired`` on 401, ``RequestFailed`` on any other non-success
    status and ``BusinessRejected`` when the provider status is not "success".
    """
    response = await client.get(VERIFY_PATH, params={"reference": reference}, headers=bearer_headers(token))

    if response.status_code == 401:
        raise AuthExpired(SESSION_EXPIRED_MESSAGE)

    body = read_json(response)

    if not response.is_success:
        if response.status_code == 404:
            message = PAYMENT_NOT_FOUND_MESSAGE
        elif response.status_code >= 500:
            message = SERVER_ERROR_MESSAGE
        else:
            message = (body.get("message") if isinstance(body, dict) else None) or GENERIC_FAILURE_MESSAGE
        raise RequestFailed(message, response.status_code)

    if not isinstance(body, dict):
        raise ProfileClientError(UNEXPECTED_MESSAGE, response.status_code)

    result = VerificationResult.model_validate(body)
    if not result.is_success:
        raise BusinessRejected(result.message or NOT_SUCCESSFUL_MESSAGE, response.status_code)
    return result


def missing_reference_outcome() -> VerificationOutcome:
    return VerificationOutcome(
        status=VerificationStatus.ERROR,
        title=MISSING_REFERENCE_TITLE,
        description=MISSING_REFERENCE_MESSAGE,
    )


async def verify_payment(client: httpx.AsyncClient, reference: Optional[str], token: str) -> VerificationOutcome:
    if not reference:
        return missing_reference_outcome()

    try:
        result = await request_verification(client, reference, token)
    except AuthExpired as e:
        logger.warning(f"Payment verification for {reference} rejected the session")
        return VerificationOutcome(
            status=VerificationStatus.ERROR,
            title=ERROR_TITLE,
            description=e.message,
            redirect_to=settings.login_path,
        )
    except ProfileClientError as e:
        logger.warning(f"Payment verification for {reference} failed: {e.message}")
        return VerificationOutcome(status=VerificationStatus.ERROR, title=ERROR_TITLE, description=e.message)
    except (httpx.HTTPError, ValidationError) as e:
        logger.error(f"Payment verification for {reference} errored: {e!r}")
        return VerificationOutcome(status=VerificationStatus.ERROR, title=ERROR_TITLE, description=UNEXPECTED_MESSAGE)

    logger.info(f"Payment {reference} verified")
    return VerificationOutcome(
        status=VerificationStatus.SUCCESS,
        title=SUCCESS_TITLE,
        description=SUCCESS_MESSAGE,
        access_token=result.access_token,
        redirect_to=settings.dashboard_path,
        redirect_delay_ms=settings.success_redirect_delay_ms,
    )


class PaymentVerificationFlow:
    """Drives the verifying -> success | error status for one page visit."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: CredentialStore,
        navigator: Navigator,
        notifier: Notifier,
        scheduler: Optional[Scheduler] = None,
    ):
        self.client = client
        self.credentials = credentials
        self.navigator = navigator
        self.notifier = notifier
        self.scheduler = scheduler or LoopScheduler()
        self.status = VerificationStatus.VERIFYING
        self.title = ""
        self.description = ""

    async def run(self, reference: Optional[str]) -> Optional[VerificationOutcome]:
        """Verify ``reference`` once. Returns None when the user is sent to log in first."""
        if self.status is not VerificationStatus.VERIFYING:
            return None

        if not reference:
            outcome = missing_reference_outcome()
            self._apply(outcome)
            return outcome

        token = self.credentials.get(settings.token_storage_key)
        if not token:
            self.notifier.notify("destructive", NOT_LOGGED_IN_TITLE, NOT_LOGGED_IN_MESSAGE)
            self.navigator.redirect(settings.login_path)
            return None

        outcome = await verify_payment(self.client, reference, token)
        self._apply(outcome)
        return outcome

    def _apply(self, outcome: VerificationOutcome) -> None:
        if outcome.access_token:
            self.credentials.set(settings.token_storage_key, outcome.access_token)

        self.status = outcome.status
        self.title = outcome.title
        self.description = outcome.description

        kind = "destructive" if outcome.status is VerificationStatus.ERROR else "default"
        self.notifier.notify(kind, outcome.title, outcome.description)

        if outcome.redirect_to is None:
            return
        if outcome.redirect_delay_ms:
            path = outcome.redirect_to
            self.scheduler.schedule(outcome.redirect_delay_ms / 1000, lambda: self.navigator.redirect(path))
        else:
            self.navigator.redirect(outcome.redirect_to)
