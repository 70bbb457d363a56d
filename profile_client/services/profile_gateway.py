import asyncio
import logging
from datetime import date
from typing import Optional, Protocol, Union

import httpx
from pydantic import ValidationError

from profile_client.core.errors import AuthExpired, NotFound, RequestFailed, SubscriptionRequired
from profile_client.core.http import bearer_headers, read_json
from profile_client.schemas.profile import (
    CreditBalance,
    Profile,
    ProfileRecord,
    ProfileSnapshot,
    SaveProfilePayload,
)
from profile_client.services.age import calculate_age

logger = logging.getLogger(__name__)

PROFILE_PATH = "/api/profile"
CREDIT_BALANCE_PATH = "/api/credit/balance"

_Result = Union[httpx.Response, BaseException]


class ProfileRepository(Protocol):
    async def fetch_profile(self, token: str) -> ProfileSnapshot: ...

    async def save_profile(self, token: str, profile: Profile) -> Profile: ...


def _raise_unexpected(*results: _Result) -> None:
    """Re-raise anything gather() captured that is not a transport failure."""
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, httpx.HTTPError):
            raise result


def _is_unauthorized(result: _Result) -> bool:
    return isinstance(result, httpx.Response) and result.status_code == 401


class ProfileGateway:
    """Reads and writes the user profile through the remote API."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch_profile(self, token: str) -> ProfileSnapshot:
        """Fetch the profile and credit balance concurrently and merge them.

        A 401 on either request raises ``AuthExpired``. Every other failure
        degrades: a missing or unreadable profile becomes the blank profile
        and a failed balance becomes 0 credits.
        """
        headers = bearer_headers(token)
        profile_res, credit_res = await asyncio.gather(
            self.client.get(PROFILE_PATH, headers=headers),
            self.client.get(CREDIT_BALANCE_PATH, headers=headers),
            return_exceptions=True,
        )
        _raise_unexpected(profile_res, credit_res)

        if _is_unauthorized(profile_res) or _is_unauthorized(credit_res):
            raise AuthExpired()

        try:
            record = self._read_profile(profile_res)
        except NotFound:
            # no profile yet is the normal empty state
            record = None
        credits = self._read_credits(credit_res)

        profile = record.to_profile() if record is not None else Profile()
        is_subscribed = record.is_subscribed if record is not None else False
        profile = profile.model_copy(update={"is_subscribed": is_subscribed, "credits": credits})
        return ProfileSnapshot(profile=profile, is_subscribed=is_subscribed)

    async def save_profile(self, token: str, profile: Profile, today: Optional[date] = None) -> Profile:
        """Create the profile when it has no id, otherwise update it in place."""
        headers = bearer_headers(token)
        payload = SaveProfilePayload.from_profile(profile, age=calculate_age(profile.birth_date, today=today))
        is_new = not profile.id

        if is_new:
            response = await self.client.post(PROFILE_PATH, json=payload.to_wire(), headers=headers)
        else:
            response = await self.client.put(f"{PROFILE_PATH}/{profile.id}", json=payload.to_wire(), headers=headers)

        if response.status_code == 403:
            raise SubscriptionRequired()
        if not response.is_success:
            raise RequestFailed.from_body(response.status_code, read_json(response))

        if is_new:
            created = self._read_created(read_json(response))
            return profile.model_copy(
                update={
                    "id": created.id,
                    "birth_date": created.birth_date,
                    "is_subscribed": profile.is_subscribed,
                }
            )

        # the update response body is not read back
        return profile.model_copy(update={"is_subscribed": profile.is_subscribed})

    def _read_profile(self, result: _Result) -> Optional[ProfileRecord]:
        if isinstance(result, BaseException):
            logger.warning(f"Failed to fetch profile: {result!r}")
            return None
        if result.status_code == 404:
            raise NotFound("Profile not found")
        if not result.is_success:
            logger.warning(f"Failed to fetch profile: HTTP {result.status_code} {result.reason_phrase}")
            return None

        body = read_json(result)
        if isinstance(body, dict):
            body = [body]
        if not isinstance(body, list) or not body:
            return None

        try:
            return ProfileRecord.model_validate(body[0])
        except ValidationError as e:
            logger.warning(f"Failed to read profile record: {e}")
            return None

    def _read_created(self, body: object) -> ProfileRecord:
        """Read the create response; the profile already exists server-side by now."""
        body = body if isinstance(body, dict) else {}
        try:
            return ProfileRecord.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Failed to read created profile: {e}")
            created_id = body.get("id")
            return ProfileRecord(id=None if created_id is None else str(created_id))

    def _read_credits(self, result: _Result) -> int:
        if isinstance(result, BaseException):
            logger.warning(f"Failed to fetch credit balance: {result!r}")
            return 0
        if not result.is_success:
            logger.warning(f"Failed to fetch credit balance: HTTP {result.status_code} {result.reason_phrase}")
            return 0

        body = read_json(result)
        try:
            return CreditBalance.model_validate(body if isinstance(body, dict) else {}).credits
        except ValidationError as e:
            logger.warning(f"Failed to read credit balance: {e}")
            return 0
