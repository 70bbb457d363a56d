"""Domain profile and its wire representations.

The API speaks PascalCase for the fields it owns (``BirthDate``, ``Weight``,
``Name`` ...) and camelCase for account flags. Reads go through
``ProfileRecord`` and ``CreditBalance``; writes go through
``SaveProfilePayload``. The domain ``Profile`` never crosses the wire as-is.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_GENDER = "Prefer not to say"


def parse_wire_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


def format_wire_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    midnight = datetime.combine(value, time.min, tzinfo=timezone.utc)
    return midnight.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_wire_weight(value: Any) -> str:
    # absent, zero and empty weights all read back as ""
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class Profile(BaseModel):
    id: Optional[str] = None
    name: str = ""
    gender: str = DEFAULT_GENDER
    weight: str = ""
    goals: str = ""
    birth_date: Optional[date] = None
    is_subscribed: bool = False
    credits: int = 0


@dataclass
class ProfileSnapshot:
    profile: Profile
    is_subscribed: bool


class ProfileRecord(BaseModel):
    """A profile as returned by ``GET /api/profile`` or ``POST /api/profile``."""

    id: Optional[str] = None
    name: str = Field("", validation_alias=AliasChoices("name", "Name"))
    gender: str = Field(DEFAULT_GENDER, validation_alias=AliasChoices("gender", "Gender"))
    goals: str = Field("", validation_alias=AliasChoices("goals", "Goals"))
    weight: str = Field("", validation_alias=AliasChoices("Weight", "weight"))
    birth_date: Optional[date] = Field(None, validation_alias=AliasChoices("BirthDate", "birthDate"))
    is_subscribed: bool = Field(False, validation_alias=AliasChoices("isSubscribed", "IsSubscribed"))

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @field_validator("name", "goals", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("gender", mode="before")
    @classmethod
    def _default_gender(cls, value: Any) -> Any:
        return DEFAULT_GENDER if value is None else value

    @field_validator("weight", mode="before")
    @classmethod
    def _weight_to_str(cls, value: Any) -> str:
        return format_wire_weight(value)

    @field_validator("birth_date", mode="before")
    @classmethod
    def _parse_birth_date(cls, value: Any) -> Optional[date]:
        # an unreadable date must not cost the rest of the record
        try:
            return parse_wire_date(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unreadable BirthDate {value!r}")
            return None

    @field_validator("is_subscribed", mode="before")
    @classmethod
    def _none_to_false(cls, value: Any) -> Any:
        return False if value is None else value

    def to_profile(self) -> Profile:
        return Profile(
            id=self.id,
            name=self.name,
            gender=self.gender,
            weight=self.weight,
            goals=self.goals,
            birth_date=self.birth_date,
            is_subscribed=self.is_subscribed,
        )


class CreditBalance(BaseModel):
    credits: int = 0

    model_config = {"extra": "ignore"}

    @field_validator("credits", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class SaveProfilePayload(BaseModel):
    """Body for ``POST /api/profile`` and ``PUT /api/profile/{id}``.

    Only user-editable fields are sent. ``isSubscribed`` and ``credits`` are
    owned by the server and have no field here.
    """

    id: Optional[str] = Field(None, serialization_alias="Id")
    name: str = Field(serialization_alias="Name")
    gender: str = Field(serialization_alias="Gender")
    weight: str = Field(serialization_alias="Weight")
    goals: str = Field(serialization_alias="Goals")
    birth_date: Optional[str] = Field(serialization_alias="BirthDate")
    age: int = Field(serialization_alias="Age")

    @classmethod
    def from_profile(cls, profile: Profile, age: int) -> "SaveProfilePayload":
        return cls(
            id=profile.id or None,
            name=profile.name,
            gender=profile.gender,
            weight=str(profile.weight or "0"),
            goals=profile.goals,
            birth_date=format_wire_date(profile.birth_date),
            age=age,
        )

    def to_wire(self) -> dict:
        # Id is left out entirely on create
        exclude = {"id"} if self.id is None else None
        return self.model_dump(by_alias=True, exclude=exclude)
