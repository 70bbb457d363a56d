from datetime import date

import pytest
from pydantic import ValidationError

from profile_client.schemas.profile import (
    DEFAULT_GENDER,
    CreditBalance,
    Profile,
    ProfileRecord,
    SaveProfilePayload,
    format_wire_date,
    parse_wire_date,
)
from profile_client.schemas.verification import VerificationResult


class TestWireDates:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2020-01-01T00:00:00Z", date(2020, 1, 1)),
            ("2020-01-01T00:00:00.000Z", date(2020, 1, 1)),
            ("2020-01-01", date(2020, 1, 1)),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_wire_date(raw) == expected

    def test_format(self):
        assert format_wire_date(date(1990, 5, 15)) == "1990-05-15T00:00:00.000Z"
        assert format_wire_date(None) is None

    def test_format_reads_back(self):
        assert parse_wire_date(format_wire_date(date(2004, 2, 29))) == date(2004, 2, 29)


class TestProfileRecord:
    def test_blank_profile_defaults(self):
        profile = Profile()
        assert profile.id is None
        assert profile.gender == DEFAULT_GENDER
        assert profile.weight == ""
        assert profile.is_subscribed is False
        assert profile.credits == 0

    @pytest.mark.parametrize(
        "weight,expected",
        [(72.5, "72.5"), (70.0, "70"), (70, "70"), ("68", "68"), (0, ""), (None, ""), ("", "")],
    )
    def test_weight_reads_as_string(self, weight, expected):
        assert ProfileRecord.model_validate({"Weight": weight}).weight == expected

    def test_pascal_case_names_accepted(self):
        record = ProfileRecord.model_validate({"Id": 1, "Name": "Ada", "Gender": "female", "Goals": "x"})
        assert record.name == "Ada"
        assert record.gender == "female"
        assert record.goals == "x"

    def test_nulls_fall_back_to_defaults(self):
        record = ProfileRecord.model_validate(
            {"id": None, "name": None, "gender": None, "goals": None, "isSubscribed": None}
        )
        assert record.to_profile() == Profile()

    def test_to_profile_leaves_credits_unset(self):
        record = ProfileRecord.model_validate({"id": 5, "isSubscribed": True})
        profile = record.to_profile()
        assert profile.id == "5"
        assert profile.is_subscribed is True
        assert profile.credits == 0

    def test_unreadable_birth_date_is_dropped(self, caplog):
        record = ProfileRecord.model_validate({"id": 1, "BirthDate": "15/05/1990", "isSubscribed": True})
        assert record.birth_date is None
        assert record.id == "1"
        assert record.is_subscribed is True
        assert "unreadable BirthDate" in caplog.text

    def test_invalid_field_still_rejected(self):
        with pytest.raises(ValidationError):
            ProfileRecord.model_validate({"name": 123})


class TestCreditBalance:
    def test_credits(self):
        assert CreditBalance.model_validate({"credits": 11}).credits == 11

    def test_missing_or_null(self):
        assert CreditBalance.model_validate({}).credits == 0
        assert CreditBalance.model_validate({"credits": None}).credits == 0


class TestSaveProfilePayload:
    def test_create_payload_omits_id(self):
        payload = SaveProfilePayload.from_profile(
            Profile(name="Ada", weight="61.5", birth_date=date(1996, 2, 26), credits=3, is_subscribed=True),
            age=30,
        )
        assert payload.to_wire() == {
            "Name": "Ada",
            "Gender": DEFAULT_GENDER,
            "Weight": "61.5",
            "Goals": "",
            "BirthDate": "1996-02-26T00:00:00.000Z",
            "Age": 30,
        }

    def test_update_payload_includes_id(self):
        payload = SaveProfilePayload.from_profile(Profile(id="9", birth_date=date(1996, 2, 27)), age=29)
        wire = payload.to_wire()
        assert wire["Id"] == "9"
        assert wire["Age"] == 29

    def test_empty_id_counts_as_new(self):
        assert "Id" not in SaveProfilePayload.from_profile(Profile(id=""), age=0).to_wire()


class TestVerificationResult:
    @pytest.mark.parametrize("status", ["success", "Success", "SUCCESS"])
    def test_success(self, status):
        assert VerificationResult.model_validate({"status": status}).is_success

    @pytest.mark.parametrize("status", ["pending", "failed", "", None])
    def test_not_success(self, status):
        assert not VerificationResult.model_validate({"status": status}).is_success

    def test_access_token_alias(self):
        result = VerificationResult.model_validate({"status": "success", "accessToken": "tok2"})
        assert result.access_token == "tok2"
