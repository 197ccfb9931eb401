"""Tests for declarative payload validation."""
import uuid

import pytest

from app.core.exceptions import InvalidPayloadError
from app.core.validation import (
    RuleSet,
    ensure_valid,
    identifier,
    is_zero,
    max_length,
    min_length,
    password,
    required,
    validate,
)
from app.schemas.badges import BadgeCreate
from app.schemas.profiles import ProfileCreate
from app.schemas.users import UserCreate, UserUpdate


def _fields(errors):
    return {(e.field, e.rule) for e in errors}


class TestZeroValues:
    """Test what counts as an unset field."""

    @pytest.mark.parametrize("value", [None, "", [], {}, 0, 0.0, uuid.UUID(int=0), b""])
    def test_zero_values(self, value):
        assert is_zero(value)

    @pytest.mark.parametrize("value", [False, True, "x", [0], 1, uuid.uuid4()])
    def test_non_zero_values(self, value):
        assert not is_zero(value)


class TestRules:
    """Test individual rules."""

    def test_min_and_max_on_strings(self):
        assert min_length(3).check("ab") == ["must be at least 3 characters long"]
        assert max_length(3).check("abcd") == ["must be no more than 3 characters long"]
        assert min_length(3).check("abc") == []

    def test_min_and_max_on_numbers(self):
        assert min_length(5).check(4) == ["must be at least 5"]
        assert max_length(5).check(6) == ["must be no more than 5"]

    def test_min_and_max_on_collections(self):
        assert min_length(2).check([1]) == ["must have at least 2 items"]
        assert max_length(1).check([1, 2]) == ["must have no more than 1 items"]

    def test_rule_names(self):
        assert min_length(8).name == "min=8"
        assert max_length(20).name == "max=20"

    def test_identifier_rejects_nil(self):
        assert identifier.check(str(uuid.UUID(int=0))) == ["cannot be the nil identifier"]
        assert identifier.check("not-a-uuid") == ["must be a valid identifier"]
        assert identifier.check(str(uuid.uuid4())) == []

    def test_password_reports_every_missing_class(self):
        """A weak password lists all violated sub-rules in one message."""
        messages = password.check("abc")

        assert len(messages) == 1
        message = messages[0]
        assert "at least 8 characters" in message
        assert "uppercase" in message
        assert "number" in message
        assert "special character" in message
        assert "lowercase" not in message

    def test_strong_password_passes(self):
        assert password.check("Str0ng!pass") == []


class TestValidate:
    """Test payload-level validation."""

    def test_reports_every_invalid_field(self):
        """Validation never stops at the first failure."""
        errors = validate(UserCreate(email="nope", password="short"))

        assert _fields(errors) == {("email", "email"), ("password", "password")}

    def test_required_fields(self):
        errors = validate(UserCreate())

        assert ("email", "required") in _fields(errors)
        assert ("password", "required") in _fields(errors)
        # Optional rules skip empty values.
        assert ("email", "email") not in _fields(errors)

    def test_optional_fields_are_checked_when_set(self):
        errors = validate(ProfileCreate(user_id=str(uuid.uuid4()), fullname="A", bio="x" * 1001))

        assert _fields(errors) == {("bio", "max=1000")}

    def test_valid_payload(self):
        assert validate(UserCreate(email="ana@example.com", password="Str0ng!pass")) == []

    def test_sequence_errors_are_prefixed_by_index(self):
        payloads = [
            BadgeCreate(name="Explorer"),
            BadgeCreate(name=""),
            BadgeCreate(name="x" * 101),
        ]

        errors = validate(payloads)

        assert _fields(errors) == {("[1].name", "required"), ("[2].name", "max=100")}

    def test_ensure_valid_raises_aggregated_error(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            ensure_valid(ProfileCreate(user_id="bad"))

        error = exc_info.value
        assert error.code == "VAL_PAYLOAD_001"
        assert {e["field"] for e in error.details["errors"]} == {"user_id", "fullname"}

    def test_payload_without_rules_is_rejected(self):
        class Bare:
            pass

        with pytest.raises(TypeError):
            validate(Bare())

    def test_update_checks_fields_that_are_set(self):
        errors = validate(UserUpdate(id=str(uuid.uuid4()), email="nope", password="weak"))

        assert _fields(errors) == {("email", "email"), ("password", "password")}

    def test_field_named_like_a_rule_keeps_the_rule(self):
        """A payload field called ``email`` must not replace the email rule."""
        assert [rule.name for rule in UserCreate.rules.fields["email"]] == ["required", "email"]
        assert [rule.name for rule in UserUpdate.rules.fields["password"]] == ["password"]


class TestRuleSet:
    """Test rule set construction."""

    def test_accepts_rules(self):
        rules = RuleSet(name=(required, max_length(10)))

        assert [rule.name for rule in rules.fields["name"]] == ["required", "max=10"]

    def test_rejects_values_that_are_not_rules(self):
        with pytest.raises(TypeError):
            RuleSet(email=(required, ""))
