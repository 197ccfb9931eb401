"""Declarative payload validation.

Each payload type declares its rules explicitly as a ``RuleSet`` class attribute::

    class ProfileCreate(BaseModel):
        user_id: str = ""
        fullname: str = ""

        rules: ClassVar[RuleSet] = RuleSet(
            user_id=(required, identifier),
            fullname=(required, max_length(120)),
        )

``validate`` checks every field against every rule and returns the complete list
of violations; it never stops at the first failure. Rules other than ``required``
skip zero values, so an omitted optional field is not reported.
"""
import re
import unicodedata
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from app.core.exceptions import InvalidPayloadError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PASSWORD_MIN_LENGTH = 8


@dataclass(frozen=True)
class FieldError:
    field: str
    rule: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "rule": self.rule, "message": self.message}


@dataclass(frozen=True)
class Rule:
    """A named check returning zero or more violation messages."""

    name: str
    check: Callable[[Any], list[str]]
    skip_zero: bool = True


def is_zero(value: Any) -> bool:
    """Return True for the zero value of a field.

    Zero values are ``None``, empty strings and collections, numeric zero and the
    nil UUID. Booleans are never zero.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, uuid.UUID):
        return value.int == 0
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def _check_required(value: Any) -> list[str]:
    return ["is required"] if is_zero(value) else []


def _sized(value: Any) -> bool:
    return isinstance(value, (str, bytes, list, tuple, set, frozenset, dict))


def _number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def min_length(n: int | float) -> Rule:
    def check(value: Any) -> list[str]:
        if isinstance(value, str) and len(value) < n:
            return [f"must be at least {n} characters long"]
        if _sized(value) and not isinstance(value, str) and len(value) < n:
            return [f"must have at least {n} items"]
        if _number(value) and value < n:
            return [f"must be at least {n}"]
        return []

    return Rule(f"min={n}", check)


def max_length(n: int | float) -> Rule:
    def check(value: Any) -> list[str]:
        if isinstance(value, str) and len(value) > n:
            return [f"must be no more than {n} characters long"]
        if _sized(value) and not isinstance(value, str) and len(value) > n:
            return [f"must have no more than {n} items"]
        if _number(value) and value > n:
            return [f"must be no more than {n}"]
        return []

    return Rule(f"max={n}", check)


def _check_email(value: Any) -> list[str]:
    if not isinstance(value, str):
        return ["must be a string"]
    if not EMAIL_PATTERN.match(value):
        return ["must be a valid email address"]
    return []


def _check_identifier(value: Any) -> list[str]:
    if isinstance(value, uuid.UUID):
        parsed = value
    else:
        try:
            parsed = uuid.UUID(str(value))
        except ValueError:
            return ["must be a valid identifier"]
    if parsed.int == 0:
        return ["cannot be the nil identifier"]
    return []


def _is_symbol(char: str) -> bool:
    return unicodedata.category(char)[0] in ("P", "S")


def _check_password(value: Any) -> list[str]:
    if not isinstance(value, str):
        return ["must be a string"]

    problems = []
    if len(value) < PASSWORD_MIN_LENGTH:
        problems.append(f"be at least {PASSWORD_MIN_LENGTH} characters long")
    if not any(c.isupper() for c in value):
        problems.append("contain at least one uppercase letter")
    if not any(c.islower() for c in value):
        problems.append("contain at least one lowercase letter")
    if not any(c.isdigit() for c in value):
        problems.append("contain at least one number")
    if not any(_is_symbol(c) for c in value):
        problems.append("contain at least one special character")

    if problems:
        return ["must " + ", ".join(problems)]
    return []


required = Rule("required", _check_required, skip_zero=False)
email = Rule("email", _check_email)
identifier = Rule("identifier", _check_identifier)
password = Rule("password", _check_password)


class RuleSet:
    """Explicit mapping of field name to the rules that apply to it."""

    def __init__(self, **fields: Sequence[Rule]):
        self.fields: dict[str, tuple[Rule, ...]] = {}
        for name, rules in fields.items():
            for rule in rules:
                if not isinstance(rule, Rule):
                    raise TypeError(f"rule for {name!r} must be a Rule, got {rule!r}")
            self.fields[name] = tuple(rules)

    def check(self, payload: Any, prefix: str = "") -> list[FieldError]:
        errors: list[FieldError] = []
        for name, rules in self.fields.items():
            value = getattr(payload, name, None)
            for rule in rules:
                if rule.skip_zero and is_zero(value):
                    continue
                for message in rule.check(value):
                    errors.append(FieldError(f"{prefix}{name}", rule.name, message))
        return errors


def _rules_for(payload: Any) -> RuleSet:
    rules = getattr(type(payload), "rules", None)
    if not isinstance(rules, RuleSet):
        raise TypeError(f"{type(payload).__name__} does not declare a RuleSet")
    return rules


def validate(payload: Any) -> list[FieldError]:
    """Check a payload, or every payload in a sequence, against its rules."""
    if isinstance(payload, (list, tuple)):
        errors: list[FieldError] = []
        for index, item in enumerate(payload):
            errors.extend(_rules_for(item).check(item, prefix=f"[{index}]."))
        return errors
    return _rules_for(payload).check(payload)


def ensure_valid(payload: Any) -> None:
    """Raise InvalidPayloadError listing every violation, if any."""
    errors = validate(payload)
    if errors:
        raise InvalidPayloadError(errors)

