"""
Field rules checked before every write.

A rule set is a plain list of :class:`Rule` entries, each a predicate over
the field value plus the message reported when the predicate fails.  Rules
for the same field run in order; once a field fails a rule marked
``stop=True`` its remaining rules are skipped (a missing title is reported
as blank, not also as too short).
"""
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from blog.exceptions import ValidationError


@dataclass(frozen=True)
class Rule:
    field: str
    predicate: Callable[[Any], bool]
    message: str
    stop: bool = False
    # Exposed to clients in the form descriptors returned by new/edit.
    constraint: tuple[str, Any] | None = None


def present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def presence(field: str) -> Rule:
    return Rule(field, present, "can't be blank", stop=True, constraint=("required", True))


def min_length(field: str, minimum: int) -> Rule:
    return Rule(
        field,
        lambda value: value is not None and len(value) >= minimum,
        f"is too short (minimum is {minimum} characters)",
        constraint=("min_length", minimum),
    )


def max_length(field: str, maximum: int) -> Rule:
    return Rule(
        field,
        lambda value: value is None or len(value) <= maximum,
        f"is too long (maximum is {maximum} characters)",
        constraint=("max_length", maximum),
    )


ARTICLE_RULES: list[Rule] = [
    presence("title"),
    min_length("title", 5),
    max_length("title", 300),
]

COMMENT_RULES: list[Rule] = [
    presence("commenter"),
    max_length("commenter", 150),
    presence("body"),
]

USER_RULES: list[Rule] = [
    presence("username"),
    max_length("username", 100),
    presence("email"),
    max_length("email", 255),
]


def collect_errors(values: Mapping[str, Any], rules: list[Rule]) -> dict[str, list[str]]:
    """Return ``{field: [messages]}`` for every rule *values* fails."""
    errors: dict[str, list[str]] = {}
    halted: set[str] = set()
    for rule in rules:
        if rule.field in halted:
            continue
        if not rule.predicate(values.get(rule.field)):
            errors.setdefault(rule.field, []).append(rule.message)
            if rule.stop:
                halted.add(rule.field)
    return errors


def validate(values: Mapping[str, Any], rules: list[Rule]) -> None:
    """Raise :class:`ValidationError` when *values* fails any of *rules*."""
    errors = collect_errors(values, rules)
    if errors:
        raise ValidationError(errors)


def describe(rules: list[Rule]) -> dict[str, dict[str, Any]]:
    """Per-field constraint summary used by the form descriptors."""
    fields: dict[str, dict[str, Any]] = {}
    for rule in rules:
        entry = fields.setdefault(rule.field, {"required": False})
        if rule.constraint is not None:
            key, value = rule.constraint
            entry[key] = value
    return fields
