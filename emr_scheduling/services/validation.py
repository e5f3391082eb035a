from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

Lookup = Callable[[Any], bool]


@dataclass(frozen=True)
class LookupRule:
    """A data-dependent rule: ``lookup`` answers whether the supplied value exists."""

    field: str
    lookup: Lookup
    message: str


@dataclass
class ValidationResult:
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)


@dataclass
class ProcessingResult:
    data: list = field(default_factory=list)
    validation_errors: dict[str, list[str]] = field(default_factory=dict)
    internal_errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors


def apply_lookups(rules: Iterable[LookupRule], values: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    for rule in rules:
        value = values.get(rule.field)
        if value is None:
            continue
        if not rule.lookup(value):
            result.add(rule.field, rule.message)
    return result


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Key pydantic error entries by the field they belong to."""
    collected: dict[str, list[str]] = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part != "body"]
        name = str(loc[0]) if loc else "body"
        collected.setdefault(name, []).append(error.get("msg", "is invalid"))
    return collected
