"""Schema-driven catalog records."""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import ClassVar

from .value import Format, MultipleConfig, Value, parse_value

REQUIRED_MISSING = "Value(s) required but missing"


@dataclass(frozen=True)
class Field:
    required: bool = False
    multiple: MultipleConfig = False
    format: Format | None = None


@dataclass(frozen=True)
class FieldError:
    field: str
    error: str

    def __str__(self) -> str:
        return f"[{self.field}] {self.error}"


class Entity:
    schema: ClassVar[Mapping[str, Field]] = {}

    def __init__(self, values: Mapping[str, str]) -> None:
        self.fields: dict[str, Value] = {}
        self.derived_fields: dict[str, Value] = {}
        self.unknown_fields = [key for key in values if key not in self.schema]
        for key, raw_value in values.items():
            if key not in self.schema:
                continue
            # Fields with a conditional "multiple" are split, and the
            # condition is checked on validation.
            value = parse_value(
                raw_value, multiple=self.schema[key].multiple is not False
            )
            if value is not None:
                self.fields[key] = value
        self.derive_fields()

    def derive_fields(self) -> None:
        pass

    def get(self, key: str) -> Value | None:
        if key in self.fields:
            return self.fields[key]
        return self.derived_fields.get(key)

    def has(self, key: str) -> bool:
        return key in self.fields or key in self.derived_fields

    def validate(self) -> list[FieldError]:
        errors = [FieldError(key, "Unknown field") for key in self.unknown_fields]
        for field in self.schema:
            errors += [FieldError(field, error) for error in self.lint_field(field)]
        return errors

    def lint_field(self, field: str) -> Iterable[str]:
        config = self.schema[field]
        if field not in self.fields:
            if config.required:
                yield REQUIRED_MISSING
            return

        value = self.fields[field]
        allow_multiple = (
            config.multiple
            if isinstance(config.multiple, bool)
            else config.multiple(self.fields)
        )
        if not allow_multiple:
            if isinstance(value, list) and len(value) > 1:
                yield "Multiple values but only one expected"
            elif isinstance(value, str) and "; " in value:
                yield "Multiple values but only one expected"

        for single_value in value if isinstance(value, list) else [value]:
            error = self._lint_single_value(config, single_value)
            if error is not None:
                yield error

    def _lint_single_value(self, config: Field, value: str) -> str | None:
        fmt = config.format
        if fmt is None:
            return None
        elif isinstance(fmt, (list, tuple)):
            if value not in fmt:
                return f'The value "{value}" is not included: {", ".join(fmt)}'
        elif isinstance(fmt, re.Pattern):
            if not fmt.search(value):
                return f'The value "{value}" does not conform to pattern: {fmt.pattern}'
        elif callable(fmt) and not fmt(value):
            return f'The value "{value}" does not conform to pattern: {fmt.__name__}'
        return None
