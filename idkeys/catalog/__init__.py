"""Catalog records that resources can be associated with."""

__all__ = ["Entity", "Field", "FieldError", "Work", "value"]

from . import value as value
from .entity import Entity as Entity, Field as Field, FieldError as FieldError
from .work import Work as Work
