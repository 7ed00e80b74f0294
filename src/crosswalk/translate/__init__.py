"""Unit translation."""

from crosswalk.translate.translator import (
    DefaultTranslator,
    UnitTranslator,
    member_identity,
    type_identity,
)

__all__ = [
    "DefaultTranslator",
    "UnitTranslator",
    "member_identity",
    "type_identity",
]
