# moderation/core/definitions.py

"""Moderation attribute catalog for the Perspective comment analyzer."""

from enum import Enum
from typing import Any, Optional, Union

from moderation.core.exceptions import ValidationError


class Attribute(Enum):
    """Known moderation attributes scored by the analysis service.

    The service introduces experimental attributes independently of client
    releases, so results are keyed by raw names and this enum is only used
    for typed access to the well-known ones.
    """

    TOXICITY = "TOXICITY"
    SEVERE_TOXICITY = "SEVERE_TOXICITY"
    IDENTITY_ATTACK = "IDENTITY_ATTACK"
    INSULT = "INSULT"
    PROFANITY = "PROFANITY"
    THREAT = "THREAT"
    SEXUALLY_EXPLICIT = "SEXUALLY_EXPLICIT"
    FLIRTATION = "FLIRTATION"

    @classmethod
    def lookup(cls, name: Any) -> Optional["Attribute"]:
        """Case-insensitive lookup of an attribute by name.

        Args:
            name: Attribute name as returned by the API (any case)

        Returns:
            Matching Attribute, or None for None, non-string, or
            unknown/experimental names
        """
        if not isinstance(name, str):
            return None
        return cls.__members__.get(name.upper())


def attribute_name(value: Union[Attribute, str]) -> str:
    """Returns the canonical wire name for an attribute.

    Known names are upper-cased; unknown strings pass through unchanged so
    experimental attributes can still be requested.

    Raises:
        ValidationError: If value is None, empty, or not a string/Attribute.
    """
    if isinstance(value, Attribute):
        return value.value

    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid attribute name: {value!r}")

    known = Attribute.lookup(value)
    return known.value if known is not None else value
