import pytest

from moderation.core.definitions import Attribute, attribute_name
from moderation.core.exceptions import ValidationError


def test_lookup_is_case_insensitive() -> None:
    assert Attribute.lookup("toxicity") is Attribute.TOXICITY
    assert Attribute.lookup("TOXICITY") is Attribute.TOXICITY
    assert Attribute.lookup("ToXiCiTy") is Attribute.TOXICITY
    assert Attribute.lookup("severe_toxicity") is Attribute.SEVERE_TOXICITY


@pytest.mark.parametrize("name", [None, "", "totally_unknown_tag", "LIKELY_TO_REJECT", 42])
def test_lookup_returns_none_for_unknown(name) -> None:
    assert Attribute.lookup(name) is None


def test_catalog_is_closed_set() -> None:
    assert [a.value for a in Attribute] == [
        "TOXICITY",
        "SEVERE_TOXICITY",
        "IDENTITY_ATTACK",
        "INSULT",
        "PROFANITY",
        "THREAT",
        "SEXUALLY_EXPLICIT",
        "FLIRTATION",
    ]


def test_attribute_name_normalises_known_and_keeps_experimental() -> None:
    assert attribute_name(Attribute.INSULT) == "INSULT"
    assert attribute_name("insult") == "INSULT"
    assert attribute_name("Experimental_Attr") == "Experimental_Attr"


@pytest.mark.parametrize("value", [None, "", 3])
def test_attribute_name_rejects_invalid(value) -> None:
    with pytest.raises(ValidationError):
        attribute_name(value)
