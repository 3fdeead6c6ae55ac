import math
from datetime import datetime, timezone

import pytest

from moderation.core.definitions import Attribute
from moderation.core.domain import ScoreResult, SpanAnnotation
from moderation.core.exceptions import ValidationError


@pytest.mark.parametrize("begin,end", [(0, 0), (0, 5), (3, 3), (7, 100)])
def test_span_accepts_valid_ranges(begin: int, end: int) -> None:
    span = SpanAnnotation(begin, end, "TOXICITY", 0.5)
    assert span.length == end - begin


@pytest.mark.parametrize("begin,end", [(-1, 0), (-1, 5), (5, 4), (1, 0)])
def test_span_rejects_invalid_ranges(begin: int, end: int) -> None:
    with pytest.raises(ValidationError):
        SpanAnnotation(begin, end, "TOXICITY", 0.5)


def test_span_rejects_missing_attribute() -> None:
    with pytest.raises(ValidationError):
        SpanAnnotation(0, 1, None, 0.5)


def test_span_equality_is_exact() -> None:
    a = SpanAnnotation(0, 5, "TOXICITY", 0.4)
    assert a == SpanAnnotation(0, 5, "TOXICITY", 0.4)
    assert a != SpanAnnotation(0, 5, "TOXICITY", 0.4000001)
    assert a != SpanAnnotation(0, 5, "INSULT", 0.4)
    assert len({a, SpanAnnotation(0, 5, "TOXICITY", 0.4)}) == 1


def test_span_helpers() -> None:
    span = SpanAnnotation(4, 9, "insult", 0.8)
    assert span.attribute_enum is Attribute.INSULT
    assert SpanAnnotation(0, 1, "NEW_ATTR", 0.1).attribute_enum is None
    assert span.text_in("you are stupid") == "are s"
    assert str(span) == "Span[4,9) insult=0.8"


def test_score_round_trip_and_absence() -> None:
    result = ScoreResult.builder("hello").put_score("TOXICITY", 0.9).build()
    assert result.score_of("TOXICITY") == 0.9
    assert result.score_of(Attribute.TOXICITY) == 0.9
    assert result.toxicity == 0.9
    assert result.score_of("INSULT") is None
    assert result.insult is None


def test_recorded_nan_is_present() -> None:
    result = ScoreResult.builder("hello").put_score(Attribute.THREAT, math.nan).build()
    value = result.score_of(Attribute.THREAT)
    assert value is not None
    assert math.isnan(value)
    assert result.profanity is None


def test_put_score_overwrites() -> None:
    result = (
        ScoreResult.builder("hello")
        .put_score("TOXICITY", 0.1)
        .put_score(Attribute.TOXICITY, 0.7)
        .build()
    )
    assert dict(result.scores) == {"TOXICITY": 0.7}


def test_put_all_scores_keeps_order_and_last_write() -> None:
    result = (
        ScoreResult.builder("hello")
        .put_score("INSULT", 0.2)
        .put_all_scores({"THREAT": 0.3, "INSULT": 0.5, "EXPERIMENTAL": 0.9})
        .put_all_scores(None)
        .build()
    )
    assert list(result.scores.items()) == [
        ("INSULT", 0.5),
        ("THREAT", 0.3),
        ("EXPERIMENTAL", 0.9),
    ]


def test_put_score_rejects_none_name() -> None:
    with pytest.raises(ValidationError):
        ScoreResult.builder("hello").put_score(None, 0.5)


def test_out_of_range_scores_are_kept() -> None:
    result = ScoreResult.builder("hello").put_score("TOXICITY", 1.7).build()
    assert result.toxicity == 1.7


def test_is_toxic_threshold_boundary() -> None:
    result = ScoreResult.builder("hello").put_score("TOXICITY", 0.7).build()
    assert result.is_toxic(0.7) is True
    assert result.is_toxic(0.69) is True
    assert result.is_toxic(0.71) is False


def test_is_toxic_false_without_toxicity() -> None:
    assert ScoreResult.builder("hello").build().is_toxic(0.0) is False
    nan_result = ScoreResult.builder("hello").put_score("TOXICITY", math.nan).build()
    assert nan_result.is_toxic(0.0) is False


def test_build_requires_message() -> None:
    with pytest.raises(ValidationError):
        ScoreResult.builder(None).build()


def test_null_spans_and_languages_are_ignored() -> None:
    result = (
        ScoreResult.builder("hello")
        .languages(None)
        .add_span(None)
        .add_all_spans(None)
        .build()
    )
    assert result.languages == ()
    assert result.span_annotations == ()


def test_builder_copies_inputs() -> None:
    languages = ["en"]
    spans = [SpanAnnotation(0, 5, "TOXICITY", 0.4)]
    builder = (
        ScoreResult.builder("hello")
        .languages(languages)
        .add_all_spans(spans)
        .put_score("TOXICITY", 0.4)
    )
    result = builder.build()

    languages.append("fr")
    spans.append(SpanAnnotation(1, 2, "TOXICITY", 0.1))
    builder.put_score("INSULT", 0.9).add_span(SpanAnnotation(0, 1, "INSULT", 0.9))

    assert result.languages == ("en",)
    assert result.span_annotations == (SpanAnnotation(0, 5, "TOXICITY", 0.4),)
    assert list(result.scores) == ["TOXICITY"]


def test_result_is_immutable() -> None:
    result = ScoreResult.builder("hello").put_score("TOXICITY", 0.4).build()
    with pytest.raises(TypeError):
        result.scores["TOXICITY"] = 1.0
    with pytest.raises(AttributeError):
        result.message = "other"


def test_direct_construction_copies_mapping() -> None:
    scores = {"TOXICITY": 0.2}
    result = ScoreResult(message="hello", scores=scores, languages=["en"])
    scores["TOXICITY"] = 0.9
    assert result.toxicity == 0.2
    assert result.languages == ("en",)


def test_computed_at_defaults_to_now_and_can_be_overridden() -> None:
    before = int(datetime.now(timezone.utc).timestamp() * 1000)
    result = ScoreResult.builder("hello").build()
    after = int(datetime.now(timezone.utc).timestamp() * 1000)
    assert before <= result.computed_at_epoch_millis <= after

    fixed = ScoreResult.builder("hello").computed_at_epoch_millis(1_700_000_000_000).build()
    assert fixed.computed_at_epoch_millis == 1_700_000_000_000
    assert fixed.computed_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def test_spans_for_filters_by_attribute() -> None:
    result = (
        ScoreResult.builder("you are an idiot")
        .add_span(SpanAnnotation(0, 3, "TOXICITY", 0.2))
        .add_span(SpanAnnotation(8, 16, "INSULT", 0.9))
        .add_span(SpanAnnotation(8, 16, "TOXICITY", 0.8))
        .build()
    )
    assert [s.begin for s in result.spans_for(Attribute.TOXICITY)] == [0, 8]
    assert result.spans_for("INSULT") == [SpanAnnotation(8, 16, "INSULT", 0.9)]


def test_dict_replay_keeps_timestamp() -> None:
    original = (
        ScoreResult.builder("hello there")
        .languages(["en"])
        .put_score("TOXICITY", 0.3)
        .add_span(SpanAnnotation(0, 5, "TOXICITY", 0.3))
        .computed_at_epoch_millis(1234)
        .build()
    )
    replayed = ScoreResult.from_dict(original.to_dict())

    assert replayed.message == "hello there"
    assert replayed.languages == ("en",)
    assert dict(replayed.scores) == {"TOXICITY": 0.3}
    assert replayed.span_annotations == original.span_annotations
    assert replayed.computed_at_epoch_millis == 1234


def test_repr_hides_message_text() -> None:
    result = ScoreResult.builder("secret words").computed_at_epoch_millis(1).build()
    text = repr(result)
    assert "secret" not in text
    assert "message_len=12" in text


def test_nan_span_scores_compare_equal() -> None:
    a = SpanAnnotation(0, 2, "TOXICITY", float("nan"))
    b = SpanAnnotation(0, 2, "TOXICITY", float("nan"))

    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert a != SpanAnnotation(0, 2, "TOXICITY", 0.5)


def test_direct_construction_validates_inputs() -> None:
    with pytest.raises(ValidationError):
        ScoreResult(message="hello", scores={None: 0.5})
    with pytest.raises(ValidationError):
        ScoreResult(message="hello", languages="en")
    with pytest.raises(ValidationError):
        ScoreResult.builder("hello").languages("en")
