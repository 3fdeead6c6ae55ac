# moderation/core/domain.py

"""Domain models for moderation scoring results."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from moderation.core.definitions import Attribute
from moderation.core.exceptions import ValidationError


def _now_epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass(frozen=True, eq=False)
class SpanAnnotation:
    """Score for one attribute over a character range of the message.

    Attributes:
        begin: Starting character offset in the message (inclusive)
        end: Ending character offset in the message (exclusive)
        attribute: Attribute name as reported by the service
        score: Probability for the attribute over the span
    """

    begin: int
    end: int
    attribute: str
    score: float

    def __post_init__(self) -> None:
        if self.begin < 0 or self.end < self.begin:
            raise ValidationError(
                f"Invalid span range [{self.begin}, {self.end})"
            )
        if self.attribute is None:
            raise ValidationError("Span attribute cannot be None")

    def _key(self) -> Tuple[int, int, str, Any]:
        # NaN scores compare equal to each other
        score = self.score
        if isinstance(score, float) and math.isnan(score):
            score = "nan"
        return (self.begin, self.end, self.attribute, score)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpanAnnotation):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @property
    def attribute_enum(self) -> Optional[Attribute]:
        """Typed attribute, or None for experimental names."""
        return Attribute.lookup(self.attribute)

    @property
    def length(self) -> int:
        return self.end - self.begin

    def text_in(self, message: str) -> str:
        """Returns the part of message covered by this span."""
        return message[self.begin : self.end]

    def __str__(self) -> str:
        return f"Span[{self.begin},{self.end}) {self.attribute}={self.score}"


@dataclass(frozen=True, eq=False)
class ScoreResult:
    """Immutable result of a single analysis request.

    Collections passed in are copied: languages and span_annotations become
    tuples and scores becomes a read-only mapping, so nothing the caller
    holds can alter the result later.

    Attributes:
        message: Text that was analyzed
        languages: Language codes used for the request
        scores: Attribute name -> summary probability (NaN when requested
            but unavailable), in request order
        span_annotations: Per-span scores, empty unless requested
        computed_at_epoch_millis: Creation timestamp, defaults to now
    """

    message: str
    languages: Tuple[str, ...] = ()
    scores: Mapping[str, float] = field(default_factory=dict)
    span_annotations: Tuple[SpanAnnotation, ...] = ()
    computed_at_epoch_millis: Optional[int] = None

    def __post_init__(self) -> None:
        if self.message is None:
            raise ValidationError("Result message cannot be None")

        if isinstance(self.languages, str):
            raise ValidationError("Languages must be a sequence, not a string")

        scores = dict(self.scores or {})
        if None in scores:
            raise ValidationError("Score attribute name cannot be None")

        object.__setattr__(self, "languages", tuple(self.languages or ()))
        object.__setattr__(self, "scores", MappingProxyType(scores))
        object.__setattr__(
            self, "span_annotations", tuple(self.span_annotations or ())
        )
        if self.computed_at_epoch_millis is None:
            object.__setattr__(self, "computed_at_epoch_millis", _now_epoch_millis())

    @staticmethod
    def builder(message: str) -> "ScoreResultBuilder":
        """Starts assembling a result for the given message."""
        return ScoreResultBuilder(message)

    # Accessors

    def score_of(self, attribute: Union[Attribute, str]) -> Optional[float]:
        """Returns the recorded score for an attribute.

        A recorded NaN is returned as-is: it means the attribute was
        requested but the service gave no usable score. None means the
        attribute was never recorded at all.
        """
        if attribute is None:
            return None
        if isinstance(attribute, Attribute):
            return self.scores.get(attribute.value)
        return self.scores.get(attribute)

    @property
    def toxicity(self) -> Optional[float]:
        return self.score_of(Attribute.TOXICITY)

    @property
    def severe_toxicity(self) -> Optional[float]:
        return self.score_of(Attribute.SEVERE_TOXICITY)

    @property
    def identity_attack(self) -> Optional[float]:
        return self.score_of(Attribute.IDENTITY_ATTACK)

    @property
    def insult(self) -> Optional[float]:
        return self.score_of(Attribute.INSULT)

    @property
    def profanity(self) -> Optional[float]:
        return self.score_of(Attribute.PROFANITY)

    @property
    def threat(self) -> Optional[float]:
        return self.score_of(Attribute.THREAT)

    @property
    def sexually_explicit(self) -> Optional[float]:
        return self.score_of(Attribute.SEXUALLY_EXPLICIT)

    @property
    def flirtation(self) -> Optional[float]:
        return self.score_of(Attribute.FLIRTATION)

    def is_toxic(self, threshold: float) -> bool:
        """True if a toxicity score was recorded and is >= threshold.

        Missing toxicity (never recorded, or NaN) is treated as not toxic.
        """
        value = self.toxicity
        return value is not None and value >= threshold

    @property
    def computed_at(self) -> datetime:
        return datetime.fromtimestamp(
            self.computed_at_epoch_millis / 1000, tz=timezone.utc
        )

    def spans_for(self, attribute: Union[Attribute, str]) -> List[SpanAnnotation]:
        """Returns span annotations reported for one attribute, in order."""
        name = attribute.value if isinstance(attribute, Attribute) else attribute
        return [s for s in self.span_annotations if s.attribute == name]

    # Persistence

    def to_dict(self) -> Dict[str, Any]:
        """Returns a plain-dict form suitable for JSON persistence."""
        return {
            "message": self.message,
            "languages": list(self.languages),
            "scores": dict(self.scores),
            "span_annotations": [
                {
                    "begin": s.begin,
                    "end": s.end,
                    "attribute": s.attribute,
                    "score": s.score,
                }
                for s in self.span_annotations
            ],
            "computed_at_epoch_millis": self.computed_at_epoch_millis,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreResult":
        """Rebuilds a persisted result, keeping its original timestamp.

        Raises:
            ValidationError: If the message is missing or a span is invalid.
        """
        builder = (
            cls.builder(data.get("message"))
            .languages(data.get("languages"))
            .put_all_scores(data.get("scores"))
            .add_all_spans(
                SpanAnnotation(
                    begin=s["begin"],
                    end=s["end"],
                    attribute=s["attribute"],
                    score=s["score"],
                )
                for s in data.get("span_annotations") or []
            )
        )

        computed_at = data.get("computed_at_epoch_millis")
        if computed_at is not None:
            builder.computed_at_epoch_millis(computed_at)

        return builder.build()

    def __repr__(self) -> str:
        return (
            f"<ScoreResult "
            f"message_len={len(self.message)} "
            f"languages={list(self.languages)} "
            f"scores={dict(self.scores)} "
            f"spans={len(self.span_annotations)} "
            f"computed_at={self.computed_at_epoch_millis}>"
        )


class ScoreResultBuilder:
    """Mutable, single-use assembler for ScoreResult.

    Not thread-safe. Invariants are only checked in build().
    """

    def __init__(self, message: str) -> None:
        self._message = message
        self._languages: List[str] = []
        self._scores: Dict[str, float] = {}
        self._spans: List[SpanAnnotation] = []
        self._computed_at: Optional[int] = None

    def put_score(
        self, attribute: Union[Attribute, str], value: float
    ) -> "ScoreResultBuilder":
        """Adds or replaces the score for an attribute (any service name)."""
        if attribute is None:
            raise ValidationError("Score attribute name cannot be None")

        name = attribute.value if isinstance(attribute, Attribute) else attribute
        self._scores[name] = float(value)
        return self

    def put_all_scores(
        self, scores: Optional[Mapping[str, float]]
    ) -> "ScoreResultBuilder":
        """Merges scores in the mapping's iteration order; last write wins."""
        if scores:
            for name, value in scores.items():
                self.put_score(name, value)
        return self

    def languages(self, languages: Optional[Iterable[str]]) -> "ScoreResultBuilder":
        """Replaces the language list; None means no languages."""
        if isinstance(languages, str):
            raise ValidationError("Languages must be a sequence, not a string")
        self._languages = list(languages) if languages is not None else []
        return self

    def add_span(self, span: Optional[SpanAnnotation]) -> "ScoreResultBuilder":
        if span is not None:
            self._spans.append(span)
        return self

    def add_all_spans(
        self, spans: Optional[Iterable[SpanAnnotation]]
    ) -> "ScoreResultBuilder":
        if spans is not None:
            for span in spans:
                self.add_span(span)
        return self

    def computed_at_epoch_millis(self, epoch_millis: int) -> "ScoreResultBuilder":
        """Overrides the default "now" timestamp (replays, tests)."""
        self._computed_at = int(epoch_millis)
        return self

    def build(self) -> ScoreResult:
        """Builds the immutable result.

        Raises:
            ValidationError: If the message is None.
        """
        if self._message is None:
            raise ValidationError("Result message cannot be None")

        return ScoreResult(
            message=self._message,
            languages=tuple(self._languages),
            scores=dict(self._scores),
            span_annotations=tuple(self._spans),
            computed_at_epoch_millis=self._computed_at,
        )
