# moderation/engine/response_parser.py

"""Translation of analyze responses into ScoreResult objects.

Malformed score or span data never fails the call: a requested attribute
without a usable summary score is recorded as NaN, and span entries missing
any required field are dropped.
"""

import logging
import math
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

from moderation.core.definitions import Attribute, attribute_name
from moderation.core.domain import ScoreResult, SpanAnnotation
from moderation.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MISSING_SCORE = math.nan

# Decimal, exponent, NaN and Infinity forms; no underscores or lowercase nan/inf.
_NUMERIC_STRING = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _as_number(value: Any) -> Optional[float]:
    """Reads a JSON value as a float; None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # integers beyond float range read as infinity
            return math.copysign(math.inf, value)
    if isinstance(value, str):
        candidate = value.strip()
        if _NUMERIC_STRING.fullmatch(candidate):
            return float(candidate)
    return None


def _as_int(value: Any) -> Optional[int]:
    """Reads a JSON value as an integer offset; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _summary_score(entry: Any) -> float:
    if not isinstance(entry, Mapping):
        return MISSING_SCORE

    summary = entry.get("summaryScore")
    if not isinstance(summary, Mapping):
        return MISSING_SCORE

    value = _as_number(summary.get("value"))
    return MISSING_SCORE if value is None else value


def _span_annotations(entry: Any, name: str) -> List[SpanAnnotation]:
    if not isinstance(entry, Mapping):
        return []

    span_scores = entry.get("spanScores")
    if not isinstance(span_scores, list):
        return []

    spans: List[SpanAnnotation] = []
    skipped = 0

    for item in span_scores:
        if not isinstance(item, Mapping):
            skipped += 1
            continue

        begin = _as_int(item.get("begin"))
        end = _as_int(item.get("end"))
        score = item.get("score")
        value = _as_number(score.get("value")) if isinstance(score, Mapping) else None

        if begin is None or end is None or value is None:
            skipped += 1
            continue

        if not math.isfinite(value):
            skipped += 1
            continue

        try:
            spans.append(SpanAnnotation(begin, end, name, value))
        except ValidationError:
            skipped += 1

    if skipped:
        logger.debug(
            "Dropped malformed span scores",
            extra={"attribute": name, "skipped": skipped, "kept": len(spans)},
        )

    return spans


def parse_response(
    text: str,
    language: str,
    document: Mapping[str, Any],
    requested: Sequence[Union[Attribute, str]],
) -> ScoreResult:
    """Builds a ScoreResult from a decoded analyze response.

    Args:
        text: Original request text (never taken from the response)
        language: Language used for the request
        document: Decoded JSON response body
        requested: Requested attributes, in request order

    Returns:
        ScoreResult with one score per requested attribute
    """
    attribute_scores = document.get("attributeScores")
    if not isinstance(attribute_scores, Mapping):
        attribute_scores = {}

    builder = ScoreResult.builder(text).languages([language])

    # Repeated requests for one attribute collapse to a single entry.
    names = dict.fromkeys(attribute_name(a) for a in requested)

    for name in names:
        entry = attribute_scores.get(name)

        value = _summary_score(entry)
        if math.isnan(value):
            logger.debug(
                "No usable summary score in response",
                extra={"attribute": name, "present": entry is not None},
            )

        builder.put_score(name, value)
        builder.add_all_spans(_span_annotations(entry, name))

    return builder.build()
