# moderation/__init__.py

"""Client library for the Perspective comment analysis API."""

from moderation.core.definitions import Attribute, attribute_name
from moderation.core.domain import ScoreResult, ScoreResultBuilder, SpanAnnotation
from moderation.core.exceptions import (
    ConfigurationError,
    ModerationError,
    ResponseFormatError,
    TransportError,
    ValidationError,
)
from moderation.engine.request_builder import AnalyzeOptions
from moderation.service.client import AnalysisClient

__all__ = [
    "AnalysisClient",
    "AnalyzeOptions",
    "Attribute",
    "ConfigurationError",
    "ModerationError",
    "ResponseFormatError",
    "ScoreResult",
    "ScoreResultBuilder",
    "SpanAnnotation",
    "TransportError",
    "ValidationError",
    "attribute_name",
]
