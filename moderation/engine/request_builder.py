# moderation/engine/request_builder.py

"""Outbound payload construction for the comments:analyze endpoint."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from moderation.core.definitions import Attribute, attribute_name

DEFAULT_LANGUAGE = "en"


@dataclass
class AnalyzeOptions:
    """Per-request options.

    Attributes:
        language: Single language code to evaluate (default "en")
        do_not_store: Ask the service not to retain the text (default True)
        client_token: Opaque token echoed back by the service
        community_id: Community the comment belongs to
        span_annotations: Request per-span scores
        session_id: Session identifier for abuse protection
        context: Surrounding texts (e.g. parent comments)
    """

    language: Optional[str] = None
    do_not_store: Optional[bool] = True
    client_token: Optional[str] = None
    community_id: Optional[str] = None
    span_annotations: Optional[bool] = None
    session_id: Optional[str] = None
    context: Optional[List[str]] = None


def resolve_language(options: Optional[AnalyzeOptions]) -> str:
    """Returns the effective request language, "en" when unset or blank."""
    if options is None or not options.language:
        return DEFAULT_LANGUAGE
    return options.language


def build_request_payload(
    text: str,
    attributes: Sequence[Union[Attribute, str]],
    options: Optional[AnalyzeOptions] = None,
) -> Dict[str, Any]:
    """Builds the JSON document for an analyze request.

    Args:
        text: Comment text to analyze
        attributes: Attributes to request, by enum or name
        options: Request options; None means defaults

    Returns:
        Payload dictionary; optional fields are omitted when unset
    """
    if options is None:
        options = AnalyzeOptions()

    payload: Dict[str, Any] = {
        "comment": {"text": text},
        "languages": [resolve_language(options)],
        "requestedAttributes": {attribute_name(a): {} for a in attributes},
    }

    optional_fields = {
        "doNotStore": options.do_not_store,
        "clientToken": options.client_token,
        "communityId": options.community_id,
        "spanAnnotations": options.span_annotations,
        "sessionId": options.session_id,
    }
    payload.update({k: v for k, v in optional_fields.items() if v is not None})

    if options.context:
        payload["context"] = {"entries": [{"text": c} for c in options.context]}

    return payload
