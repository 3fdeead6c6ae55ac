# moderation/service/client.py

"""Synchronous client for the comments:analyze endpoint."""

import dataclasses
import logging
from typing import Any, Dict, Optional, Sequence, Union

import httpx

from moderation.core.definitions import Attribute
from moderation.core.domain import ScoreResult
from moderation.core.exceptions import (
    ConfigurationError,
    ResponseFormatError,
    TransportError,
    ValidationError,
)
from moderation.engine.request_builder import (
    AnalyzeOptions,
    build_request_payload,
    resolve_language,
)
from moderation.engine.response_parser import parse_response
from moderation.service.config import DEFAULT_ENDPOINT, Settings
from moderation.service.config import settings as default_settings

logger = logging.getLogger(__name__)


class AnalysisClient:
    """Sends one analyze request per call and parses the result.

    Holds no per-call state, so an instance can be reused for any number of
    calls; concurrent use is as safe as the underlying httpx.Client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key; falls back to settings.api_key
            endpoint: Endpoint URL override; blank means the public endpoint
            http_client: Pre-configured httpx client (not closed by us)
            settings: Settings to use instead of the module singleton

        Raises:
            ConfigurationError: If no API key is available.
        """
        self._settings = settings or default_settings

        key = (
            api_key
            if api_key is not None
            else self._settings.api_key.get_secret_value()
        )
        if not key:
            raise ConfigurationError("An API key is required")

        self._api_key = key
        self.endpoint = endpoint or self._settings.endpoint or DEFAULT_ENDPOINT

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else self._default_http()

        logger.debug(
            "AnalysisClient created",
            extra={"endpoint": self.endpoint, "owns_http_client": self._owns_http},
        )

    def _default_http(self) -> httpx.Client:
        s = self._settings
        timeout = httpx.Timeout(
            connect=s.connect_timeout,
            read=s.read_timeout,
            write=s.write_timeout,
            pool=s.pool_timeout,
        )
        return httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Closes the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "AnalysisClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Public API

    def toxicity(self, text: str) -> ScoreResult:
        """Analyzes toxicity only, with default options."""
        return self.analyze(text, [Attribute.TOXICITY])

    def analyze(
        self,
        text: str,
        attributes: Sequence[Union[Attribute, str]],
        options: Optional[AnalyzeOptions] = None,
    ) -> ScoreResult:
        """Scores text for the requested attributes.

        Args:
            text: Comment text to analyze
            attributes: Attributes to request (e.g. TOXICITY, INSULT)
            options: Language (default "en"), doNotStore (default True), etc.

        Returns:
            Immutable ScoreResult; attributes the service did not score are NaN

        Raises:
            ValidationError: If text or attributes are missing or empty
            TransportError: If the request fails or returns a non-2xx status
            ResponseFormatError: If the body is not a JSON object
        """
        if not isinstance(text, str) or not text:
            raise ValidationError("Text to analyze cannot be empty")

        if attributes is None or isinstance(attributes, str):
            raise ValidationError("At least one attribute is required")

        attributes = list(attributes)
        if not attributes:
            raise ValidationError("At least one attribute is required")

        if options is None:
            options = AnalyzeOptions()
        if not options.language:
            options = dataclasses.replace(
                options, language=self._settings.default_language
            )

        payload = build_request_payload(text, attributes, options)
        language = resolve_language(options)

        logger.info(
            "Sending analyze request",
            extra={
                "text_length": len(text),
                "attributes": list(payload["requestedAttributes"]),
                "language": language,
            },
        )

        document = self._post(payload)
        result = parse_response(text, language, document, attributes)

        logger.info(
            "Analyze request completed",
            extra={
                "text_length": len(text),
                "score_count": len(result.scores),
                "span_count": len(result.span_annotations),
            },
        )

        return result

    # Transport

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POSTs the payload and returns the decoded JSON object."""
        try:
            response = self._http.post(
                self.endpoint, params={"key": self._api_key}, json=payload
            )
        except httpx.RequestError as e:
            logger.error(
                "Analyze request failed before a response was received",
                exc_info=True,
                extra={"endpoint": self.endpoint},
            )
            raise TransportError(f"Analyze request failed: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(
                "Analyze API returned an error status",
                extra={"status_code": response.status_code, "body_length": len(body)},
            )
            raise TransportError(
                f"Analyze API error: HTTP {response.status_code} - "
                f"{body or 'no response body'}",
                status_code=response.status_code,
                body=body,
            )

        if not response.content.strip():
            return {}

        try:
            document = response.json()
        except ValueError as e:
            logger.error(
                "Analyze API returned a non-JSON body",
                extra={"status_code": response.status_code},
            )
            raise ResponseFormatError("Response body is not valid JSON") from e

        if not isinstance(document, dict):
            raise ResponseFormatError(
                f"Expected a JSON object, got {type(document).__name__}"
            )

        return document
