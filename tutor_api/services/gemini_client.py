"""
Client for the Google Gemini generateContent REST endpoint.
"""

import json
from typing import Any, Dict

import requests

from ..config import Settings
from ..errors import ContentBlocked, UpstreamError
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error,
    redact_secret
)
import logging

logger = logging.getLogger(__name__)


class GeminiClient:
    """Sends one prompt to Gemini and returns the first candidate's text.

    No retries are made; every failure is raised once as ``UpstreamError``
    or ``ContentBlocked``.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.gemini_api_key
        self.endpoint = settings.gemini_endpoint
        self.model = settings.gemini_model
        self.timeout = settings.gemini_timeout_seconds

    def _redact(self, value: Any) -> str:
        return redact_secret(value, self.api_key)

    @measure_time
    def generate(self, prompt: str) -> str:
        """
        Generate a completion for ``prompt``.

        Args:
            prompt: Full prompt text

        Returns:
            Text of the first candidate

        Raises:
            UpstreamError: On a missing key, network failure, timeout,
                non-2xx status or malformed response
            ContentBlocked: When the response carries safety metadata
        """
        if not self.api_key:
            logger.error("GEMINI_API_KEY is not configured; refusing to call Gemini")
            raise UpstreamError(detail="GEMINI_API_KEY is not configured")

        log_processing_info("Sending request to Gemini", {
            "model": self.model,
            "prompt_length": len(prompt)
        })

        try:
            response = requests.post(
                self.endpoint,
                json={"contents": [{"parts": [{"text": prompt}]}]},
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            handle_processing_error("gemini_request", e, {"timeout": self.timeout}, secret=self.api_key)
            raise UpstreamError(detail=f"Gemini request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            handle_processing_error("gemini_request", e, {"endpoint": self.endpoint}, secret=self.api_key)
            raise UpstreamError(detail=f"No response from Gemini: {self._redact(e)}") from e

        log_processing_info("Received response from Gemini", {"status": response.status_code})

        data = self._parse_body(response)

        if not response.ok:
            self._raise_for_error_body(response.status_code, data)

        return self._extract_text(data)

    def _parse_body(self, response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            logger.error(
                f"Gemini returned a non-JSON body (status {response.status_code}): "
                f"{self._redact(response.text[:500])}"
            )
            if response.ok:
                raise UpstreamError(detail="Gemini returned a non-JSON body")
            return {}
        if not isinstance(data, dict):
            if response.ok:
                raise UpstreamError(detail="Gemini returned an unexpected JSON shape")
            return {}
        return data

    def _raise_for_error_body(self, status_code: int, data: Dict[str, Any]) -> None:
        safety_ratings = (data.get("promptFeedback") or {}).get("safetyRatings")
        if safety_ratings:
            logger.error(f"Gemini safety ratings: {self._redact(json.dumps(safety_ratings))}")
            raise ContentBlocked(detail=f"Gemini returned {status_code} with safety ratings")

        error = data.get("error") or {}
        message = error.get("message") if isinstance(error, dict) else error
        logger.error(f"Gemini API error response (status {status_code}): {self._redact(message or data)}")
        raise UpstreamError(detail=f"Gemini returned {status_code}: {self._redact(message)}")

    def _extract_text(self, data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            # Best effort: not every API version reports why nothing came back.
            feedback = data.get("promptFeedback") or {}
            if feedback.get("blockReason") or feedback.get("safetyRatings"):
                logger.error(f"Gemini blocked the prompt: {self._redact(json.dumps(feedback))}")
                raise ContentBlocked(detail=f"Prompt blocked: {feedback.get('blockReason', 'unspecified')}")
            logger.error(f"Gemini response has no candidates: {self._redact(json.dumps(data)[:500])}")
            raise UpstreamError(detail="Gemini response has no candidates")

        candidate = candidates[0] or {}
        parts = (candidate.get("content") or {}).get("parts") or []
        text = parts[0].get("text") if parts and isinstance(parts[0], dict) else None

        if not text:
            if candidate.get("finishReason") == "SAFETY":
                logger.error(
                    f"Gemini candidate stopped for safety: {self._redact(json.dumps(candidate.get('safetyRatings')))}"
                )
                raise ContentBlocked(detail="Candidate finished with SAFETY")
            logger.error(f"Gemini candidate has no text: {self._redact(json.dumps(candidate)[:500])}")
            raise UpstreamError(detail="Gemini candidate has no text")

        log_processing_info("Answer extracted from Gemini response", {"answer_length": len(text)})
        return text
