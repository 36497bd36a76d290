"""High-level operations API for the extension relay library."""

import logging
from typing import Any

import httpx

from extension_relay.core.client import forward_inference, read_error_body
from extension_relay.core.config import RelayConfig
from extension_relay.core.exceptions import ConfigurationError, InvalidRequestError, UpstreamError
from extension_relay.core.extract import extract_answer, extract_transcript
from extension_relay.core.payloads import (
    build_prompt,
    build_question_body,
    build_transcription_body,
    coerce_template,
)
from extension_relay.core.result import (
    GENERIC_API_ERROR,
    GENERIC_UPSTREAM_ERROR,
    Answer,
    AskResult,
    TranscribeResult,
    Transcript,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)

NO_QUESTION_MESSAGE = "No question provided."
NO_AUDIO_MESSAGE = "No audio provided."
MISSING_CREDENTIAL_MESSAGE = "HF_API_KEY not configured on server."


def _require_credential(config: RelayConfig) -> None:
    if not config.has_credential:
        raise ConfigurationError(MISSING_CREDENTIAL_MESSAGE)


async def _post(body: dict[str, Any], url: str, config: RelayConfig) -> httpx.Response | UpstreamFailure:
    """Single upstream attempt; transport errors and non-2xx replies become failures."""
    try:
        response = await forward_inference(body, url, config)
    except UpstreamError as e:
        return UpstreamFailure(500, e.message or GENERIC_UPSTREAM_ERROR, upstream=e.upstream)

    if not response.is_success:
        text = read_error_body(response)
        logger.warning(f"Upstream {url} returned {response.status_code}")
        return UpstreamFailure(response.status_code, text or GENERIC_API_ERROR, upstream=url)

    return response


def _parse_json(response: httpx.Response, url: str) -> Any | UpstreamFailure:
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Failed to parse upstream response from {url}: {e}")
        return UpstreamFailure(500, str(e) or GENERIC_UPSTREAM_ERROR, upstream=url)


async def ask_question(
    question: Any,
    config: RelayConfig,
    model: Any = None,
    prompt_template: Any = None,
) -> AskResult:
    """
    Relay a question to the inference API and return the normalized answer.

    Args:
        question: Question text; anything but a non-empty string is rejected
        config: Relay configuration
        model: Optional model id; the configured default is used when not a non-empty string
        prompt_template: Optional template with a placeholder for the question

    Returns:
        Answer on success, UpstreamFailure when the upstream call fails

    Raises:
        InvalidRequestError: If the question is missing
        ConfigurationError: If no upstream credential is configured
    """
    if not isinstance(question, str) or not question:
        raise InvalidRequestError(NO_QUESTION_MESSAGE)
    _require_credential(config)

    prompt = build_prompt(question, config, coerce_template(prompt_template))
    chosen_model = model if isinstance(model, str) and model else config.default_model
    body = build_question_body(prompt, chosen_model, config)
    url = config.effective_upstream_url

    outcome = await _post(body, url, config)
    if isinstance(outcome, UpstreamFailure):
        return outcome

    payload = _parse_json(outcome, url)
    if isinstance(payload, UpstreamFailure):
        return payload

    return Answer(text=extract_answer(payload))


async def transcribe_audio(audio_base64: Any, config: RelayConfig) -> TranscribeResult:
    """Relay base64 audio to the speech-to-text endpoint and return the transcript."""
    if not isinstance(audio_base64, str) or not audio_base64:
        raise InvalidRequestError(NO_AUDIO_MESSAGE)
    _require_credential(config)

    url = config.transcribe_url
    outcome = await _post(build_transcription_body(audio_base64), url, config)
    if isinstance(outcome, UpstreamFailure):
        return outcome

    payload = _parse_json(outcome, url)
    if isinstance(payload, UpstreamFailure):
        return payload

    return Transcript(text=extract_transcript(payload))
