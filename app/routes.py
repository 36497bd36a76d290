"""HTTP routes: question relay, transcription relay, health and info."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app import __version__
from app.schemas import AskResponse, ErrorResponse, HealthResponse, InfoResponse, TranscribeResponse
from extension_relay.core.config import RelayConfig
from extension_relay.core.exceptions import ConfigurationError, InvalidRequestError
from extension_relay.core.operations import ask_question, transcribe_audio
from extension_relay.core.result import GENERIC_UPSTREAM_ERROR, UpstreamFailure

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Invalid JSON in request body."

ROUTES = [
    "GET /health",
    "POST /api/ask",
    "POST /ask",
    "POST /api/transcribe",
]

router = APIRouter()


def get_relay_config(request: Request) -> RelayConfig:
    """Dependency: the frozen relay configuration built when the app was created."""
    return request.app.state.relay_config


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def is_json_content_type(content_type: str | None) -> bool:
    """True for ``application/json``, with or without parameters such as charset."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


async def read_json_object(request: Request) -> dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Only ``application/json`` bodies are parsed. Any other content type, an
    empty body or a JSON value that is not an object yields ``{}`` so the
    missing-field checks report the problem.

    Raises:
        InvalidRequestError: If the body is not valid JSON
    """
    if not is_json_content_type(request.headers.get("content-type")):
        return {}
    body_bytes = await request.body()
    if not body_bytes.strip():
        return {}
    try:
        body = json.loads(body_bytes)
    except ValueError as e:
        raise InvalidRequestError(INVALID_JSON_MESSAGE) from e
    return body if isinstance(body, dict) else {}


def log_body(request: Request, body: dict[str, Any]) -> None:
    if not request.app.state.log_request_bodies:
        return
    shown = {
        key: f"<{len(value)} chars>" if key == "audioBase64" and isinstance(value, str) else value
        for key, value in body.items()
    }
    logger.debug("Request body: %s", shown)


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse()


@router.get("/", response_model=InfoResponse)
async def info():
    return InfoResponse(
        message="Extension relay is running",
        version=__version__,
        routes=ROUTES,
    )


@router.post("/api/ask", response_model=AskResponse)
@router.post("/ask", response_model=AskResponse, include_in_schema=False)
async def ask(request: Request, config: RelayConfig = Depends(get_relay_config)):
    """
    Relay a question from the extension to the inference API.

    Body: ``{"question": str, "model"?: str, "promptTemplate"?: str}``.
    Responds ``{"answer": str}``, or ``{"error": str}`` with the status of
    whatever went wrong.
    """
    try:
        body = await read_json_object(request)
        log_body(request, body)
        result = await ask_question(
            body.get("question"),
            config,
            model=body.get("model"),
            prompt_template=body.get("promptTemplate"),
        )
    except InvalidRequestError as e:
        return error_response(400, e.message)
    except ConfigurationError as e:
        logger.error(e.message)
        return error_response(500, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error in ask: {e}")
        return error_response(500, str(e) or GENERIC_UPSTREAM_ERROR)

    if isinstance(result, UpstreamFailure):
        return error_response(result.status_code, result.message)
    return AskResponse(answer=result.text)


@router.post("/api/transcribe", response_model=TranscribeResponse)
async def transcribe(request: Request, config: RelayConfig = Depends(get_relay_config)):
    """
    Relay base64 audio to the speech-to-text model.

    Body: ``{"audioBase64": str}``. Responds ``{"transcript": str}``; an
    empty transcript is a valid result.
    """
    try:
        body = await read_json_object(request)
        log_body(request, body)
        result = await transcribe_audio(body.get("audioBase64"), config)
    except InvalidRequestError as e:
        return error_response(400, e.message)
    except ConfigurationError as e:
        logger.error(e.message)
        return error_response(500, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error in transcribe: {e}")
        return error_response(500, str(e) or GENERIC_UPSTREAM_ERROR)

    if isinstance(result, UpstreamFailure):
        return error_response(result.status_code, result.message)
    return TranscribeResponse(transcript=result.text)
