"""Minimal request/response schemas for the relay routes."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Uniform error body returned by every failing route."""

    error: str = Field(description="Human-readable error message")


class AskResponse(BaseModel):
    """Response for /api/ask."""

    answer: str = Field(description="Answer extracted from the inference API reply")


class TranscribeResponse(BaseModel):
    """Response for /api/transcribe."""

    transcript: str = Field(description="Transcribed text from audio (may be empty)")


class HealthResponse(BaseModel):
    status: str = "ok"


class InfoResponse(BaseModel):
    """Static description of the relay, served at /."""

    status: str = "ok"
    message: str
    version: str
    routes: list[str]
