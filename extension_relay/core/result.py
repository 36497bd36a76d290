"""Explicit outcomes of an upstream call."""

from dataclasses import dataclass

GENERIC_UPSTREAM_ERROR = "Upstream error"
GENERIC_API_ERROR = "Hugging Face API error"


@dataclass(frozen=True)
class Answer:
    """Normalized answer text extracted from a successful upstream reply."""

    text: str


@dataclass(frozen=True)
class Transcript:
    """Trimmed transcript of a successful speech-to-text reply (may be empty)."""

    text: str


@dataclass(frozen=True)
class UpstreamFailure:
    """An upstream call that did not produce a usable reply.

    ``status_code`` is the status to surface to the caller: the upstream's
    own status for non-2xx replies, 500 for transport and parse failures.
    """

    status_code: int
    message: str
    upstream: str | None = None


AskResult = Answer | UpstreamFailure
TranscribeResult = Transcript | UpstreamFailure
