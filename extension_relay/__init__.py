"""Extension Relay - credentialed relay from browser extensions to a hosted inference API.

A small library that builds upstream requests for a question or a piece of
base64 audio, forwards them with a server-held bearer credential, and
normalizes whatever shape the inference API replies with.

Usage:
    >>> from extension_relay import Answer, RelayConfig, ask_question
    >>>
    >>> config = RelayConfig(api_key="hf_...")
    >>> result = await ask_question("What is a closure?", config)
    >>> if isinstance(result, Answer):
    ...     print(result.text)
"""

__version__ = "0.3.0"

# Public library API exports
from extension_relay.core.config import RelayConfig
from extension_relay.core.extract import extract_answer, extract_transcript
from extension_relay.core.operations import ask_question, transcribe_audio
from extension_relay.core.result import Answer, AskResult, TranscribeResult, Transcript, UpstreamFailure

# Export exceptions for library users
from extension_relay.core.exceptions import (
    ConfigurationError,
    InvalidRequestError,
    RelayError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)

__all__ = [
    "__version__",
    # Configuration
    "RelayConfig",
    # Operations
    "ask_question",
    "transcribe_audio",
    "extract_answer",
    "extract_transcript",
    # Results
    "Answer",
    "Transcript",
    "UpstreamFailure",
    "AskResult",
    "TranscribeResult",
    # Exceptions
    "RelayError",
    "ConfigurationError",
    "InvalidRequestError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "UpstreamUnreachableError",
]
